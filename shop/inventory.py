"""Stock bookkeeping for order placement.

Stock is decremented with a single conditional update (``stock >= quantity``
and ``$inc`` in one ``find_one_and_update``) so concurrent orders cannot both
pass the check against the same units. The order document is written after
the units are reserved; if that write fails the units are put back.
"""
import logging

from mongoengine.errors import ValidationError as DocumentValidationError

from .exceptions import BACKEND_ERRORS, InsufficientStock, OrderPlacementError, ShopError
from .models import Order, Product
from .utils import order_total, stock_status

logger = logging.getLogger(__name__)


def _refresh_status(product_id, stock):
    # Skipped when another writer has moved the stock since; that writer sets its own status
    try:
        Product.objects(id=product_id, stock=stock).update_one(set__status=stock_status(stock))
    except BACKEND_ERRORS:
        logger.exception('Refreshing status of product %s failed', product_id)


def reserve_stock(product_id, quantity):
    """Take ``quantity`` units off the product, or raise InsufficientStock.

    Returns the product as stored after the decrement. The status label is
    left to the caller.
    """
    # Raw $inc: a negative increment would fail the field's min_value check
    updated = Product.objects(id=product_id, stock__gte=quantity).modify(
        new=True, __raw__={'$inc': {'stock': -quantity}},
    )
    if updated is None:
        current = Product.objects(id=product_id).only('stock').first()
        raise InsufficientStock(current.stock if current else 0, quantity)
    return updated


def release_stock(product_id, quantity):
    restored = Product.objects(id=product_id).modify(new=True, __raw__={'$inc': {'stock': quantity}})
    if restored is not None:
        _refresh_status(restored.id, restored.stock)
    return restored


def place_order(product, quantity, customer):
    """Record an order for ``quantity`` units of ``product``.

    ``customer`` holds customer_name, customer_email, customer_phone and
    shipping_address. The product passed in is the caller's snapshot; its
    stock and status are updated in place to the stored values.
    """
    quantity = int(quantity)
    if quantity < 1:
        raise ShopError('Quantity must be at least 1')
    if quantity > product.stock:
        raise InsufficientStock(product.stock, quantity)

    order = Order(
        customer_name=customer['customer_name'],
        customer_email=customer['customer_email'],
        customer_phone=customer['customer_phone'],
        shipping_address=customer['shipping_address'],
        product_id=str(product.id),
        product_name=product.name,
        quantity=quantity,
        total_amount=order_total(product.price, quantity),
        status='Pending',
    )
    order.validate()

    reserved = reserve_stock(product.id, quantity)
    try:
        order.save()
    except BACKEND_ERRORS + (DocumentValidationError,) as exc:
        logger.exception('Saving order for product %s failed; restoring %d units', product.id, quantity)
        release_stock(product.id, quantity)
        raise OrderPlacementError('Failed to place order. Please try again.') from exc

    _refresh_status(reserved.id, reserved.stock)
    product.stock = reserved.stock
    product.status = stock_status(reserved.stock)
    logger.info('Order %s placed: %d x %s, %d left', order.id, quantity, product.name, product.stock)
    return order
