import re
from decimal import Decimal, InvalidOperation

from django.conf import settings

OUT_OF_STOCK = 'Out of Stock'
LOW_STOCK = 'Low Stock'
IN_STOCK = 'In Stock'
PRODUCT_STATUSES = (OUT_OF_STOCK, LOW_STOCK, IN_STOCK)

CENTS = Decimal('0.01')
LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def low_stock_threshold():
    return int(getattr(settings, 'LOW_STOCK_THRESHOLD', 20))


def stock_status(stock, threshold=None):
    """Label for a stock level: empty, at or under the threshold, or above it."""
    if threshold is None:
        threshold = low_stock_threshold()
    stock = int(stock or 0)
    if stock <= 0:
        return OUT_OF_STOCK
    if stock <= threshold:
        return LOW_STOCK
    return IN_STOCK


def delivery_fee():
    return Decimal(str(getattr(settings, 'DELIVERY_FEE', '0') or '0')).quantize(CENTS)


def order_total(price, quantity, fee=None):
    if fee is None:
        fee = delivery_fee()
    return (Decimal(str(price)) * int(quantity) + fee).quantize(CENTS)


def coerce_price(value):
    # Form text that is not a usable amount is stored as 0
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal('0.00')
    if not price.is_finite() or price < 0:
        return Decimal('0.00')
    return price.quantize(CENTS)


def coerce_stock(value):
    # Leading integer only: "5.5" is 5, "12 pcs" is 12
    match = LEADING_INT.match(str(value or ''))
    if not match:
        return 0
    return max(int(match.group(1)), 0)
