from collections import Counter
from decimal import Decimal

from .models import ORDER_STATUSES, Order, UserProfile
from .utils import LOW_STOCK


def load_orders():
    return list(Order.objects().order_by('-order_date'))


def visible_orders(orders, products):
    """Orders whose product still exists. Orphans are hidden, never deleted."""
    product_ids = {str(p.id) for p in products}
    return [o for o in orders if o.product_id in product_ids]


def dashboard_stats(orders, products, total_customers=0):
    return {
        'total_sales': sum((Decimal(str(o.total_amount or 0)) for o in orders), Decimal('0.00')),
        'total_orders': len(orders),
        'pending_orders': sum(1 for o in orders if o.status == 'Pending'),
        'total_products': len(products),
        'low_stock_products': sum(1 for p in products if p.status == LOW_STOCK),
        'featured_products': sum(1 for p in products if p.featured),
        'total_customers': total_customers,
    }


def set_order_status(order, status):
    if status not in ORDER_STATUSES:
        raise ValueError(f"Unknown order status: {status}")
    order.update(set__status=status)
    order.status = status
    return order


def load_customers():
    return list(UserProfile.objects(role='customer').order_by('-created_at'))


def customers_with_order_counts(customers, orders):
    counts = Counter((o.customer_email or '').lower() for o in orders)
    return [(c, counts.get(c.email.lower(), 0)) for c in customers]
