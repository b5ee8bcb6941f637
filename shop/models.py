import datetime
from mongoengine import Document, StringField, IntField, DecimalField, DateTimeField, BooleanField, EmailField

from .utils import PRODUCT_STATUSES, OUT_OF_STOCK, stock_status

ORDER_STATUSES = ('Pending', 'Confirmed', 'Shipped', 'Delivered')
ROLES = ('customer', 'admin')


class Product(Document):
    name = StringField(max_length=200, required=True)
    category = StringField(max_length=100, required=True)
    price = DecimalField(min_value=0, precision=2, required=True)
    stock = IntField(min_value=0, default=0)
    status = StringField(choices=PRODUCT_STATUSES, default=OUT_OF_STOCK)
    description = StringField()
    image = StringField()  # URL or static path
    featured = BooleanField(default=False)
    created_at = DateTimeField(default=datetime.datetime.now)

    meta = {'collection': 'products', 'indexes': ['category', 'name', 'featured']}

    def clean(self):
        self.status = stock_status(self.stock)


class Order(Document):
    customer_name = StringField(max_length=200, required=True)
    customer_email = EmailField(required=True)
    customer_phone = StringField(max_length=30, required=True)
    shipping_address = StringField(required=True)
    # Plain id, not a ReferenceField: orders outlive deleted products
    product_id = StringField(required=True)
    product_name = StringField(max_length=200)
    quantity = IntField(min_value=1, required=True)
    total_amount = DecimalField(min_value=0, precision=2, required=True)
    order_date = DateTimeField(default=datetime.datetime.now)
    status = StringField(choices=ORDER_STATUSES, default='Pending')

    meta = {'collection': 'orders', 'indexes': ['product_id', 'status', 'order_date', 'customer_email']}


class Review(Document):
    rating = IntField(min_value=1, max_value=5, required=True)
    comment = StringField(required=True)
    name = StringField(max_length=100, required=True)
    email = StringField(max_length=150)
    created_at = DateTimeField(default=datetime.datetime.now)

    meta = {'collection': 'reviews', 'indexes': ['created_at']}


class UserProfile(Document):
    email = StringField(max_length=150, required=True, unique=True)
    role = StringField(choices=ROLES, default='customer')
    created_at = DateTimeField(default=datetime.datetime.now)

    meta = {'collection': 'users'}

    @property
    def is_admin(self):
        return self.role == 'admin'
