from decimal import Decimal

import mongomock
import pytest
from mongoengine import connect, disconnect


@pytest.fixture(scope='session', autouse=True)
def mongo_connection():
    # Replace the connection registered by ShopConfig.ready() with an in-memory one
    disconnect(alias='default')
    connect('glamstore_test', alias='default', mongo_client_class=mongomock.MongoClient)
    yield
    disconnect(alias='default')


@pytest.fixture(autouse=True)
def clean_collections(mongo_connection):
    yield
    from shop.models import Order, Product, Review, UserProfile
    for document in (Product, Order, Review, UserProfile):
        document.drop_collection()


@pytest.fixture
def make_product():
    from shop.models import Product

    def _make(**kwargs):
        fields = {
            'name': 'Silk Flawless Foundation',
            'category': 'Face',
            'price': Decimal('10.00'),
            'stock': 5,
            'description': 'Lightweight liquid foundation',
        }
        fields.update(kwargs)
        product = Product(**fields)
        product.save()
        return product

    return _make


@pytest.fixture
def make_order():
    from shop.models import Order

    def _make(product_id, **kwargs):
        fields = {
            'customer_name': 'Ayesha Khan',
            'customer_email': 'ayesha@example.com',
            'customer_phone': '+92 300 1234567',
            'shipping_address': '12 Mall Road, Lahore',
            'product_id': str(product_id),
            'product_name': 'Silk Flawless Foundation',
            'quantity': 1,
            'total_amount': Decimal('10.00'),
        }
        fields.update(kwargs)
        order = Order(**fields)
        order.save()
        return order

    return _make


@pytest.fixture
def customer_data():
    return {
        'customer_name': 'Ayesha Khan',
        'customer_email': 'ayesha@example.com',
        'customer_phone': '+92 300 1234567',
        'shipping_address': '12 Mall Road, Lahore',
    }


@pytest.fixture
def customer(django_user_model):
    from shop.models import UserProfile
    user = django_user_model.objects.create_user(
        username='shopper@example.com', email='shopper@example.com', password='glow-up-2024',
    )
    UserProfile(email='shopper@example.com', role='customer').save()
    return user


@pytest.fixture
def shop_admin(django_user_model):
    from shop.models import UserProfile
    user = django_user_model.objects.create_user(
        username='owner@example.com', email='owner@example.com', password='admin-pass-99',
    )
    UserProfile(email='owner@example.com', role='admin').save()
    return user


@pytest.fixture
def shop_admin_client(client, shop_admin):
    client.force_login(shop_admin)
    return client
