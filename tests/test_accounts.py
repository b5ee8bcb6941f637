import pytest
from django.contrib.auth.models import AnonymousUser
from django.db import DatabaseError
from django.contrib.sessions.middleware import SessionMiddleware

from shop.accounts import is_admin, profile_for, sign_in, sign_up, update_profile
from shop.exceptions import AuthError
from mongoengine.errors import NotUniqueError
from pymongo.errors import PyMongoError

from shop.models import UserProfile

pytestmark = pytest.mark.django_db


@pytest.fixture
def session_request(rf):
    request = rf.post('/')
    SessionMiddleware(lambda r: None).process_request(request)
    request.session.save()
    request.user = AnonymousUser()
    return request


def test_sign_up_creates_user_and_customer_profile(session_request, django_user_model):
    user = sign_up(session_request, 'New.Shopper@Example.com', 'rosy-cheeks-7')

    assert user.username == 'new.shopper@example.com'
    assert django_user_model.objects.filter(email='new.shopper@example.com').exists()
    profile = UserProfile.objects.get(email='new.shopper@example.com')
    assert profile.role == 'customer'
    assert session_request.user == user


def test_sign_up_with_taken_email(session_request, customer):
    with pytest.raises(AuthError) as excinfo:
        sign_up(session_request, 'shopper@example.com', 'another-pass-1')

    assert excinfo.value.code == 'email-already-in-use'
    assert excinfo.value.field == 'email'
    assert excinfo.value.message == 'Email already in use'


def test_sign_up_with_weak_password(session_request):
    with pytest.raises(AuthError) as excinfo:
        sign_up(session_request, 'numbers@example.com', '12345678')

    assert excinfo.value.field == 'password'
    assert excinfo.value.message == 'Weak password'


def test_sign_in_unknown_user(session_request):
    with pytest.raises(AuthError) as excinfo:
        sign_in(session_request, 'nobody@example.com', 'whatever-1')

    assert (excinfo.value.field, excinfo.value.message) == ('email', 'User not found')


def test_sign_in_wrong_password(session_request, customer):
    with pytest.raises(AuthError) as excinfo:
        sign_in(session_request, 'shopper@example.com', 'not-my-password')

    assert (excinfo.value.field, excinfo.value.message) == ('password', 'Wrong password')


def test_sign_in_inactive_user_falls_back_to_generic_message(session_request, customer):
    customer.is_active = False
    customer.save()

    with pytest.raises(AuthError) as excinfo:
        sign_in(session_request, 'shopper@example.com', 'glow-up-2024')

    assert excinfo.value.field is None
    assert excinfo.value.message == 'Login failed'


def test_sign_in_is_case_insensitive_on_email(session_request, customer):
    user = sign_in(session_request, 'SHOPPER@example.com', 'glow-up-2024')
    assert user == customer


def test_role_lookup(customer, shop_admin):
    assert profile_for(customer).role == 'customer'
    assert is_admin(shop_admin) is True
    assert is_admin(customer) is False
    assert is_admin(AnonymousUser()) is False


def test_staff_users_are_admins_without_profile(django_user_model):
    staff = django_user_model.objects.create_user(username='staff@example.com', email='staff@example.com', is_staff=True)
    assert is_admin(staff) is True


def test_update_profile_changes_name_email_and_password(session_request, customer):
    session_request.user = customer

    update_profile(
        session_request,
        display_name='Ayesha',
        email='ayesha.k@example.com',
        current_password='glow-up-2024',
        new_password='brand-new-pass',
        confirm_password='brand-new-pass',
    )

    customer.refresh_from_db()
    assert customer.first_name == 'Ayesha'
    assert customer.username == 'ayesha.k@example.com'
    assert customer.check_password('brand-new-pass')
    assert UserProfile.objects(email='ayesha.k@example.com').count() == 1
    assert UserProfile.objects(email='shopper@example.com').count() == 0


@pytest.mark.parametrize('current, new, confirm, field', [
    ('glow-up-2024', 'brand-new-pass', 'different-pass', 'confirm_password'),
    ('glow-up-2024', 'abc', 'abc', 'new_password'),
    ('wrong-current', 'brand-new-pass', 'brand-new-pass', 'current_password'),
])
def test_update_profile_password_checks(session_request, customer, current, new, confirm, field):
    session_request.user = customer

    with pytest.raises(AuthError) as excinfo:
        update_profile(session_request, 'Ayesha', 'shopper@example.com', current, new, confirm)

    assert excinfo.value.field == field
    customer.refresh_from_db()
    assert customer.first_name == ''
    assert customer.check_password('glow-up-2024')


def test_update_profile_rejects_email_of_another_user(session_request, customer, shop_admin):
    session_request.user = customer

    with pytest.raises(AuthError) as excinfo:
        update_profile(session_request, '', 'owner@example.com')

    assert excinfo.value.code == 'email-already-in-use'


def test_sign_up_rolls_back_user_when_profile_write_fails(session_request, django_user_model, monkeypatch):
    def refuse(self, *args, **kwargs):
        raise PyMongoError('write refused')

    monkeypatch.setattr(UserProfile, 'save', refuse)

    with pytest.raises(PyMongoError):
        sign_up(session_request, 'late@example.com', 'rosy-cheeks-7')

    assert not django_user_model.objects.filter(username='late@example.com').exists()
    assert not session_request.user.is_authenticated


def test_update_profile_email_clash_in_profiles_leaves_user_unchanged(session_request, customer):
    UserProfile(email='taken@example.com', role='customer').save()
    session_request.user = customer

    with pytest.raises(NotUniqueError):
        update_profile(session_request, 'Ayesha', 'taken@example.com')

    customer.refresh_from_db()
    assert customer.username == 'shopper@example.com'
    assert customer.first_name == ''
    assert UserProfile.objects(email='shopper@example.com').count() == 1


def test_update_profile_restores_profile_email_when_user_save_fails(session_request, customer, django_user_model, monkeypatch):
    session_request.user = customer

    def refuse(self, *args, **kwargs):
        raise DatabaseError('database is locked')

    monkeypatch.setattr(django_user_model, 'save', refuse)

    with pytest.raises(DatabaseError):
        update_profile(session_request, 'Ayesha', 'ayesha.k@example.com')

    assert UserProfile.objects(email='shopper@example.com').count() == 1
    assert UserProfile.objects(email='ayesha.k@example.com').count() == 0
