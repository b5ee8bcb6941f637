"""Email/password accounts on top of django.contrib.auth.

Auth failures are raised as AuthError with a code; views map the code to a
form field message, or to a page notification for unknown codes.
"""
import logging

from django.contrib.auth import authenticate, get_user_model, login, logout, update_session_auth_hash
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from .exceptions import AuthError, BACKEND_ERRORS
from .models import UserProfile

logger = logging.getLogger(__name__)


def _normalize(email):
    return (email or '').strip().lower()


def sign_up(request, email, password):
    User = get_user_model()
    email = _normalize(email)
    if User.objects.filter(username__iexact=email).exists():
        raise AuthError('email-already-in-use', default='Signup failed')
    try:
        validate_password(password)
    except ValidationError as exc:
        raise AuthError('weak-password') from exc
    # A failed profile write rolls the auth user back, so the email can be retried
    with transaction.atomic():
        user = User.objects.create_user(username=email, email=email, password=password)
        if not UserProfile.objects(email=email).first():
            UserProfile(email=email, role='customer').save()
    login(request, user)
    logger.info('New customer account %s', email)
    return user


def sign_in(request, email, password):
    User = get_user_model()
    email = _normalize(email)
    try:
        user = User.objects.get(username__iexact=email)
    except User.DoesNotExist:
        raise AuthError('user-not-found')
    authed = authenticate(request, username=user.get_username(), password=password)
    if authed is None:
        if not user.check_password(password):
            raise AuthError('wrong-password')
        raise AuthError('user-disabled')
    login(request, authed)
    return authed


def sign_out(request):
    logout(request)


def profile_for(user):
    if not user or not user.is_authenticated:
        return None
    return UserProfile.objects(email=_normalize(user.email or user.get_username())).first()


def is_admin(user):
    if not user or not user.is_authenticated:
        return False
    if user.is_staff:
        return True
    try:
        profile = profile_for(user)
    except BACKEND_ERRORS:
        logger.exception('Profile lookup failed for %s', user.get_username())
        return False
    return bool(profile and profile.is_admin)


def update_profile(request, display_name, email, current_password='', new_password='', confirm_password=''):
    """Update display name, email and (optionally) password of the signed-in user.

    Everything is checked before anything is written.
    """
    User = get_user_model()
    user = request.user
    email = _normalize(email)
    old_email = _normalize(user.email or user.get_username())

    if email != old_email and User.objects.filter(username__iexact=email).exclude(pk=user.pk).exists():
        raise AuthError('email-already-in-use')
    if new_password:
        if new_password != confirm_password:
            raise AuthError('passwords-mismatch')
        if len(new_password) < 6:
            raise AuthError('password-too-short')
        if not user.check_password(current_password):
            raise AuthError('invalid-current-password')

    renamed = False
    if email != old_email:
        # Rename the profile first; a clash leaves the auth user untouched
        renamed = bool(UserProfile.objects(email=old_email).update_one(set__email=email))
        user.email = email
        user.username = email
    user.first_name = display_name or ''
    if new_password:
        user.set_password(new_password)
    try:
        user.save()
    except DatabaseError:
        if renamed:
            UserProfile.objects(email=email).update_one(set__email=old_email)
        raise
    if new_password:
        update_session_auth_hash(request, user)
    return user
