from mongoengine.errors import OperationError
from pymongo.errors import PyMongoError

# Failures talking to the document store
BACKEND_ERRORS = (OperationError, PyMongoError)


class ShopError(Exception):
    """Base class for errors shown to shoppers and admins."""


class InsufficientStock(ShopError):
    def __init__(self, available, requested):
        self.available = available
        self.requested = requested
        super().__init__(f"Only {available} items available in stock")


class OrderPlacementError(ShopError):
    pass


# code -> (form field, message); field None means a page-level notification
AUTH_ERRORS = {
    'email-already-in-use': ('email', 'Email already in use'),
    'weak-password': ('password', 'Weak password'),
    'user-not-found': ('email', 'User not found'),
    'wrong-password': ('password', 'Wrong password'),
    'invalid-current-password': ('current_password', 'Current password is incorrect'),
    'passwords-mismatch': ('confirm_password', "New passwords don't match"),
    'password-too-short': ('new_password', 'Password must be at least 6 characters'),
}


class AuthError(ShopError):
    def __init__(self, code, default='Login failed'):
        self.code = code
        self.field, self.message = AUTH_ERRORS.get(code, (None, default))
        super().__init__(self.message)
