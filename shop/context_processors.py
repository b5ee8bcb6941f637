import logging

from .accounts import profile_for
from .exceptions import BACKEND_ERRORS

logger = logging.getLogger(__name__)


def store_chrome(request):
    """Admins browse without the public navigation and footer."""
    user = getattr(request, 'user', None)
    profile = None
    try:
        profile = profile_for(user)
    except BACKEND_ERRORS:
        logger.exception('Profile lookup failed')
    is_admin_user = bool(user and user.is_authenticated and (user.is_staff or (profile and profile.is_admin)))
    return {
        'current_profile': profile,
        'is_admin_user': is_admin_user,
        'show_public_chrome': not is_admin_user,
    }
