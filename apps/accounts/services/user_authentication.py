"""Staff sign-in service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.accounts.models import STAFF_ROLES
from apps.audit.services import record_audit

from .exceptions import InvalidCredentialsError, InactiveAccountError, SignInNotAllowedError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_staff(*, email: str, password: str) -> User:
    """
    Authenticate a staff member with email and password.

    Uses select_for_update() to prevent race conditions when updating last_login.

    Args:
        email: User's email, matched case-insensitively
        password: User's password

    Returns:
        Authenticated User instance

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
        SignInNotAllowedError: If the role has no staff access
    """
    try:
        user = (
            User.objects
            .select_for_update()
            .get(email__iexact=email.strip())
        )
    except User.DoesNotExist:
        logger.warning("Failed sign-in for unknown email %s", email)
        raise InvalidCredentialsError("Invalid credentials")

    if not user.check_password(password):
        logger.warning("Failed sign-in for %s", user.email)
        raise InvalidCredentialsError("Invalid credentials")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    if user.role not in STAFF_ROLES:
        raise SignInNotAllowedError("This account cannot sign in here")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    record_audit(
        actor=user,
        action='USER_LOGIN',
        entity_type='User',
        entity_id=user.id,
        metadata={'role': user.role},
    )
    logger.info("User %s signed in as %s", user.email, user.role)

    return user
