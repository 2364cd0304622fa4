"""Staff account creation and password management."""

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import transaction

from apps.audit.services import record_audit

from .exceptions import (
    DuplicateEmailError,
    InvalidAccountDataError,
    InvalidCredentialsError,
    PasswordConfirmationError,
)

User = get_user_model()
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def normalize_account_email(email: str) -> str:
    email = (email or '').strip().lower()
    try:
        validate_email(email)
    except DjangoValidationError:
        raise InvalidAccountDataError("A valid email is required")
    return email


def create_staff_account(*, email: str, password: str, full_name: str, role: str) -> User:
    """
    Create a staff user account.

    Raises:
        InvalidAccountDataError: Missing name, bad email or short password
        DuplicateEmailError: If the email is already registered
    """
    full_name = (full_name or '').strip()
    if not full_name:
        raise InvalidAccountDataError("Name is required")

    email = normalize_account_email(email)

    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidAccountDataError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateEmailError("A user with this email already exists")

    user = User.objects.create_user(
        email=email,
        password=password,
        full_name=full_name,
        role=role,
    )
    logger.info("Created %s account %s", role, email)
    return user


@transaction.atomic
def change_password(*, user: User, current_password: str, new_password: str, confirm_password: str) -> None:
    """
    Change the password of a signed-in user.

    Raises:
        InvalidCredentialsError: If the current password is wrong
        PasswordConfirmationError: If the confirmation does not match
        InvalidAccountDataError: If Django's validators reject the new password
    """
    if not user.check_password(current_password):
        raise InvalidCredentialsError("Current password is incorrect")

    if new_password != confirm_password:
        raise PasswordConfirmationError("Passwords do not match")

    try:
        validate_password(new_password, user=user)
    except DjangoValidationError as e:
        raise InvalidAccountDataError(' '.join(e.messages))

    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])

    record_audit(
        actor=user,
        action='PASSWORD_CHANGED',
        entity_type='User',
        entity_id=user.id,
    )
    logger.info("Password changed for %s", user.email)
