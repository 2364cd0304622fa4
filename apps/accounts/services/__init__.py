"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    SignInNotAllowedError,
    DuplicateEmailError,
    InvalidAccountDataError,
    PasswordConfirmationError,
)
from .user_authentication import authenticate_staff
from .account_management import (
    change_password,
    create_staff_account,
    normalize_account_email,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'SignInNotAllowedError',
    'DuplicateEmailError',
    'InvalidAccountDataError',
    'PasswordConfirmationError',
    # Services
    'authenticate_staff',
    'change_password',
    'create_staff_account',
    'normalize_account_email',
]
