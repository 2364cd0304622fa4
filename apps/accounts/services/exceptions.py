"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class SignInNotAllowedError(AccountsServiceError):
    """Raised when the account's role has no staff surface to sign in to."""
    pass


class DuplicateEmailError(AccountsServiceError):
    """Raised when an account with the email already exists."""
    pass


class InvalidAccountDataError(AccountsServiceError):
    """Raised when new account details fail validation."""
    pass


class PasswordConfirmationError(AccountsServiceError):
    """Raised when password confirmation fails."""
    pass
