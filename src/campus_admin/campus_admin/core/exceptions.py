class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials or ID tokens are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when an account or document does not exist."""


class WeakPasswordError(ValidationError):
    """Raised when the identity provider rejects a password as too weak."""


class AccountExistsError(ValidationError):
    """Raised when an account with the same email already exists."""


class ToastProviderError(RuntimeError):
    """Raised when the toast accessor is used outside of a provider."""


class CredentialsMissingError(RuntimeError):
    """Raised when the Firebase service-account key cannot be loaded."""
