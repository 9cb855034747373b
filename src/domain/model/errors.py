"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class PermissionDeniedError(DomainError):
    """Caller lacks permission for the requested action."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class DuplicateEmailError(DuplicateError):
    """A user with this email is already on file."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("User with this email already exists")


class ForbiddenError(PermissionDeniedError):
    """Caller attempted a mutation outside their role's scope."""


class InvalidCredentialsError(DomainError):
    """Wrong email/password combination.

    Raised for both unknown emails and wrong passwords so callers
    cannot tell the two apart.
    """

    def __init__(self):
        super().__init__("Invalid email or password")


class AccountDisabledError(DomainError):
    """The account exists but has been deactivated."""

    def __init__(self):
        super().__init__("Account is disabled. Please contact support.")


class NotAllowedError(DomainError):
    """Sign-in or registration blocked by a global settings gate."""


class ProviderError(DomainError):
    """Identity provider or document store failed unexpectedly."""
