"""Domain-level exceptions.

All failures are expressed as subclasses of DomainException so the CLI
layer can catch them uniformly and display user-friendly messages.
None of them is fatal: a failed operation leaves the core in its
last-known-good state and the caller may simply retry.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated (detected locally)."""


class MissingCustomerNameError(ValidationError):
    """An invoice cannot be generated without a customer name."""


class NoLineItemsError(ValidationError):
    """An invoice cannot be generated without at least one line item."""


class PersistenceError(DomainException):
    """The persistence backend rejected or failed an operation."""


class EntityNotFoundError(PersistenceError):
    """A requested entity does not exist in the backend."""


class AuthError(DomainException):
    """The credential provider rejected or failed an operation."""


class NotAuthenticatedError(AuthError):
    """An operation needs an authenticated session and none is active."""


class ConfigurationError(DomainException):
    """Runtime settings are missing or inconsistent."""
