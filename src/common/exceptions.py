"""Domain error taxonomy shared by the registration and finance services."""

from enum import StrEnum

from django.utils.translation import gettext_lazy as _


class ErrorCode(StrEnum):
    """Machine-readable error codes returned to API callers."""

    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    TIER_SOLD_OUT = "tier_sold_out"
    DUPLICATE_REGISTRATION = "duplicate_registration"
    CONFIGURATION_ERROR = "configuration_error"
    TRANSIENT_STORE_ERROR = "transient_store_error"


class DomainError(Exception):
    """Base domain error with a code and a user-safe message."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    default_message = _("The request could not be processed.")

    def __init__(self, message: str | None = None, **context: object) -> None:
        self.message = str(message if message is not None else self.default_message)
        self.context = context
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class RegistrationValidationError(DomainError):
    """Malformed or incomplete input, rejected before any transaction starts."""

    code = ErrorCode.VALIDATION_ERROR
    default_message = _("Invalid registration data.")


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND
    default_message = _("Not found.")


class CapacityExceededError(DomainError):
    code = ErrorCode.CAPACITY_EXCEEDED
    default_message = _("Sorry, this event is full.")


class TierSoldOutError(DomainError):
    code = ErrorCode.TIER_SOLD_OUT
    default_message = _("This tier is sold out.")


class DuplicateRegistrationError(DomainError):
    code = ErrorCode.DUPLICATE_REGISTRATION
    default_message = _("You are already registered for this event.")


class ConfigurationError(DomainError):
    """Raised when the configured fee rates make the fee algebra unsolvable."""

    code = ErrorCode.CONFIGURATION_ERROR
    default_message = _("Financial settings are misconfigured.")


class TransientStoreError(DomainError):
    """Raised when the store keeps failing or conflicting after all retries."""

    code = ErrorCode.TRANSIENT_STORE_ERROR
    default_message = _("We could not process your request right now. Please try again.")


ERROR_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CAPACITY_EXCEEDED: 409,
    ErrorCode.TIER_SOLD_OUT: 409,
    ErrorCode.DUPLICATE_REGISTRATION: 409,
    ErrorCode.CONFIGURATION_ERROR: 500,
    ErrorCode.TRANSIENT_STORE_ERROR: 503,
}
