from django.utils.translation import gettext_lazy as _

from common.exceptions import RegistrationValidationError


class InvalidRegistrationTransitionError(Exception):
    """Raised when a registration is moved along a transition its state machine forbids."""


class SnapshotImmutableError(Exception):
    """Raised when code tries to overwrite a registration's stored financial snapshot."""


class DuplicateBibNumberError(RegistrationValidationError):
    default_message = _("This bib number is already assigned to another participant.")


class AlreadyCancelledError(RegistrationValidationError):
    default_message = _("This registration is already cancelled.")


class AlreadyPaidError(RegistrationValidationError):
    default_message = _("This registration is already marked as paid.")
