"""Exception handlers for the API."""

import typing as t

import structlog
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.responses import Response

from common.exceptions import ERROR_STATUS_CODES, DomainError
from events.exceptions import InvalidRegistrationTransitionError, SnapshotImmutableError
from finance.exceptions import PayoutImmutableError

logger = structlog.get_logger(__name__)


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    logger.exception("internal_server_error", method=request.method, path=request.path)
    data = {"detail": "Internal Server Error."}
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a validation error.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    logger.warning("validation_error", path=request.path)
    if hasattr(exc, "error_dict"):
        error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    else:
        error_dict = {"__all__": list(t.cast(ValidationError, exc).messages)}
    return Response(status=400, data={"errors": error_dict})


def handle_domain_error(request: HttpRequest, exc: DomainError | t.Type[DomainError]) -> Response:
    """Map a domain error to its HTTP status.

    Operator-facing errors are logged with their context; the response only carries the
    code and a user-safe message.
    """
    error = t.cast(DomainError, exc)
    status = ERROR_STATUS_CODES[error.code]
    if status >= 500:
        logger.error("domain_error", code=error.code.value, path=request.path, **_loggable(error.context))
    data: dict[str, t.Any] = {"code": error.code.value, "message": error.message}
    return Response(status=status, data=data)


def handle_immutable_record_error(
    request: HttpRequest,
    exc: PayoutImmutableError | SnapshotImmutableError | InvalidRegistrationTransitionError | t.Type[Exception],
) -> Response:
    """Handle an attempt to rewrite an append-only or immutable record."""
    logger.warning("immutable_record_violation", path=request.path, error=str(exc))
    return Response(status=400, data={"detail": str(exc)})


def _loggable(context: dict[str, t.Any]) -> dict[str, t.Any]:
    loggable = {}
    for key, value in context.items():
        if hasattr(value, "as_log_context"):
            loggable[key] = value.as_log_context()
        else:
            loggable[key] = str(value) if not isinstance(value, (int, float, bool, type(None))) else value
    return loggable
