from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI

from common.exceptions import DomainError
from common.schema import ResponseOk, VersionResponse
from common.throttling import AnonDefaultThrottle, UserDefaultThrottle
from events.controllers.organizer import EventOrganizerController
from events.controllers.registrations import RegistrationController, UserRegistrationsController
from events.exceptions import InvalidRegistrationTransitionError, SnapshotImmutableError
from finance.controllers import FinanceController
from finance.exceptions import PayoutImmutableError

from .exception_handlers import (
    handle_django_validation_error,
    handle_domain_error,
    handle_general_exception,
    handle_immutable_record_error,
)

api = NinjaExtraAPI(
    title="Rodada API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"Rodada registration API {settings.VERSION}",
    app_name=f"rodada-api-{settings.VERSION}",
    urls_namespace="api",
    throttle=[AnonDefaultThrottle(), UserDefaultThrottle()],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse})
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk})
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API."""
    return 200, ResponseOk()


api.register_controllers(
    # Registration controllers
    RegistrationController,
    UserRegistrationsController,
    EventOrganizerController,
    # Finance controllers
    FinanceController,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    DomainError: handle_domain_error,
    PayoutImmutableError: handle_immutable_record_error,
    SnapshotImmutableError: handle_immutable_record_error,
    InvalidRegistrationTransitionError: handle_immutable_record_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
