import typing as t
from uuid import UUID

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.exceptions import ERROR_STATUS_CODES, ErrorCode
from common.schema import DomainErrorResponse
from common.throttling import RegistrationThrottle, WriteThrottle
from events import models, schema
from events.service import registration_service

FAILURE_CODES = frozenset(ERROR_STATUS_CODES.values())


@api_controller("/events/{event_id}/registrations", auth=JWTAuth(), tags=["Registrations"])
class RegistrationController(UserAwareController):
    @route.post(
        "",
        url_name="register_to_event",
        response={201: schema.RegistrationResult, FAILURE_CODES: schema.RegistrationResult},
        throttle=RegistrationThrottle(),
    )
    def register(
        self, event_id: UUID, payload: schema.RegistrationCreateSchema
    ) -> tuple[int, schema.RegistrationResult]:
        """Register the current user to the event.

        Capacity, tier inventory and bib numbers are checked and updated atomically.
        A failed attempt returns the same body with `success=false` and an `error_code`:
        `validation_error` (400), `not_found` (404), `capacity_exceeded`, `tier_sold_out`
        or `duplicate_registration` (409), `transient_store_error` (503).
        """
        result = registration_service.register_user_to_event(
            event_id,
            self.user().pk,
            tier_id=payload.tier_id,
            category_id=payload.category_id,
            extra_fields=payload.extra_fields,
        )
        if result.success:
            return 201, result
        return ERROR_STATUS_CODES[t.cast(ErrorCode, result.error_code)], result

    @route.get("/me", url_name="my_registration", response={200: schema.RegistrationSchema, 404: DomainErrorResponse})
    def my_registration(self, event_id: UUID) -> models.Registration:
        """Get the current user's registration for the event, whatever its status."""
        return registration_service.get_user_registration(event_id, self.user().pk)

    @route.delete(
        "/me",
        url_name="cancel_my_registration",
        response={200: schema.RegistrationSchema, 400: DomainErrorResponse, 404: DomainErrorResponse},
        throttle=WriteThrottle(),
    )
    def cancel_my_registration(self, event_id: UUID) -> models.Registration:
        """Cancel the current user's registration. Registering again later reuses the same registration."""
        return registration_service.cancel_registration(event_id, self.user().pk)


@api_controller("/registrations", auth=JWTAuth(), tags=["Registrations"])
class UserRegistrationsController(UserAwareController):
    @route.get("/me", url_name="my_registrations", response=list[schema.UserRegistrationSchema])
    def my_registrations(self) -> list[models.Registration]:
        """List the current user's registrations across all events, soonest event first."""
        return registration_service.get_user_registrations(self.user().pk)
