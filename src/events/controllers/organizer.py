import typing as t
from uuid import UUID

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.schema import DomainErrorResponse
from common.throttling import WriteThrottle
from events import models, schema
from events.service import registration_service

from .permissions import CanManageEvent

ERRORS = {400: DomainErrorResponse, 404: DomainErrorResponse}


@api_controller(
    "/events/{event_id}/admin",
    auth=JWTAuth(),
    permissions=[CanManageEvent()],
    tags=["Event Organizer"],
    throttle=WriteThrottle(),
)
class EventOrganizerController(UserAwareController):
    """Registration management for the event's organizer and platform staff."""

    def get_event(self, event_id: UUID) -> models.Event:
        """Fetch the event and check the caller may manage it."""
        return t.cast(models.Event, self.get_object_or_exception(models.Event, pk=event_id))

    @route.get("/attendees", url_name="event_attendees", response=list[schema.AttendeeSchema])
    def list_attendees(self, event_id: UUID) -> list[schema.AttendeeSchema]:
        """List every registration of the event, newest first.

        Emergency contact details are masked 24 hours after the event starts.
        """
        return registration_service.get_event_attendees(self.get_event(event_id))

    @route.post(
        "/registrations/{registration_id}/manual-payment",
        url_name="mark_manual_payment",
        response={200: schema.RegistrationSchema, **ERRORS},
    )
    def mark_manual_payment(self, event_id: UUID, registration_id: UUID) -> models.Registration:
        """Record a payment collected directly by the organizer (cash, transfer)."""
        event = self.get_event(event_id)
        return registration_service.mark_manual_payment(event.pk, registration_id)

    @route.post(
        "/registrations/{registration_id}/bib",
        url_name="assign_bib_number",
        response={200: schema.RegistrationSchema, **ERRORS},
    )
    def assign_bib_number(
        self, event_id: UUID, registration_id: UUID, payload: schema.BibAssignmentSchema
    ) -> models.Registration:
        """Assign a bib number by hand. Fails if another participant of the event holds it."""
        event = self.get_event(event_id)
        return registration_service.assign_bib_number(event.pk, registration_id, payload.bib_number)

    @route.post(
        "/registrations/{registration_id}/check-in",
        url_name="check_in_registration",
        response={200: schema.RegistrationSchema, **ERRORS},
    )
    def check_in(self, event_id: UUID, registration_id: UUID) -> models.Registration:
        event = self.get_event(event_id)
        return registration_service.check_in(event.pk, registration_id)

    @route.delete(
        "/registrations/{registration_id}",
        url_name="cancel_registration",
        response={200: schema.RegistrationSchema, **ERRORS},
    )
    def cancel_registration(self, event_id: UUID, registration_id: UUID) -> models.Registration:
        """Cancel a participant's registration, freeing their seat and tier slot."""
        event = self.get_event(event_id)
        return registration_service.cancel_registration_by_id(event.pk, registration_id)
