from django.http import HttpRequest
from ninja_extra import ControllerBase
from ninja_extra.permissions import BasePermission

from events.models import Event


class CanManageEvent(BasePermission):
    """The event's organizer, or platform staff."""

    def has_permission(self, request: HttpRequest, controller: ControllerBase) -> bool:
        """Only has_object_permission is meaningful here."""
        return True

    def has_object_permission(self, request: HttpRequest, controller: ControllerBase, obj: Event) -> bool:
        """Can manage the event's registrations."""
        return obj.can_be_managed_by(request.user)  # type: ignore[arg-type]
