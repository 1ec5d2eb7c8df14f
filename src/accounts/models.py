import re
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class RiderUserQueryset(models.QuerySet["RiderUser"]):
    """Queryset for RiderUser."""


class RiderUserManager(UserManager["RiderUser"]):
    def get_queryset(self) -> RiderUserQueryset:
        """Get queryset for RiderUser."""
        return RiderUserQueryset(self.model)


class RiderUser(AbstractUser):
    """A platform user: rider, organizer or platform staff.

    Identity is issued by the external authentication service; this model only mirrors
    what the registration core needs to know about a person.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    preferred_name = models.CharField(db_index=True, max_length=255, blank=True, help_text="Preferred name")
    whatsapp = models.CharField(max_length=20, blank=True, help_text="Contact phone number")

    objects = RiderUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_display_name()

    def get_display_name(self) -> str:
        """Returns the user's preferred name, or their full name as a fallback."""
        return (
            self.preferred_name or self.get_full_name() or re.sub(r"(\W|_)+", " ", self.username.split("@")[0]).title()
        )
