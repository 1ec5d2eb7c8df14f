import typing as t

import structlog
from django.contrib.auth.models import AnonymousUser
from ninja_extra import ControllerBase

from accounts.models import RiderUser


class UserAwareController(ControllerBase):
    def maybe_user(self) -> RiderUser | AnonymousUser:
        """Get the user for this request."""
        return t.cast(RiderUser | AnonymousUser, self.context.request.user)  # type: ignore[union-attr]

    def user(self) -> RiderUser:
        """Get the user for this request and add it to the request's log context.

        JWT authentication runs after the middleware, so this is the first point where the user is known.
        """
        user = t.cast(RiderUser, self.context.request.user)  # type: ignore[union-attr]
        structlog.contextvars.bind_contextvars(user_id=str(user.pk))
        return user
