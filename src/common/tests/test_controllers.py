from unittest.mock import MagicMock, patch

import pytest
from django.test.client import Client
from django.urls import reverse

from accounts.models import RiderUser

pytestmark = pytest.mark.django_db


@patch("common.controllers.structlog.contextvars.bind_contextvars")
def test_authenticated_user_is_bound_to_the_log_context(
    mock_bind: MagicMock, user_client: Client, user: RiderUser
) -> None:
    response = user_client.get(reverse("api:my_registrations"))

    assert response.status_code == 200
    mock_bind.assert_any_call(user_id=str(user.pk))
