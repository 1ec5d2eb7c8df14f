import typing as t

import structlog
from django.db import transaction

from finance.models import FinancialSettings
from finance.service.fees import FeeRates

logger = structlog.get_logger(__name__)


def current_rates() -> FeeRates:
    """The rates in effect right now, as an immutable snapshot."""
    return FinancialSettings.get_solo().snapshot()


@transaction.atomic
def update_financial_settings(**changes: t.Any) -> FinancialSettings:
    """Update the platform rates. Existing registrations keep their own snapshot."""
    settings_obj = FinancialSettings.get_solo()
    settings_obj = FinancialSettings.objects.select_for_update().get(pk=settings_obj.pk)
    previous = settings_obj.snapshot()
    for key, value in changes.items():
        setattr(settings_obj, key, value)
    settings_obj.full_clean()
    settings_obj.save()
    logger.info(
        "financial_settings_updated",
        previous=previous.as_log_context(),
        current=settings_obj.snapshot().as_log_context(),
    )
    return settings_obj
