from .event import Event, EventCategory
from .registration import (
    FinancialSnapshot,
    NoChargeSnapshot,
    PricedSnapshot,
    Registration,
)
from .tier import CostTier

__all__ = [
    # Events
    "Event",
    "EventCategory",
    "CostTier",
    # Registrations
    "Registration",
    "FinancialSnapshot",
    "PricedSnapshot",
    "NoChargeSnapshot",
]
