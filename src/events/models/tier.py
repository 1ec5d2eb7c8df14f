import typing as t
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q

from common.models import TimeStampedModel

if t.TYPE_CHECKING:
    from finance.service.fees import TierQuote

MONEY = {"max_digits": 10, "decimal_places": 2, "default": Decimal("0"), "validators": [MinValueValidator(0)]}


class CostTier(TimeStampedModel):
    """A priced registration option within an event, with its own inventory."""

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="tiers")
    name = models.CharField(max_length=255, db_index=True)
    includes = models.TextField(blank=True, default="", help_text="What the tier includes (jersey, medal...).")
    price = models.DecimalField(help_text="Public price charged to the rider.", **MONEY)  # type: ignore[arg-type]
    fee = models.DecimalField(help_text="Platform and gateway cost portion.", **MONEY)  # type: ignore[arg-type]
    net_price = models.DecimalField(help_text="Amount due to the organizer.", **MONEY)  # type: ignore[arg-type]
    absorb_fee = models.BooleanField(default=False, help_text="The public price already includes every fee.")
    limit = models.PositiveIntegerField(default=0, help_text="Maximum registrations for this tier. 0 means unlimited.")
    sold_count = models.PositiveIntegerField(default=0)
    display_order = models.PositiveIntegerField(default=0, db_index=True)

    class Meta:
        ordering = ["event", "display_order", "name"]
        constraints = [
            models.UniqueConstraint(fields=["event", "name"], name="unique_cost_tier_event_name"),
            models.CheckConstraint(
                condition=Q(limit=0) | Q(sold_count__lte=F("limit")),
                name="cost_tier_sold_within_limit",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} for event {self.event.name}"

    @property
    def is_sold_out(self) -> bool:
        return self.limit > 0 and self.sold_count >= self.limit

    @property
    def remaining(self) -> int | None:
        """Remaining inventory, or None when unlimited."""
        if self.limit == 0:
            return None
        return max(0, self.limit - self.sold_count)

    def apply_quote(self, quote: "TierQuote") -> None:
        """Copy a fee-algebra quote onto the tier's pricing fields."""
        self.price = quote.price
        self.fee = quote.fee
        self.net_price = quote.net_price
