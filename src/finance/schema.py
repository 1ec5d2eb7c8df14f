import typing as t
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field

from common.schema import StrippedString

from .models import FinancialSettings, Payout

NonNegativeDecimal = t.Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=3)]


class MoneyBreakdown(Schema):
    gross: Decimal = Decimal("0")
    net: Decimal = Decimal("0")
    fee: Decimal = Decimal("0")


class EventFinancialSummary(Schema):
    """Money collected for one event, split by channel.

    ``balance_to_disperse`` is a point-in-time figure computed from registrations only;
    recorded payouts are reported in ``amount_dispersed`` and are not subtracted from it.
    """

    event_id: UUID
    total: MoneyBreakdown
    platform: MoneyBreakdown
    manual: MoneyBreakdown
    balance_to_disperse: Decimal
    amount_dispersed: Decimal = Decimal("0")


class EventFinancialOverview(Schema):
    event_id: UUID
    name: str
    start: datetime
    organizer_name: str
    total_collected: Decimal
    amount_dispersed: Decimal
    pending_disbursement: Decimal


class FinancialSettingsSchema(ModelSchema):
    class Meta:
        model = FinancialSettings
        fields = ["commission_rate", "pasarela_rate", "pasarela_fixed", "iva_rate", "updated_at"]


class FinancialSettingsUpdateSchema(Schema):
    commission_rate: NonNegativeDecimal | None = None
    pasarela_rate: NonNegativeDecimal | None = None
    pasarela_fixed: NonNegativeDecimal | None = None
    iva_rate: NonNegativeDecimal | None = None


class QuoteRequestSchema(Schema):
    amount: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    absorb_fee: bool = False


class QuoteResponseSchema(Schema):
    price: Decimal
    fee: Decimal
    net_price: Decimal


class PayoutSchema(ModelSchema):
    event_id: UUID
    created_by_id: UUID | None = None

    class Meta:
        model = Payout
        fields = ["id", "amount", "proof_reference", "notes", "date", "created_at"]


class PayoutCreateSchema(Schema):
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    proof_reference: t.Annotated[StrippedString, Field(min_length=1, max_length=500)]
    notes: StrippedString = ""
    date: datetime | None = None
