from uuid import UUID

from ninja_extra import api_controller, route
from ninja_extra.permissions import IsAdminUser
from ninja_jwt.authentication import JWTAuth

from common.controllers import UserAwareController
from common.schema import DomainErrorResponse
from common.throttling import WriteThrottle
from events.models import Registration
from events.schema import RegistrationSchema
from events.service import registration_service

from . import schema
from .models import FinancialSettings, Payout
from .service import fees, payouts, settings_service, summary


@api_controller("/finance", auth=JWTAuth(), permissions=[IsAdminUser], tags=["Finance"])
class FinanceController(UserAwareController):
    """Platform staff: rates, per-event balances and the payout ledger."""

    @route.get("/settings", url_name="get_financial_settings", response=schema.FinancialSettingsSchema)
    def get_settings(self) -> FinancialSettings:
        return FinancialSettings.get_solo()

    @route.put(
        "/settings",
        url_name="update_financial_settings",
        response=schema.FinancialSettingsSchema,
        throttle=WriteThrottle(),
    )
    def update_settings(self, payload: schema.FinancialSettingsUpdateSchema) -> FinancialSettings:
        """Update the platform rates. Only future computations are affected."""
        return settings_service.update_financial_settings(**payload.model_dump(exclude_none=True))

    @route.post(
        "/quote",
        url_name="quote_tier",
        response={200: schema.QuoteResponseSchema, 500: DomainErrorResponse},
    )
    def quote(self, payload: schema.QuoteRequestSchema) -> schema.QuoteResponseSchema:
        """Compute price, fee and organizer net for a tier with the current rates.

        With `absorb_fee` the amount is the public price; otherwise it is what the organizer
        wants to receive, and the price is grossed up to the next whole unit.
        """
        quote = fees.quote_tier(payload.amount, payload.absorb_fee, settings_service.current_rates())
        return schema.QuoteResponseSchema(price=quote.price, fee=quote.fee, net_price=quote.net_price)

    @route.get("/events", url_name="events_financial_overview", response=list[schema.EventFinancialOverview])
    def events_overview(self) -> list[schema.EventFinancialOverview]:
        """Collected, dispersed and pending amounts for every paid event."""
        return summary.events_financial_overview()

    @route.get(
        "/events/{event_id}/summary",
        url_name="event_financial_summary",
        response={200: schema.EventFinancialSummary, 404: DomainErrorResponse},
    )
    def event_summary(self, event_id: UUID) -> schema.EventFinancialSummary:
        return summary.summarize_event(event_id)

    @route.get("/events/{event_id}/payouts", url_name="list_payouts", response=list[schema.PayoutSchema])
    def list_payouts(self, event_id: UUID) -> list[Payout]:
        return payouts.list_payouts(event_id)

    @route.post(
        "/events/{event_id}/payouts",
        url_name="append_payout",
        response={201: schema.PayoutSchema, 404: DomainErrorResponse},
        throttle=WriteThrottle(),
    )
    def append_payout(self, event_id: UUID, payload: schema.PayoutCreateSchema) -> tuple[int, Payout]:
        """Record a transfer to the organizer. Payouts cannot be edited or deleted afterwards."""
        payout = payouts.append_payout(
            event_id,
            amount=payload.amount,
            proof_reference=payload.proof_reference,
            notes=payload.notes,
            created_by=self.user(),
            date=payload.date,
        )
        return 201, payout

    @route.post(
        "/registrations/{registration_id}/platform-payment",
        url_name="mark_platform_payment",
        response={200: RegistrationSchema, 400: DomainErrorResponse, 404: DomainErrorResponse},
    )
    def mark_platform_payment(self, registration_id: UUID) -> Registration:
        """Mark a registration as paid through the payment gateway. Safe to repeat."""
        return registration_service.mark_platform_payment(registration_id)
