import typing as t
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field, PositiveInt, StringConstraints

from common.exceptions import DomainError, ErrorCode
from common.schema import StrippedString

from .models import Registration

MASKED = "***"

ShortString = t.Annotated[str, StringConstraints(strip_whitespace=True, max_length=255)]


class RegistrationExtraFields(Schema):
    """Data captured from the rider at registration time."""

    emergency_contact_name: ShortString = ""
    emergency_contact_phone: t.Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)] = ""
    blood_type: t.Annotated[str, StringConstraints(strip_whitespace=True, max_length=10)] = ""
    insurance_info: ShortString = ""
    allergies: StrippedString = ""
    waiver_signature: ShortString = ""
    custom_answers: dict[str, t.Any] = Field(default_factory=dict)


class RegistrationCreateSchema(Schema):
    tier_id: UUID | None = None
    category_id: UUID | None = None
    extra_fields: RegistrationExtraFields = Field(default_factory=RegistrationExtraFields)


class RegistrationResult(Schema):
    """Outcome of a registration attempt. Domain failures are reported here, never raised."""

    success: bool
    registration_id: UUID | None = None
    error_code: ErrorCode | None = None
    message: str | None = None

    @classmethod
    def ok(cls, registration_id: UUID) -> "RegistrationResult":
        return cls(success=True, registration_id=registration_id)

    @classmethod
    def failure(cls, error: DomainError) -> "RegistrationResult":
        return cls(success=False, error_code=error.code, message=error.message)


REGISTRATION_FIELDS = [
    "id",
    "status",
    "payment_status",
    "payment_method",
    "bib_number",
    "registered_at",
    "amount_paid",
    "checked_in",
]


class RegistrationSchema(ModelSchema):
    event_id: UUID
    tier_id: UUID | None = None
    category_id: UUID | None = None

    class Meta:
        model = Registration
        fields = REGISTRATION_FIELDS


class MinimalEventSchema(Schema):
    id: UUID
    name: str
    start: datetime
    cost_type: str


class UserRegistrationSchema(ModelSchema):
    """A registration as listed on the rider's dashboard, with its event."""

    event: MinimalEventSchema
    tier_id: UUID | None = None
    tier_name: str | None = None

    class Meta:
        model = Registration
        fields = REGISTRATION_FIELDS

    @staticmethod
    def resolve_tier_name(obj: Registration) -> str | None:
        return obj.tier.name if obj.tier else None


class AttendeeSchema(Schema):
    id: UUID
    user_id: UUID
    name: str
    email: str
    whatsapp: str = ""
    registered_at: datetime
    tier_name: str
    category_name: str
    status: Registration.Status
    payment_status: Registration.PaymentStatus
    payment_method: Registration.PaymentMethod | None = None
    bib_number: int | None = None
    checked_in: bool
    price: Decimal
    emergency_contact_name: str = ""
    emergency_contact_phone: str = ""
    blood_type: str = ""
    insurance_info: str = ""
    allergies: str = ""

    @classmethod
    def from_registration(cls, registration: Registration, *, hide_emergency_details: bool) -> "AttendeeSchema":
        event = registration.event
        tier = registration.tier
        if registration.amount_paid is not None:
            price = registration.amount_paid
        elif tier is not None:
            price = tier.price
        else:
            price = Decimal("0")

        emergency = {
            "emergency_contact_name": registration.emergency_contact_name,
            "emergency_contact_phone": registration.emergency_contact_phone,
            "blood_type": registration.blood_type,
            "insurance_info": registration.insurance_info,
            "allergies": registration.allergies,
        }
        if hide_emergency_details:
            emergency = {key: MASKED for key in emergency}

        return cls(
            id=registration.id,
            user_id=registration.user_id,
            name=registration.user.get_display_name(),
            email=registration.user.email,
            whatsapp=registration.user.whatsapp,
            registered_at=registration.registered_at,
            tier_name=tier.name if tier else ("Free" if event.is_free else "N/A"),
            category_name=registration.category.name if registration.category else "N/A",
            status=registration.status,
            payment_status=registration.payment_status,
            payment_method=registration.payment_method,
            bib_number=registration.bib_number,
            checked_in=registration.checked_in,
            price=price,
            **emergency,
        )


class BibAssignmentSchema(Schema):
    bib_number: PositiveInt
