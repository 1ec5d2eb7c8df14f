import decimal
import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("start", models.DateTimeField(db_index=True)),
                (
                    "cost_type",
                    models.CharField(
                        choices=[("free", "Free"), ("paid", "Paid")], db_index=True, default="free", max_length=10
                    ),
                ),
                (
                    "max_participants",
                    models.PositiveIntegerField(default=0, help_text="Maximum participants. 0 means unlimited."),
                ),
                ("current_participants", models.PositiveIntegerField(default=0)),
                (
                    "bib_enabled",
                    models.BooleanField(default=False, help_text="Whether participants get a bib number."),
                ),
                (
                    "bib_mode",
                    models.CharField(
                        choices=[("automatic", "Automatic"), ("manual", "Manual")], default="automatic", max_length=10
                    ),
                ),
                (
                    "bib_next_number",
                    models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("requires_emergency_contact", models.BooleanField(default=False)),
                ("requires_waiver", models.BooleanField(default=False)),
                ("waiver_text", models.TextField(blank=True, default="")),
                (
                    "organizer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="organized_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-start"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("max_participants", 0))
                        | models.Q(("current_participants__lte", models.F("max_participants"))),
                        name="event_participants_within_capacity",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="EventCategory",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("min_age", models.PositiveIntegerField(blank=True, null=True)),
                ("max_age", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="categories", to="events.event"
                    ),
                ),
            ],
            options={
                "ordering": ["event", "name"],
                "constraints": [models.UniqueConstraint(fields=("event", "name"), name="unique_event_category_name")],
            },
        ),
        migrations.CreateModel(
            name="CostTier",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", models.CharField(db_index=True, max_length=255)),
                (
                    "includes",
                    models.TextField(
                        blank=True, default="", help_text="What the tier includes (jersey, medal...)."
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0"),
                        help_text="Public price charged to the rider.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "fee",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0"),
                        help_text="Platform and gateway cost portion.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "net_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=decimal.Decimal("0"),
                        help_text="Amount due to the organizer.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "absorb_fee",
                    models.BooleanField(default=False, help_text="The public price already includes every fee."),
                ),
                (
                    "limit",
                    models.PositiveIntegerField(
                        default=0, help_text="Maximum registrations for this tier. 0 means unlimited."
                    ),
                ),
                ("sold_count", models.PositiveIntegerField(default=0)),
                ("display_order", models.PositiveIntegerField(db_index=True, default=0)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="tiers", to="events.event"
                    ),
                ),
            ],
            options={
                "ordering": ["event", "display_order", "name"],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "name"), name="unique_cost_tier_event_name"),
                    models.CheckConstraint(
                        condition=models.Q(("limit", 0)) | models.Q(("sold_count__lte", models.F("limit"))),
                        name="cost_tier_sold_within_limit",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("cancelled", "Cancelled")],
                        db_index=True,
                        default="confirmed",
                        max_length=20,
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("paid", "Paid"), ("pending", "Pending"), ("not_applicable", "Not applicable")],
                        db_index=True,
                        default="not_applicable",
                        max_length=20,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        blank=True,
                        choices=[("platform", "Platform"), ("manual", "Manual")],
                        max_length=20,
                        null=True,
                    ),
                ),
                (
                    "bib_number",
                    models.PositiveIntegerField(
                        blank=True, null=True, validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                ("registered_at", models.DateTimeField(db_index=True)),
                (
                    "snapshot_kind",
                    models.CharField(
                        blank=True,
                        choices=[("priced", "Priced"), ("no_charge", "No charge")],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("amount_paid", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("platform_fee", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("organizer_net", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("is_fee_absorbed", models.BooleanField(default=False)),
                ("snapshot_calculated_at", models.DateTimeField(blank=True, null=True)),
                ("checked_in", models.BooleanField(default=False)),
                ("checked_in_at", models.DateTimeField(blank=True, null=True)),
                ("manual_payment_at", models.DateTimeField(blank=True, null=True)),
                ("emergency_contact_name", models.CharField(blank=True, default="", max_length=255)),
                ("emergency_contact_phone", models.CharField(blank=True, default="", max_length=50)),
                ("blood_type", models.CharField(blank=True, default="", max_length=10)),
                ("insurance_info", models.CharField(blank=True, default="", max_length=255)),
                ("allergies", models.TextField(blank=True, default="")),
                ("waiver_signature", models.CharField(blank=True, default="", max_length=255)),
                ("waiver_accepted_at", models.DateTimeField(blank=True, null=True)),
                ("waiver_text_snapshot", models.TextField(blank=True, default="")),
                ("custom_answers", models.JSONField(blank=True, default=dict)),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="registrations",
                        to="events.eventcategory",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="registrations", to="events.event"
                    ),
                ),
                (
                    "tier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="registrations",
                        to="events.costtier",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-registered_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "user"), name="unique_registration_per_user_event"),
                    models.UniqueConstraint(
                        condition=models.Q(("bib_number__isnull", False)),
                        fields=("event", "bib_number"),
                        name="unique_bib_number_per_event",
                    ),
                ],
            },
        ),
    ]
