import decimal
import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import simple_history.models
from django.conf import settings
from django.db import migrations, models

import finance.models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("events", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="FinancialSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "commission_rate",
                    models.DecimalField(
                        decimal_places=3,
                        default=finance.models.default_commission_rate,
                        help_text="Platform commission, in percent.",
                        max_digits=6,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "pasarela_rate",
                    models.DecimalField(
                        decimal_places=3,
                        default=finance.models.default_pasarela_rate,
                        help_text="Payment gateway percentage fee, in percent.",
                        max_digits=6,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "pasarela_fixed",
                    models.DecimalField(
                        decimal_places=2,
                        default=finance.models.default_pasarela_fixed,
                        help_text="Payment gateway flat fee per transaction.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "iva_rate",
                    models.DecimalField(
                        decimal_places=3,
                        default=finance.models.default_iva_rate,
                        help_text="Tax applied on fees, in percent.",
                        max_digits=6,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Financial Settings",
                "verbose_name_plural": "Financial Settings",
            },
        ),
        migrations.CreateModel(
            name="HistoricalFinancialSettings",
            fields=[
                ("id", models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name="ID")),
                (
                    "commission_rate",
                    models.DecimalField(
                        decimal_places=3,
                        default=finance.models.default_commission_rate,
                        help_text="Platform commission, in percent.",
                        max_digits=6,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "pasarela_rate",
                    models.DecimalField(
                        decimal_places=3,
                        default=finance.models.default_pasarela_rate,
                        help_text="Payment gateway percentage fee, in percent.",
                        max_digits=6,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "pasarela_fixed",
                    models.DecimalField(
                        decimal_places=2,
                        default=finance.models.default_pasarela_fixed,
                        help_text="Payment gateway flat fee per transaction.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "iva_rate",
                    models.DecimalField(
                        decimal_places=3,
                        default=finance.models.default_iva_rate,
                        help_text="Tax applied on fees, in percent.",
                        max_digits=6,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("updated_at", models.DateTimeField(blank=True, editable=False)),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(choices=[("+", "Created"), ("~", "Changed"), ("-", "Deleted")], max_length=1),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "historical Financial Settings",
                "verbose_name_plural": "historical Financial Settings",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="Payout",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.01"))],
                    ),
                ),
                (
                    "proof_reference",
                    models.CharField(help_text="Transfer receipt URL or bank reference.", max_length=500),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("date", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="recorded_payouts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="payouts", to="events.event"
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-created_at"],
            },
        ),
    ]
