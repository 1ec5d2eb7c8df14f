import typing as t

from django.contrib import admin
from django.http import HttpRequest
from solo.admin import SingletonModelAdmin
from unfold.admin import ModelAdmin

from . import models


@admin.register(models.FinancialSettings)
class FinancialSettingsAdmin(SingletonModelAdmin, ModelAdmin):  # type: ignore[misc]
    list_display = ["__str__", "commission_rate", "pasarela_rate", "pasarela_fixed", "iva_rate", "updated_at"]
    readonly_fields = ["updated_at"]


@admin.register(models.Payout)
class PayoutAdmin(ModelAdmin):  # type: ignore[misc]
    """Payouts are append-only: they can be recorded here but never edited or deleted."""

    list_display = ["event", "amount", "date", "proof_reference", "created_by"]
    list_filter = ["date"]
    search_fields = ["event__name", "proof_reference", "notes"]
    list_select_related = ["event", "created_by"]
    autocomplete_fields = ["event"]
    date_hierarchy = "date"

    def get_readonly_fields(self, request: HttpRequest, obj: models.Payout | None = None) -> t.Sequence[str]:
        if obj is not None:
            return ["event", "amount", "proof_reference", "notes", "date", "created_by", "created_at"]
        return ["created_by"]

    def has_delete_permission(self, request: HttpRequest, obj: models.Payout | None = None) -> bool:
        return False

    def save_model(self, request: HttpRequest, obj: models.Payout, form: t.Any, change: bool) -> None:
        if change:
            return
        obj.created_by = request.user  # type: ignore[assignment]
        super().save_model(request, obj, form, change)
