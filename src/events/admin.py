import typing as t

from django.contrib import admin
from django.http import HttpRequest
from django.urls import reverse
from django.utils.html import format_html
from unfold.admin import ModelAdmin, TabularInline

from . import models


class UserLinkMixin:
    """Mixin to add a link to a user."""

    def user_link(self, obj: t.Any) -> str:
        user = getattr(obj, "user", getattr(obj, "organizer", None))
        url = reverse("admin:accounts_rideruser_change", args=[user.id])  # type: ignore[union-attr]
        return format_html('<a href="{}">{}</a>', url, user.username)  # type: ignore[union-attr]

    user_link.short_description = "User"  # type: ignore[attr-defined]


class CostTierInline(TabularInline):  # type: ignore[misc]
    model = models.CostTier
    extra = 0
    fields = ["name", "price", "fee", "net_price", "absorb_fee", "limit", "sold_count", "display_order"]
    readonly_fields = ["sold_count"]


class EventCategoryInline(TabularInline):  # type: ignore[misc]
    model = models.EventCategory
    extra = 0
    fields = ["name", "description", "min_age", "max_age"]


@admin.register(models.Event)
class EventAdmin(ModelAdmin, UserLinkMixin):  # type: ignore[misc]
    list_display = ["name", "start", "cost_type", "participants", "bib_enabled", "user_link"]
    list_filter = ["cost_type", "bib_enabled", "bib_mode"]
    search_fields = ["name", "organizer__username", "organizer__email"]
    date_hierarchy = "start"
    autocomplete_fields = ["organizer"]
    readonly_fields = ["current_participants", "bib_next_number", "created_at", "updated_at"]
    inlines = [CostTierInline, EventCategoryInline]

    @admin.display(description="Participants")
    def participants(self, obj: models.Event) -> str:
        if obj.max_participants == 0:
            return f"{obj.current_participants}"
        return f"{obj.current_participants}/{obj.max_participants}"


@admin.register(models.Registration)
class RegistrationAdmin(ModelAdmin, UserLinkMixin):  # type: ignore[misc]
    list_display = ["event", "user_link", "status", "payment_status", "payment_method", "bib_number", "checked_in"]
    list_filter = ["status", "payment_status", "payment_method", "checked_in"]
    search_fields = ["user__username", "user__email", "event__name"]
    list_select_related = ["event", "user"]
    readonly_fields = [
        "user",
        "event",
        "tier",
        "status",
        "bib_number",
        "registered_at",
        "snapshot_kind",
        "amount_paid",
        "platform_fee",
        "organizer_net",
        "is_fee_absorbed",
        "snapshot_calculated_at",
        "created_at",
        "updated_at",
    ]

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Registrations are only created through the registration service."""
        return False
