"""Admin interface for the accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from unfold.admin import ModelAdmin

from accounts.models import RiderUser


@admin.register(RiderUser)
class RiderUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[misc]
    list_display = ["username", "email", "preferred_name", "is_staff", "date_joined"]
    search_fields = ["username", "email", "preferred_name", "first_name", "last_name"]
    ordering = ["-date_joined"]
    fieldsets = (
        *(UserAdmin.fieldsets or ()),
        ("Profile", {"fields": ("preferred_name", "whatsapp")}),
    )
