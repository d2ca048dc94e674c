"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import License


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "key",
        "email",
        "status_display",
        "external_order_ref",
        "created_at",
        "activated_at",
    ]
    list_filter = ["active", "created_at", "activated_at"]
    search_fields = ["key", "email", "external_order_ref"]
    readonly_fields = [
        "key",
        "email",
        "external_order_ref",
        "active",
        "activated_at",
        "created_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("key", "email", "external_order_ref"),
            },
        ),
        (
            "State",
            {
                "fields": ("active", "activated_at"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at",),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display state with color coding."""
        if obj.active:
            return format_html('<span style="color: green; font-weight: bold;">{}</span>', "ACTIVE")
        return format_html('<span style="color: gray;">{}</span>', "INACTIVE")

    status_display.short_description = "Status"

    def has_delete_permission(self, request, obj=None):
        """License records are never deleted."""
        return False

    def has_add_permission(self, request):
        """Licenses are created by issuance and generation only."""
        return False
