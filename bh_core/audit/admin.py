# backend/bh_core/audit/admin.py
from django.contrib import admin

from bh_core.audit.models import AuditEvent


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    """Read-only: audit rows are written by the clinical record lifecycle only."""

    list_display = ("occurred_at", "event_code", "entity_id", "facility_id", "actor_user")
    list_filter = ("event_code",)
    search_fields = ("event_code", "=entity_id", "=facility_id")
    date_hierarchy = "occurred_at"
    ordering = ("-occurred_at", "-id")

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
