from django.contrib import admin

from bh_core.obligations.models import ObligationRecord


@admin.register(ObligationRecord)
class ObligationRecordAdmin(admin.ModelAdmin):
    list_display = ("kind", "facility", "shift", "performed_on", "month", "quarter", "bi_week", "year")
    list_filter = ("kind", "shift", "year")
    search_fields = ("facility__name",)
    ordering = ("-performed_on",)
    readonly_fields = ("details", "submitted_by", "created_at", "updated_at")
