from django.contrib import admin

from bh_core.clinical_records.models import ClinicalRecord


@admin.register(ClinicalRecord)
class ClinicalRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "kind", "facility", "status", "subject_name", "submitted_at", "decided_at")
    list_filter = ("kind", "status")
    search_fields = ("subject_name", "facility__name")
    # transitions only go through the service (audited)
    readonly_fields = (
        "facility",
        "kind",
        "status",
        "draft_step",
        "subject_name",
        "content",
        "authored_by",
        "submitted_at",
        "decision_reason",
        "decided_at",
        "decided_by",
    )

    def has_add_permission(self, request) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
