# backend/bh_core/facilities/admin.py
from __future__ import annotations

from django.contrib import admin

from bh_core.facilities.models import Employee, Facility, Resident


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ("name", "bhp", "is_active", "phone", "updated_at")
    list_filter = ("is_active", "bhp")
    search_fields = ("name", "address", "bhp__name")
    readonly_fields = ("id", "created_at", "updated_at", "deactivated_at")
    ordering = ("bhp", "name")

    def has_delete_permission(self, request, obj=None) -> bool:
        return False


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("full_name", "facility", "position", "is_active")
    list_filter = ("is_active",)
    search_fields = ("full_name", "facility__name")


@admin.register(Resident)
class ResidentAdmin(admin.ModelAdmin):
    list_display = ("full_name", "facility", "date_of_birth", "is_active")
    list_filter = ("is_active",)
    search_fields = ("full_name", "facility__name")
