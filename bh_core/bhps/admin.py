from django.contrib import admin

from bh_core.bhps.models import BHPProfile, Credential


@admin.register(BHPProfile)
class BHPProfileAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "requires_record_review", "updated_at")
    list_filter = ("requires_record_review",)
    search_fields = ("name", "email")


@admin.register(Credential)
class CredentialAdmin(admin.ModelAdmin):
    list_display = ("name", "credential_type", "bhp", "expires_at", "uploaded_at")
    list_filter = ("credential_type",)
    search_fields = ("name", "bhp__name")
    ordering = ("expires_at",)
