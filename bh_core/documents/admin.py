from django.contrib import admin

from bh_core.documents.models import Document


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ("name", "facility", "owner_type", "doc_type", "status", "expires_at", "uploaded_at")
    list_filter = ("owner_type", "status", "doc_type")
    search_fields = ("name", "facility__name")
    ordering = ("expires_at",)
