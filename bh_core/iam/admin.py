from django.contrib import admin

from bh_core.iam.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "bhp", "facility", "is_active")
    list_filter = ("role", "is_active")
    search_fields = ("user__username", "user__email")
