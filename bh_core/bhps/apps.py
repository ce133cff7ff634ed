from django.apps import AppConfig


class BhpsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "bh_core.bhps"
