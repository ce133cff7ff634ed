from django.apps import AppConfig


class ClinicalRecordsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "bh_core.clinical_records"
