from django.apps import AppConfig


class CommonConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "bh_core.common"

    def ready(self) -> None:
        from bh_core.common.logging import setup_logging

        setup_logging()
