from django.apps import AppConfig


class CommonConfig(AppConfig):
    """Configuration for the common app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "common"

    def ready(self) -> None:
        """Validate the engine configuration once Django is fully loaded."""
        from common.conf import get_core_config

        get_core_config()
