from django.apps import AppConfig


class PortalConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "portal"

    def ready(self):
        # Import signal supaya terdaftar saat app ready
        from . import signals  # noqa: F401
