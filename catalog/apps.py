"""Django app configuration for catalog."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Registers the product store."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
