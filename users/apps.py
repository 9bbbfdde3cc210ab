"""Django app configuration for the users app."""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Registers the custom user model that carries the inventory role."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "users"
