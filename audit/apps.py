"""Django app configuration for the audit app."""

from django.apps import AppConfig


class AuditConfig(AppConfig):
    """AppConfig for the audit trail."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "audit"
