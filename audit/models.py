"""Audit trail of privileged or stock-affecting actions."""

from common.choices import AuditAction, AuditEntity
from django.conf import settings
from django.db import models


class AuditLog(models.Model):
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="audit_logs",
    )
    action = models.CharField(max_length=32, choices=AuditAction.choices, db_index=True)
    entity = models.CharField(max_length=32, choices=AuditEntity.choices)
    entity_id = models.CharField(max_length=64, blank=True)
    meta = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["entity", "entity_id"], name="auditlog_entity_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.action} {self.entity}#{self.entity_id} by {self.actor_id}"
