"""Audit services: best-effort persistence of audit records."""

import logging

from django.db import DatabaseError, transaction

from .models import AuditLog

logger = logging.getLogger("stockledger.audit")


def record_audit_event(*, action: str, entity: str, entity_id=None, actor_id=None, meta: dict | None = None):
    """Persist an audit record and return it, or ``None`` if the write failed.

    The write runs in its own savepoint so a failure never poisons the
    caller's transaction; audit problems must not undo a committed movement.
    """
    try:
        with transaction.atomic():
            entry = AuditLog.objects.create(
                actor_id=actor_id,
                action=action,
                entity=entity,
                entity_id="" if entity_id is None else str(entity_id),
                meta=meta,
            )
    except DatabaseError:
        logger.exception(
            "audit.write_failed",
            extra={
                "event": "audit.write_failed",
                "action": action,
                "entity": entity,
                "entity_id": None if entity_id is None else str(entity_id),
                "actor_id": actor_id,
            },
        )
        return None
    return entry
