"""Shared enumerations and choices used across apps."""

from django.db import models


class Role(models.TextChoices):
    """Closed set of actor roles recognised by the inventory core."""

    OWNER = "OWNER", "Owner"
    STAFF = "STAFF", "Staff"


class MovementType(models.TextChoices):
    SALE_OFFLINE = "SALE_OFFLINE", "Offline sale"
    CANCEL_SALE = "CANCEL_SALE", "Sale cancellation"
    RETURN = "RETURN", "Return"
    LOSS = "LOSS", "Loss"
    ADJUSTMENT = "ADJUSTMENT", "Adjustment"


class AuditAction(models.TextChoices):
    MOVEMENT_CREATE = "MOVEMENT_CREATE", "Movement created"
    MOVEMENT_CANCEL = "MOVEMENT_CANCEL", "Movement cancelled"
    STOCK_ADJUSTMENT = "STOCK_ADJUSTMENT", "Stock adjustment"


class AuditEntity(models.TextChoices):
    INVENTORY_MOVEMENT = "INVENTORY_MOVEMENT", "Inventory movement"
