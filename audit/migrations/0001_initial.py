import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("MOVEMENT_CREATE", "Movement created"),
                            ("MOVEMENT_CANCEL", "Movement cancelled"),
                            ("STOCK_ADJUSTMENT", "Stock adjustment"),
                        ],
                        db_index=True,
                        max_length=32,
                    ),
                ),
                (
                    "entity",
                    models.CharField(choices=[("INVENTORY_MOVEMENT", "Inventory movement")], max_length=32),
                ),
                ("entity_id", models.CharField(blank=True, max_length=64)),
                ("meta", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="audit_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [models.Index(fields=["entity", "entity_id"], name="auditlog_entity_idx")],
            },
        ),
    ]
