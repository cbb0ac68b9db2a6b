"""
AuditEntry model - immutable chronological record of state-changing actions.

Audit entries are append-only. No update or delete operations, neither on
instances nor on querysets.
"""

import uuid
from django.db import models


class AuditAction(models.TextChoices):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class EntityType(models.TextChoices):
    USER = "User"
    EQUIPMENT = "Equipment"
    LOG_ENTRY = "LogEntry"
    PM_SCHEDULE = "PMSchedule"


class AuditEntryQuerySet(models.QuerySet):
    """QuerySet that refuses bulk mutation of audit rows."""

    def update(self, **kwargs):
        raise ValueError("Audit entries are append-only. Updates are not allowed.")

    def delete(self):
        raise ValueError("Audit entries are append-only. Deletions are not allowed.")


class AuditEntry(models.Model):
    """AuditEntry model - immutable audit trail."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    timestamp = models.DateTimeField(auto_now_add=True)
    actor = models.ForeignKey(
        "users.User",
        on_delete=models.PROTECT,
        related_name="audit_entries",
    )
    action = models.CharField(max_length=10, choices=AuditAction.choices)
    entity_type = models.CharField(max_length=20, choices=EntityType.choices)
    entity_id = models.CharField(max_length=64, null=True, blank=True)
    old_value = models.JSONField(null=True, blank=True)
    new_value = models.JSONField(null=True, blank=True)
    reason = models.TextField(null=True, blank=True)
    ip_address = models.CharField(max_length=64, null=True, blank=True)
    request_id = models.CharField(max_length=64, null=True, blank=True)

    objects = AuditEntryQuerySet.as_manager()

    class Meta:
        db_table = "audit_trail"
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="idx_audit_entity"),
            models.Index(fields=["timestamp"], name="idx_audit_timestamp"),
            models.Index(fields=["actor"], name="idx_audit_actor"),
            models.Index(fields=["action"], name="idx_audit_action"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(action__in=AuditAction.values),
                name="valid_audit_action",
            ),
        ]
        ordering = ["-timestamp"]

    def __str__(self):
        return f"{self.action} - {self.entity_type}:{self.entity_id} at {self.timestamp}"

    def save(self, *args, **kwargs):
        """Override save to prevent updates."""
        if not self._state.adding:
            raise ValueError("Audit entries are append-only. Updates are not allowed.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Override delete to prevent deletion."""
        raise ValueError("Audit entries are append-only. Deletions are not allowed.")
