"""
Preventive maintenance schedules.
"""

import uuid
from django.db import models


class PMFrequency(models.TextChoices):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    YEARLY = "Yearly"


class PMStatus(models.TextChoices):
    SCHEDULED = "Scheduled"
    OVERDUE = "Overdue"
    COMPLETED = "Completed"


class PMSchedule(models.Model):
    """A recurring maintenance task planned for one piece of equipment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    equipment = models.ForeignKey(
        "equipment.Equipment", on_delete=models.PROTECT, related_name="pm_schedules"
    )
    task_name = models.CharField(max_length=255)
    frequency = models.CharField(max_length=20, choices=PMFrequency.choices)
    last_performed = models.DateTimeField(null=True, blank=True)
    next_due = models.DateTimeField()
    status = models.CharField(
        max_length=20, choices=PMStatus.choices, default=PMStatus.SCHEDULED
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "pm_schedules"
        ordering = ["next_due"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(frequency__in=PMFrequency.values),
                name="valid_pm_frequency",
            ),
            models.CheckConstraint(
                condition=models.Q(status__in=PMStatus.values),
                name="valid_pm_status",
            ),
        ]
        indexes = [
            models.Index(fields=["next_due"], name="idx_pm_next_due"),
        ]

    def __str__(self):
        return f"{self.task_name} ({self.next_due:%Y-%m-%d})"
