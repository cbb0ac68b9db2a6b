"""
Logbook domain models: LogEntry, LogSequence.

LogEntry audit-relevant fields (status, submitted_at, approved_by,
approved_at, rejected_by, rejected_at) are written only by the transition
functions in apps.logbook.services. The check constraints below restate the
lifecycle invariants at the storage level.
"""

import uuid
from django.db import models


class LogStatus(models.TextChoices):
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ActivityType(models.TextChoices):
    OPERATION = "Operation"
    MAINTENANCE = "Maintenance"
    CALIBRATION = "Calibration"
    CLEANING = "Cleaning"
    SAMPLING = "Sampling"


class LogEntry(models.Model):
    """LogEntry model - an operator's signed record of equipment activity."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    log_code = models.CharField(max_length=32, unique=True, editable=False)
    equipment = models.ForeignKey(
        "equipment.Equipment", on_delete=models.PROTECT, related_name="log_entries"
    )
    activity_type = models.CharField(max_length=20, choices=ActivityType.choices)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField(null=True, blank=True)
    description = models.TextField()
    batch_number = models.CharField(max_length=100, null=True, blank=True)
    readings = models.JSONField(null=True, blank=True)
    status = models.CharField(
        max_length=20, choices=LogStatus.choices, default=LogStatus.DRAFT
    )
    created_by = models.ForeignKey(
        "users.User", on_delete=models.PROTECT, related_name="created_log_entries"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        "users.User",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="approved_log_entries",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        "users.User",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="rejected_log_entries",
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "log_entries"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(status__in=LogStatus.values),
                name="valid_log_status",
            ),
            models.CheckConstraint(
                condition=models.Q(activity_type__in=ActivityType.values),
                name="valid_activity_type",
            ),
            # submitted_at NOT NULL once the entry has left DRAFT
            models.CheckConstraint(
                condition=models.Q(status=LogStatus.DRAFT)
                | models.Q(submitted_at__isnull=False),
                name="submitted_at_set_when_not_draft",
            ),
            # approved_by/approved_at set iff APPROVED
            models.CheckConstraint(
                condition=(
                    models.Q(
                        status=LogStatus.APPROVED,
                        approved_by__isnull=False,
                        approved_at__isnull=False,
                    )
                    | (
                        ~models.Q(status=LogStatus.APPROVED)
                        & models.Q(approved_by__isnull=True, approved_at__isnull=True)
                    )
                ),
                name="approval_fields_match_status",
            ),
            # rejected_by/rejected_at set iff REJECTED
            models.CheckConstraint(
                condition=(
                    models.Q(
                        status=LogStatus.REJECTED,
                        rejected_by__isnull=False,
                        rejected_at__isnull=False,
                    )
                    | (
                        ~models.Q(status=LogStatus.REJECTED)
                        & models.Q(rejected_by__isnull=True, rejected_at__isnull=True)
                    )
                ),
                name="rejection_fields_match_status",
            ),
            # Dual control
            models.CheckConstraint(
                condition=models.Q(approved_by__isnull=True)
                | ~models.Q(approved_by=models.F("created_by")),
                name="approver_differs_from_author",
            ),
            models.CheckConstraint(
                condition=models.Q(rejected_by__isnull=True)
                | ~models.Q(rejected_by=models.F("created_by")),
                name="rejector_differs_from_author",
            ),
            models.CheckConstraint(
                condition=models.Q(end_time__isnull=True)
                | models.Q(end_time__gte=models.F("start_time")),
                name="end_time_not_before_start",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="idx_log_status"),
            models.Index(fields=["created_by"], name="idx_log_created_by"),
            models.Index(fields=["equipment"], name="idx_log_equipment"),
        ]

    def __str__(self):
        return f"{self.log_code} ({self.status})"


class LogSequence(models.Model):
    """Per-year counter backing human-readable log codes."""

    year = models.PositiveIntegerField(primary_key=True)
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "log_sequences"

    def __str__(self):
        return f"{self.year}: {self.last_value}"
