"""Atomic generation of human-readable log codes (LOG-<year>-<seq>)."""

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.logbook.models import LogSequence


def format_log_code(year, value):
    return f"LOG-{year}-{value:03d}"


def next_log_code(year=None):
    """
    Reserve the next log code for `year` (defaults to the current year).

    The counter row is incremented with a single UPDATE, which holds the row
    lock until the enclosing transaction ends, so concurrent creators receive
    distinct values. Call inside the transaction that inserts the entry so a
    rollback also releases the reservation.
    """
    if year is None:
        year = timezone.now().year

    with transaction.atomic():
        LogSequence.objects.get_or_create(year=year)
        LogSequence.objects.filter(year=year).update(last_value=F("last_value") + 1)
        value = LogSequence.objects.values_list("last_value", flat=True).get(year=year)

    return format_log_code(year, value)
