"""
Compare-and-set helper for LogEntry transitions.
Prevents concurrent transitions from both succeeding.
"""
from django.db.models import F
from core.exceptions import InvalidStateError


def status_locked_update(queryset, expected_status, current_version, **updates):
    """
    Update rows only if they are still in `expected_status` at `current_version`.

    Args:
        queryset: LogEntry QuerySet to update (normally filtered by id)
        expected_status: Status the caller observed before deciding
        current_version: Version the caller observed before deciding
        **updates: Fields to update

    Returns:
        int: Number of rows updated (1)

    Raises:
        InvalidStateError: If status or version changed in the meantime
    """
    updated_count = queryset.filter(
        status=expected_status, version=current_version
    ).update(
        **updates,
        version=F("version") + 1,
    )

    if updated_count == 0:
        raise InvalidStateError(
            "Concurrent modification detected. Status or version changed.",
            {"expected_status": expected_status, "expected_version": current_version},
        )

    return updated_count
