"""
State machine enforcement for LogEntry.

Draft -> Submitted -> Approved | Rejected. Approved and Rejected are terminal.
Raises InvalidStateError for disallowed transitions.
"""

from core.exceptions import InvalidStateError

# Allowed transitions for LogEntry
LOG_ENTRY_TRANSITIONS = {
    "Draft": ["Submitted", "Draft"],  # Draft -> Draft is edit (no state change)
    "Submitted": ["Approved", "Rejected"],
    "Approved": [],  # Terminal
    "Rejected": [],  # Terminal
}


def validate_transition(current_status, target_status):
    """
    Validate a LogEntry state transition.

    Args:
        current_status: Current state
        target_status: Target state

    Returns:
        bool: True if transition is allowed

    Raises:
        InvalidStateError: If transition is disallowed
    """
    if current_status not in LOG_ENTRY_TRANSITIONS:
        raise InvalidStateError(
            f"Invalid current status: {current_status}",
            {"current_status": current_status},
        )

    allowed_targets = LOG_ENTRY_TRANSITIONS[current_status]

    if not allowed_targets:
        raise InvalidStateError(
            f"Log entry in state {current_status} is terminal and cannot transition",
            {"current_status": current_status, "target_status": target_status},
        )

    if target_status not in allowed_targets:
        raise InvalidStateError(
            (
                "Invalid transition: "
                f"log entry cannot transition from {current_status} to {target_status}"
            ),
            {
                "current_status": current_status,
                "target_status": target_status,
                "allowed_transitions": allowed_targets,
            },
        )

    return True
