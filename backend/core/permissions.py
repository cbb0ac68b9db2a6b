"""
Access policy and permission classes for role-based access control.

Role is read from request.user (authenticated via session or JWT).
Role is NEVER read from request body, query parameters, or headers.

The policy itself is a pure function of (role, operation); the DRF
permission classes below only adapt it to request objects.
"""

import enum

from rest_framework import permissions

# Role values as stored on User.role (apps.users.models.Role). DRF imports this
# module while apps.users.models is still loading, so it must not import it.
OPERATOR = "Operator"
SUPERVISOR = "Supervisor"
QA = "QA"
ENGINEER = "Engineer"
ADMIN = "Admin"
ROLES = frozenset({OPERATOR, SUPERVISOR, QA, ENGINEER, ADMIN})


class Operation(str, enum.Enum):
    VIEW_AUDIT_TRAIL = "VIEW_AUDIT_TRAIL"
    MANAGE_USERS = "MANAGE_USERS"
    LIST_USERS = "LIST_USERS"
    APPROVE_LOG_ENTRY = "APPROVE_LOG_ENTRY"
    AUTHENTICATED = "AUTHENTICATED"


# Every Operation must have an entry; every role value must be a Role value.
ACCESS_POLICY = {
    Operation.VIEW_AUDIT_TRAIL: frozenset({ADMIN, QA, SUPERVISOR}),
    Operation.MANAGE_USERS: frozenset({ADMIN}),
    Operation.LIST_USERS: frozenset({ADMIN, QA}),
    Operation.APPROVE_LOG_ENTRY: frozenset({QA, ADMIN}),
    Operation.AUTHENTICATED: ROLES,
}


def is_allowed(role, operation):
    """
    Decide whether a role may perform an operation.

    Args:
        role: Role member (or its string value)
        operation: Operation member

    Returns:
        bool: True if the policy grants the operation to the role

    Raises:
        ValueError: If role is not a known Role value
    """
    from apps.users.models import Role

    return Role(role).value in ACCESS_POLICY[Operation(operation)]


def _active_role(request):
    user = getattr(request, "user", None)
    if not user or not user.is_authenticated:
        return None
    if not getattr(user, "is_active", False):
        return None
    return getattr(user, "role", None)


class PolicyPermission(permissions.BasePermission):
    """Grant access when the active user's role is allowed `operation`."""

    operation = Operation.AUTHENTICATED

    def has_permission(self, request, view):
        role = _active_role(request)
        if role is None:
            return False
        try:
            return is_allowed(role, self.operation)
        except ValueError:
            return False


class IsActiveUser(PolicyPermission):
    """Any authenticated, active user."""

    operation = Operation.AUTHENTICATED


class CanViewAuditTrail(PolicyPermission):
    """Allow ADMIN, QA, SUPERVISOR."""

    operation = Operation.VIEW_AUDIT_TRAIL


class CanManageUsers(PolicyPermission):
    """Allow ADMIN only."""

    operation = Operation.MANAGE_USERS


class CanListUsers(PolicyPermission):
    """Allow ADMIN or QA."""

    operation = Operation.LIST_USERS


class CanApproveLogEntries(PolicyPermission):
    """Allow QA or ADMIN. Dual control is checked by identity in the service."""

    operation = Operation.APPROVE_LOG_ENTRY
