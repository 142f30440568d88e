"""
Accounts Permissions - Capability gates and their DRF adapters.

A gate is a pure function ``(caller, resource) -> Decision``. Gates carry no
transport concerns and are applied before every mutation:

    decision = has_role(request.user, User.Role.BUYER)
    enforce(decision)  # raises PermissionDeniedError when denied

DRF views use the adapters below:
- HasRole: role gate driven by ``required_roles`` / ``action_roles`` on the view
"""

from dataclasses import dataclass

from rest_framework import permissions

from api.exceptions import PermissionDeniedError

DEFAULT_DENIAL = "You do not have permission to perform this action"


# =============================================================================
# DECISIONS
# =============================================================================

@dataclass(frozen=True)
class Decision:
    """Outcome of a gate: allowed, or denied with a reason."""

    allowed: bool
    reason: str = ''

    def __bool__(self):
        return self.allowed


ALLOW = Decision(True)


def deny(reason: str = DEFAULT_DENIAL) -> Decision:
    return Decision(False, reason)


def enforce(decision: Decision) -> None:
    """Raise PermissionDeniedError for a denied decision."""
    if not decision.allowed:
        raise PermissionDeniedError(decision.reason or DEFAULT_DENIAL)


# =============================================================================
# ROLE GATE
# =============================================================================

def has_role(caller, *roles, reason: str = DEFAULT_DENIAL) -> Decision:
    """Allow when the caller's role is one of ``roles``."""
    if caller is None or not getattr(caller, 'is_authenticated', False):
        return deny(reason)
    if caller.role not in roles:
        return deny(reason)
    return ALLOW


class HasRole(permissions.BasePermission):
    """
    Role gate for views.

    Usage:
        class MyView(APIView):
            permission_classes = [IsAuthenticated, HasRole]
            required_roles = [User.Role.BUYER]
            role_denied_message = "Only buyers can create projects"

    ViewSets can scope roles per action with
    ``action_roles = {'create': [User.Role.SELLER]}``; actions not listed
    are left to the other permission classes.
    """

    def has_permission(self, request, view):
        roles = self._required_roles(view)
        if not roles:
            return True

        if not request.user or not request.user.is_authenticated:
            # Let IsAuthenticated report the 401
            return False

        message = getattr(view, 'role_denied_message', DEFAULT_DENIAL)
        if isinstance(message, dict):
            message = message.get(getattr(view, 'action', None), DEFAULT_DENIAL)

        enforce(has_role(request.user, *roles, reason=message))
        return True

    @staticmethod
    def _required_roles(view):
        action_roles = getattr(view, 'action_roles', None)
        if action_roles is not None:
            return action_roles.get(getattr(view, 'action', None), [])
        return getattr(view, 'required_roles', [])
