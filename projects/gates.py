"""
Project Gates - Ownership and participation checks.

Pure functions ``(caller, project) -> Decision``; see accounts.permissions
for the Decision type and the role gate. Services call ``enforce`` on the
result before touching the store.
"""

from accounts.models import User
from accounts.permissions import ALLOW, Decision, deny, enforce, has_role  # noqa: F401

NO_ACCESS = "You do not have permission to access this project"


def is_project_buyer(caller, project, reason: str = NO_ACCESS) -> Decision:
    """Allow only the buyer who owns ``project``."""
    if caller is None or project.buyer_id != caller.id:
        return deny(reason)
    return ALLOW


def is_selected_seller(caller, project,
                       reason: str = "You are not the selected seller for this project") -> Decision:
    """Allow only the seller whose bid was selected for ``project``."""
    if caller is None or project.selected_bid_id is None:
        return deny(reason)
    if project.selected_seller_id != caller.id:
        return deny(reason)
    return ALLOW


def can_view_project(caller, project) -> Decision:
    """Buyers see only their own projects; sellers may see any project."""
    if caller.role == User.Role.BUYER:
        return is_project_buyer(caller, project)
    return ALLOW


def can_list_bids(caller, project) -> Decision:
    return can_view_project(caller, project)


def can_view_deliverables(caller, project) -> Decision:
    """Only the owning buyer and the selected seller see deliverables."""
    if caller.role == User.Role.BUYER:
        return is_project_buyer(caller, project)
    if caller.role == User.Role.SELLER:
        return is_selected_seller(caller, project, reason=NO_ACCESS)
    return deny(NO_ACCESS)
