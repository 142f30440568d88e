"""
Project Lifecycle - The transition table.

Every status-changing or status-gated operation on a project is an Event.
The table below is the only place that decides whether an event is legal in
a given status and which status results:

    PENDING --SELECT_BID--> IN_PROGRESS --COMPLETE_PROJECT--> COMPLETED

Status never regresses and never skips. Role, ownership and input guards
are applied by projects.services and projects.gates; this module only
knows about statuses.
"""

from enum import Enum

from api.exceptions import InvalidTransitionError

from .models import Project

Status = Project.Status


class Event(str, Enum):
    CREATE_PROJECT = 'CREATE_PROJECT'
    UPDATE_PROJECT = 'UPDATE_PROJECT'
    DELETE_PROJECT = 'DELETE_PROJECT'
    PLACE_BID = 'PLACE_BID'
    SELECT_BID = 'SELECT_BID'
    SUBMIT_DELIVERABLE = 'SUBMIT_DELIVERABLE'
    COMPLETE_PROJECT = 'COMPLETE_PROJECT'
    CREATE_REVIEW = 'CREATE_REVIEW'


# Marks the target of DELETE_PROJECT: the row no longer exists afterwards.
DELETED = 'DELETED'

# (current status, event) -> resulting status. None stands for "no project yet".
TRANSITIONS = {
    (None, Event.CREATE_PROJECT): Status.PENDING,
    (Status.PENDING, Event.UPDATE_PROJECT): Status.PENDING,
    (Status.PENDING, Event.DELETE_PROJECT): DELETED,
    (Status.PENDING, Event.PLACE_BID): Status.PENDING,
    (Status.PENDING, Event.SELECT_BID): Status.IN_PROGRESS,
    (Status.IN_PROGRESS, Event.SUBMIT_DELIVERABLE): Status.IN_PROGRESS,
    (Status.IN_PROGRESS, Event.COMPLETE_PROJECT): Status.COMPLETED,
    (Status.COMPLETED, Event.CREATE_REVIEW): Status.COMPLETED,
}

REJECTION_MESSAGES = {
    Event.CREATE_PROJECT: "Project already exists",
    Event.UPDATE_PROJECT: "Cannot update a project that is already in progress or completed",
    Event.DELETE_PROJECT: "Cannot delete a project that is already in progress or completed",
    Event.PLACE_BID: "Cannot bid on a project that is not in PENDING status",
    Event.SELECT_BID: "Cannot select a bid for a project that is not in PENDING status",
    Event.SUBMIT_DELIVERABLE: "Cannot submit deliverables for a project that is not in progress",
    Event.COMPLETE_PROJECT: "Cannot complete a project that is not in progress",
    Event.CREATE_REVIEW: "Cannot review a project that is not completed",
}


def required_status(event):
    """Return the single status in which ``event`` is legal."""
    for (current, candidate), _target in TRANSITIONS.items():
        if candidate == event:
            return current
    raise KeyError(event)


def next_status(current, event):
    """
    Return the status that results from applying ``event`` in ``current``.

    Raises:
        InvalidTransitionError: the event is not legal in ``current``
    """
    if current is not None:
        current = Status(current)
    try:
        return TRANSITIONS[(current, event)]
    except KeyError:
        raise InvalidTransitionError(
            REJECTION_MESSAGES[event],
            current_status=current,
            event=event.value,
        ) from None
