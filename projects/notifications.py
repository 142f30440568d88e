"""
Project Notifications - Email hand-off for lifecycle events.

Emails are sent by Celery workers (projects.tasks) once the transaction
that changed the project has committed. A failure to enqueue is logged
and swallowed: the lifecycle operation has already succeeded and its
outcome must not change because the mail transport is unavailable.
"""

import logging

from django.db import transaction

from . import tasks

logger = logging.getLogger(__name__)


def _enqueue(task, *args):
    try:
        task.delay(*args)
    except Exception:
        logger.exception("Failed to enqueue %s%r", task.name, args)


def _dispatch(task, *args):
    transaction.on_commit(lambda: _enqueue(task, *args))


def notify_bid_selected(bid):
    """Tell the seller that their bid won."""
    _dispatch(tasks.send_bid_selected_email, str(bid.pk))


def notify_project_completed(project):
    """Tell the buyer and the selected seller that the project is complete."""
    _dispatch(tasks.send_project_completed_email, str(project.pk))
