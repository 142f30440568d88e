"""
Projects Services - The project lifecycle engine.

Each public function is one lifecycle operation. It applies, in order:
1. the capability gates (role, ownership, selected seller)
2. the lifecycle table (is the event legal in the current status?)
3. input invariants (budget range, deadlines, bid bounds, uniqueness)
4. a guarded write

Status-changing writes are conditional on the status the event requires
(``UPDATE ... WHERE status = <expected>``). Two concurrent callers can both
pass the in-memory checks, but only one of them updates a row; the other
re-reads the project and fails with the lifecycle error, so a bid is never
selected twice and a project is never completed or deleted twice.

Notifications are handed to projects.notifications after the write and
never affect the outcome reported to the caller.
"""

import logging
import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Avg
from django.utils import timezone

from accounts.models import User
from api.exceptions import (
    BusinessRuleViolationError,
    InvalidInputError,
    InvalidTransitionError,
    ResourceNotFoundError,
)
from core.storage import discard_stored_file, store_deliverable_file

from . import gates, lifecycle, notifications
from .lifecycle import Event
from .models import Bid, Deliverable, Project, Review

logger = logging.getLogger(__name__)

Role = User.Role


# =============================================================================
# LOOKUPS
# =============================================================================

def _get_or_404(queryset, pk, label):
    try:
        uuid.UUID(str(pk))
    except ValueError:
        raise ResourceNotFoundError(label, pk) from None
    try:
        return queryset.get(pk=pk)
    except (queryset.model.DoesNotExist, DjangoValidationError):
        raise ResourceNotFoundError(label, pk) from None


def get_project(project_id):
    """Load a project or raise ResourceNotFoundError("Project not found")."""
    return _get_or_404(
        Project.objects
        .select_related('buyer', 'selected_bid__seller')
        .prefetch_related('bids__seller', 'deliverables'),
        project_id,
        'Project',
    )


def get_seller(seller_id):
    """Load a SELLER user or raise ResourceNotFoundError("Seller not found")."""
    return _get_or_404(User.objects.sellers(), seller_id, 'Seller')


# =============================================================================
# GUARDED WRITES
# =============================================================================

def _reject_stale(project, event):
    """Raise the lifecycle error for a project whose status moved under us."""
    current = (
        Project.objects.filter(pk=project.pk).values_list('status', flat=True).first()
    )
    if current is None:
        raise ResourceNotFoundError('Project', project.pk)
    logger.warning(
        "Lost race on %s for project %s: status is now %s",
        event.value, project.pk, current,
    )
    raise InvalidTransitionError(
        lifecycle.REJECTION_MESSAGES[event],
        current_status=current,
        event=event.value,
    )


def _guarded_update(project, event, **fields):
    """
    Apply ``event`` to ``project`` with a compare-and-swap on its status.

    Returns the refreshed project.
    """
    source = lifecycle.required_status(event)
    target = lifecycle.next_status(project.status, event)

    updated = Project.objects.filter(pk=project.pk, status=source).update(
        status=target,
        updated_at=timezone.now(),
        **fields,
    )
    if not updated:
        _reject_stale(project, event)

    project.refresh_from_db()
    if target != source:
        logger.info("Project %s moved %s -> %s (%s)", project.pk, source, target, event.value)
    return project


# =============================================================================
# VALIDATION HELPERS
# =============================================================================

def _require_future(value, message):
    if value <= timezone.now():
        raise InvalidInputError(message)


def _require_budget_range(budget_min, budget_max):
    if Decimal(budget_min) >= Decimal(budget_max):
        raise InvalidInputError("Minimum budget must be less than maximum budget")


# =============================================================================
# PROJECTS
# =============================================================================

def create_project(caller, *, title, description, budget_min, budget_max, deadline):
    """CreateProject: (none) -> PENDING."""
    gates.enforce(gates.has_role(caller, Role.BUYER, reason="Only buyers can create projects"))
    lifecycle.next_status(None, Event.CREATE_PROJECT)

    _require_budget_range(budget_min, budget_max)
    _require_future(deadline, "Deadline must be in the future")

    project = Project.objects.create(
        buyer=caller,
        title=title,
        description=description,
        budget_min=budget_min,
        budget_max=budget_max,
        deadline=deadline,
    )
    logger.info("Buyer %s created project %s", caller.pk, project.pk)
    return project


UPDATABLE_FIELDS = ('title', 'description', 'budget_min', 'budget_max', 'deadline')


def update_project(caller, project, **changes):
    """
    UpdateProject: PENDING -> PENDING.

    Only the given fields change. The resulting budget range must still
    satisfy budget_min < budget_max, checked against the stored row.
    """
    gates.enforce(gates.is_project_buyer(
        caller, project, reason="You do not have permission to update this project"
    ))
    lifecycle.next_status(project.status, Event.UPDATE_PROJECT)

    changes = {key: value for key, value in changes.items()
               if key in UPDATABLE_FIELDS and value is not None}

    if 'deadline' in changes:
        _require_future(changes['deadline'], "Deadline must be in the future")

    with transaction.atomic():
        current = (
            Project.objects.select_for_update()
            .filter(pk=project.pk)
            .values('status', 'budget_min', 'budget_max')
            .first()
        )
        if current is None or current['status'] != lifecycle.required_status(Event.UPDATE_PROJECT):
            _reject_stale(project, Event.UPDATE_PROJECT)

        if 'budget_min' in changes or 'budget_max' in changes:
            _require_budget_range(
                changes.get('budget_min', current['budget_min']),
                changes.get('budget_max', current['budget_max']),
            )

        try:
            with transaction.atomic():
                return _guarded_update(project, Event.UPDATE_PROJECT, **changes)
        except IntegrityError:
            # Budget check constraint; another update moved the range first
            raise InvalidInputError("Minimum budget must be less than maximum budget") from None


def delete_project(caller, project):
    """DeleteProject: PENDING -> (deleted), cascading to bids."""
    gates.enforce(gates.is_project_buyer(
        caller, project, reason="You do not have permission to delete this project"
    ))
    lifecycle.next_status(project.status, Event.DELETE_PROJECT)

    with transaction.atomic():
        # The conditional write holds the row lock until commit, so no
        # transition can land between it and the cascade below.
        claimed = Project.objects.filter(
            pk=project.pk, status=lifecycle.required_status(Event.DELETE_PROJECT)
        ).update(updated_at=timezone.now())
        if not claimed:
            _reject_stale(project, Event.DELETE_PROJECT)

        Project.objects.filter(pk=project.pk).delete()

    logger.info("Buyer %s deleted project %s", caller.pk, project.pk)


def projects_visible_to(caller):
    """Buyers see their own projects; sellers see every project."""
    queryset = (
        Project.objects
        .select_related('buyer', 'selected_bid__seller')
        .prefetch_related('bids__seller', 'deliverables')
        .order_by('-created_at')
    )
    if caller.role == Role.BUYER:
        queryset = queryset.filter(buyer=caller)
    return queryset


def view_project(caller, project):
    gates.enforce(gates.can_view_project(caller, project))
    return project


# =============================================================================
# BIDS
# =============================================================================

def place_bid(caller, project, *, bid_amount, estimated_completion, message):
    """
    PlaceBid: PENDING -> PENDING.

    The amount must lie on [budget_min, budget_max] inclusive and the
    estimated completion must fall in (now, deadline].
    """
    gates.enforce(gates.has_role(caller, Role.SELLER, reason="Only sellers can create bids"))
    lifecycle.next_status(project.status, Event.PLACE_BID)

    if Bid.objects.filter(project=project, seller=caller).exists():
        raise BusinessRuleViolationError("You have already bid on this project")

    if not project.accepts_amount(bid_amount):
        raise InvalidInputError(
            f"Bid amount must be between {project.budget_min} and {project.budget_max}"
        )

    _require_future(estimated_completion, "Estimated completion date must be in the future")
    if estimated_completion > project.deadline:
        raise InvalidInputError("Estimated completion date cannot be after the project deadline")

    try:
        with transaction.atomic():
            bid = Bid.objects.create(
                project=project,
                seller=caller,
                bid_amount=bid_amount,
                estimated_completion=estimated_completion,
                message=message,
            )
    except IntegrityError:
        raise BusinessRuleViolationError("You have already bid on this project") from None

    logger.info("Seller %s bid %s on project %s", caller.pk, bid_amount, project.pk)
    return bid


def bids_for(caller, project):
    """Bids on ``project`` ordered by ascending amount."""
    gates.enforce(gates.can_list_bids(caller, project))
    return project.bids.select_related('seller').order_by('bid_amount', 'created_at')


def select_bid(caller, project, bid_id):
    """
    SelectBid: PENDING -> IN_PROGRESS.

    Sets selected_bid exactly once; the loser of a concurrent selection
    gets the "not in PENDING status" error.
    """
    gates.enforce(gates.has_role(caller, Role.BUYER, reason="Only buyers can select bids"))
    gates.enforce(gates.is_project_buyer(
        caller, project, reason="You do not have permission to select a bid for this project"
    ))
    lifecycle.next_status(project.status, Event.SELECT_BID)

    try:
        bid = _get_or_404(Bid.objects.select_related('seller').filter(project=project), bid_id, 'Bid')
    except ResourceNotFoundError:
        raise ResourceNotFoundError(detail="Bid not found for this project", resource_id=bid_id) from None

    with transaction.atomic():
        project = _guarded_update(project, Event.SELECT_BID, selected_bid=bid)
        notifications.notify_bid_selected(bid)

    return project


# =============================================================================
# DELIVERABLES
# =============================================================================

def submit_deliverable(caller, project, upload, description='', build_url=None):
    """
    SubmitDeliverable: IN_PROGRESS -> IN_PROGRESS.

    The file is stored first; the Deliverable row is written only after
    storage confirms, under a lock that re-checks the project status.
    ``build_url`` turns a storage-relative URL into an absolute one.
    """
    gates.enforce(gates.has_role(caller, Role.SELLER, reason="Only sellers can submit deliverables"))
    if upload is None:
        raise InvalidInputError("Please provide a file")
    lifecycle.next_status(project.status, Event.SUBMIT_DELIVERABLE)
    gates.enforce(gates.is_selected_seller(caller, project))

    stored = store_deliverable_file(project.pk, upload)
    file_url = build_url(stored.url) if build_url else stored.url

    with transaction.atomic():
        current = (
            Project.objects.select_for_update()
            .filter(pk=project.pk)
            .values_list('status', flat=True)
            .first()
        )
        if current != lifecycle.required_status(Event.SUBMIT_DELIVERABLE):
            discard_stored_file(stored)
            _reject_stale(project, Event.SUBMIT_DELIVERABLE)

        deliverable = Deliverable.objects.create(
            project=project,
            submitted_by=caller,
            description=description or '',
            file_url=file_url,
            file_name=stored.original_name,
            file_size=stored.size,
            file_type=stored.content_type,
        )

    logger.info("Seller %s submitted deliverable %s for project %s",
                caller.pk, deliverable.pk, project.pk)
    return deliverable


def deliverables_for(caller, project):
    """Deliverables on ``project``, newest first."""
    gates.enforce(gates.can_view_deliverables(caller, project))
    return project.deliverables.order_by('-created_at')


def complete_project(caller, project):
    """CompleteProject: IN_PROGRESS -> COMPLETED, requires at least one deliverable."""
    gates.enforce(gates.has_role(caller, Role.BUYER, reason="Only buyers can mark projects as complete"))
    gates.enforce(gates.is_project_buyer(
        caller, project, reason="You do not have permission to complete this project"
    ))
    lifecycle.next_status(project.status, Event.COMPLETE_PROJECT)

    if not project.deliverables.exists():
        raise BusinessRuleViolationError("Cannot complete a project with no deliverables")

    with transaction.atomic():
        project = _guarded_update(project, Event.COMPLETE_PROJECT)
        notifications.notify_project_completed(project)

    return project


# =============================================================================
# REVIEWS
# =============================================================================

def create_review(caller, project, *, rating, review_text=''):
    """
    CreateReview: COMPLETED, once per project.

    The review is attributed to the seller who held the selected bid.
    """
    gates.enforce(gates.has_role(caller, Role.BUYER, reason="Only buyers can create reviews"))
    if rating is None or not 1 <= rating <= 5:
        raise InvalidInputError("Rating must be between 1 and 5")
    gates.enforce(gates.is_project_buyer(
        caller, project, reason="You do not have permission to review this project"
    ))
    lifecycle.next_status(project.status, Event.CREATE_REVIEW)

    if Review.objects.filter(project=project).exists():
        raise BusinessRuleViolationError("A review already exists for this project")

    if project.selected_bid_id is None:
        raise BusinessRuleViolationError("This project does not have a selected seller to review")

    try:
        with transaction.atomic():
            review = Review.objects.create(
                project=project,
                buyer=caller,
                seller_id=project.selected_seller_id,
                rating=rating,
                review_text=review_text or '',
            )
    except IntegrityError:
        raise BusinessRuleViolationError("A review already exists for this project") from None

    logger.info("Buyer %s reviewed seller %s on project %s (%d/5)",
                caller.pk, review.seller_id, project.pk, rating)
    return review


def seller_reviews(seller_id):
    """
    Return ``(reviews, average_rating)`` for a seller.

    The average is the arithmetic mean of all ratings, 0 when there are none.
    """
    seller = get_seller(seller_id)
    reviews = (
        Review.objects
        .filter(seller=seller)
        .select_related('buyer', 'project')
        .order_by('-created_at')
    )
    average = reviews.aggregate(average=Avg('rating'))['average']
    return reviews, float(average) if average is not None else 0
