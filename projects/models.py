"""
Projects Models - Marketplace projects and everything attached to them.

This module defines models for project-based work:
- Project: work posted by a buyer with a budget range and deadline
- Bid: a seller's offer on a project (one per seller per project)
- Deliverable: a file submitted by the selected seller
- Review: the buyer's rating of the selected seller (one per project)

Status moves PENDING -> IN_PROGRESS -> COMPLETED only; the legal moves
live in projects.lifecycle and are applied by projects.services.
"""

import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import TimestampedModel


# ============================================================================
# PROJECTS
# ============================================================================

class Project(TimestampedModel):
    """
    Work posted by a buyer.

    ``selected_bid`` is set exactly once, together with the move to
    IN_PROGRESS, and always references one of this project's own bids.
    """

    class Status(models.TextChoices):
        PENDING = 'PENDING', _('Pending')
        IN_PROGRESS = 'IN_PROGRESS', _('In Progress')
        COMPLETED = 'COMPLETED', _('Completed')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='projects'
    )

    title = models.CharField(max_length=255)
    description = models.TextField()

    # Budget
    budget_min = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )
    budget_max = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )

    deadline = models.DateTimeField()

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )

    selected_bid = models.OneToOneField(
        'Bid',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='selected_for'
    )

    class Meta:
        verbose_name = _('Project')
        verbose_name_plural = _('Projects')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['buyer', 'status'], name='project_buyer_status_idx'),
            models.Index(fields=['status', '-created_at'], name='project_status_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(budget_min__lt=models.F('budget_max')),
                name='project_budget_min_lt_max',
            ),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"

    @property
    def selected_seller_id(self):
        """Seller id of the selected bid, or None."""
        if self.selected_bid_id is None:
            return None
        return self.selected_bid.seller_id

    def accepts_amount(self, amount):
        """Bid amounts are valid on the inclusive range [budget_min, budget_max]."""
        return self.budget_min <= amount <= self.budget_max


# ============================================================================
# BIDS
# ============================================================================

class Bid(TimestampedModel):
    """
    Seller's offer on a project.

    Immutable once created. A seller may hold at most one bid per project.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='bids'
    )
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='bids'
    )

    bid_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )
    estimated_completion = models.DateTimeField()
    message = models.TextField()

    class Meta:
        verbose_name = _('Bid')
        verbose_name_plural = _('Bids')
        ordering = ['bid_amount']
        constraints = [
            models.UniqueConstraint(
                fields=['project', 'seller'],
                name='unique_bid_per_seller_per_project',
            ),
        ]
        indexes = [
            models.Index(fields=['project', 'bid_amount'], name='bid_project_amount_idx'),
        ]

    def __str__(self):
        return f"Bid {self.bid_amount} on {self.project.title} by {self.seller.name}"


# ============================================================================
# DELIVERABLES
# ============================================================================

class Deliverable(TimestampedModel):
    """
    File submitted by the selected seller while the project is IN_PROGRESS.

    Append-only: rows are never edited after the upload is confirmed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='deliverables'
    )
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='submitted_deliverables'
    )

    description = models.TextField(blank=True)
    file_url = models.URLField(
        max_length=1000,
        help_text=_('Retrieval URL returned by blob storage')
    )
    file_name = models.CharField(max_length=255)
    file_size = models.PositiveIntegerField(
        help_text=_('File size in bytes')
    )
    file_type = models.CharField(max_length=255, blank=True)

    class Meta:
        verbose_name = _('Deliverable')
        verbose_name_plural = _('Deliverables')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['project', '-created_at'], name='deliv_project_created_idx'),
        ]

    def __str__(self):
        return f"{self.project.title} - {self.file_name}"


# ============================================================================
# REVIEWS
# ============================================================================

class Review(TimestampedModel):
    """
    Buyer's rating of the seller who held the selected bid.

    At most one per project, only once the project is COMPLETED.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    project = models.OneToOneField(
        Project,
        on_delete=models.CASCADE,
        related_name='review'
    )
    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reviews_given'
    )
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reviews_received'
    )

    # Rating (1-5 stars)
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    review_text = models.TextField(blank=True)

    class Meta:
        verbose_name = _('Review')
        verbose_name_plural = _('Reviews')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['seller', '-created_at'], name='review_seller_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rating__gte=1) & models.Q(rating__lte=5),
                name='review_rating_between_1_and_5',
            ),
        ]

    def __str__(self):
        return f"{self.rating}/5 for {self.project.title}"
