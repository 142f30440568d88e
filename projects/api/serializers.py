"""
Projects Serializers - DRF serializers for API endpoints.

This module provides serializers for:
- Projects (list, detail, create, update)
- Bids
- Deliverables (output only; uploads go through DeliverableUploadSerializer)
- Reviews

Output keys are camelCase. Input serializers only shape and type-check the
payload; lifecycle rules live in projects.services.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from accounts.models import User
from accounts.serializers import UserSummarySerializer
from core.validators import DeliverableFileValidator

from ..models import Bid, Deliverable, Project, Review


def _required(message):
    return {'required': message, 'blank': message, 'null': message}


# ============================================================================
# EMBEDDED SUMMARIES
# ============================================================================

class UserBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name']
        read_only_fields = fields


class ProjectBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Project
        fields = ['id', 'title']
        read_only_fields = fields


class BidSummarySerializer(serializers.ModelSerializer):
    """Bid as embedded in project listings."""

    bidAmount = serializers.DecimalField(source='bid_amount', max_digits=12, decimal_places=2)
    estimatedCompletion = serializers.DateTimeField(source='estimated_completion')
    seller = UserBriefSerializer()

    class Meta:
        model = Bid
        fields = ['id', 'bidAmount', 'estimatedCompletion', 'seller']
        read_only_fields = fields


# ============================================================================
# BID SERIALIZERS
# ============================================================================

class BidSerializer(serializers.ModelSerializer):
    """Full bid with its seller's contact summary."""

    projectId = serializers.UUIDField(source='project_id', read_only=True)
    sellerId = serializers.UUIDField(source='seller_id', read_only=True)
    bidAmount = serializers.DecimalField(source='bid_amount', max_digits=12, decimal_places=2)
    estimatedCompletion = serializers.DateTimeField(source='estimated_completion')
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    seller = UserSummarySerializer(read_only=True)

    class Meta:
        model = Bid
        fields = [
            'id', 'projectId', 'sellerId', 'bidAmount', 'estimatedCompletion',
            'message', 'createdAt', 'updatedAt', 'seller',
        ]
        read_only_fields = fields


BID_REQUIRED = _("Please provide bidAmount, estimatedCompletion, and message")


class BidCreateSerializer(serializers.Serializer):
    bidAmount = serializers.DecimalField(
        max_digits=12, decimal_places=2, error_messages=_required(BID_REQUIRED),
    )
    estimatedCompletion = serializers.DateTimeField(error_messages=_required(BID_REQUIRED))
    message = serializers.CharField(error_messages=_required(BID_REQUIRED))


# ============================================================================
# DELIVERABLE SERIALIZERS
# ============================================================================

class DeliverableSerializer(serializers.ModelSerializer):
    projectId = serializers.UUIDField(source='project_id', read_only=True)
    submittedById = serializers.UUIDField(source='submitted_by_id', read_only=True)
    fileUrl = serializers.URLField(source='file_url', read_only=True)
    fileName = serializers.CharField(source='file_name', read_only=True)
    fileSize = serializers.IntegerField(source='file_size', read_only=True)
    fileType = serializers.CharField(source='file_type', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Deliverable
        fields = [
            'id', 'projectId', 'submittedById', 'description', 'fileUrl',
            'fileName', 'fileSize', 'fileType', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


FILE_REQUIRED = _("Please provide a file")


class DeliverableUploadSerializer(serializers.Serializer):
    """Multipart upload: ``file`` plus an optional ``description``."""

    file = serializers.FileField(
        validators=[DeliverableFileValidator()],
        error_messages={
            **_required(FILE_REQUIRED),
            'empty': FILE_REQUIRED,
            'invalid': FILE_REQUIRED,
        },
    )
    description = serializers.CharField(required=False, allow_blank=True, default='')


# ============================================================================
# REVIEW SERIALIZERS
# ============================================================================

class ReviewSerializer(serializers.ModelSerializer):
    projectId = serializers.UUIDField(source='project_id', read_only=True)
    buyerId = serializers.UUIDField(source='buyer_id', read_only=True)
    sellerId = serializers.UUIDField(source='seller_id', read_only=True)
    reviewText = serializers.CharField(source='review_text', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Review
        fields = [
            'id', 'projectId', 'buyerId', 'sellerId', 'rating', 'reviewText',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class SellerReviewSerializer(ReviewSerializer):
    """Review as listed on a seller's profile."""

    buyer = UserBriefSerializer(read_only=True)
    project = ProjectBriefSerializer(read_only=True)

    class Meta(ReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + ['buyer', 'project']
        read_only_fields = fields


RATING_INVALID = _("Rating must be between 1 and 5")


class ReviewCreateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(
        min_value=1,
        max_value=5,
        error_messages={
            **_required(RATING_INVALID),
            'invalid': RATING_INVALID,
            'min_value': RATING_INVALID,
            'max_value': RATING_INVALID,
        },
    )
    reviewText = serializers.CharField(required=False, allow_blank=True, default='')


# ============================================================================
# PROJECT SERIALIZERS
# ============================================================================

class ProjectSerializer(serializers.ModelSerializer):
    """
    Project as returned by listings and mutations.

    Embeds the buyer, bid summaries, the selected bid and deliverables.
    """

    budgetMin = serializers.DecimalField(source='budget_min', max_digits=12, decimal_places=2)
    budgetMax = serializers.DecimalField(source='budget_max', max_digits=12, decimal_places=2)
    buyerId = serializers.UUIDField(source='buyer_id', read_only=True)
    selectedBidId = serializers.UUIDField(source='selected_bid_id', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    buyer = UserSummarySerializer(read_only=True)
    bids = BidSummarySerializer(many=True, read_only=True)
    selectedBid = BidSerializer(source='selected_bid', read_only=True, allow_null=True)
    deliverables = DeliverableSerializer(many=True, read_only=True)

    class Meta:
        model = Project
        fields = [
            'id', 'title', 'description', 'budgetMin', 'budgetMax', 'deadline',
            'status', 'buyerId', 'selectedBidId', 'createdAt', 'updatedAt',
            'buyer', 'bids', 'selectedBid', 'deliverables',
        ]
        read_only_fields = fields


class ProjectDetailSerializer(ProjectSerializer):
    """Single project: full bids with seller contact, plus the review."""

    bids = BidSerializer(many=True, read_only=True)
    review = serializers.SerializerMethodField()

    class Meta(ProjectSerializer.Meta):
        fields = ProjectSerializer.Meta.fields + ['review']
        read_only_fields = fields

    def get_review(self, obj):
        review = getattr(obj, 'review', None)
        return ReviewSerializer(review).data if review else None


PROJECT_REQUIRED = _("Please provide title, description, budgetMin, budgetMax, and deadline")


class ProjectCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, error_messages=_required(PROJECT_REQUIRED))
    description = serializers.CharField(error_messages=_required(PROJECT_REQUIRED))
    budgetMin = serializers.DecimalField(
        max_digits=12, decimal_places=2, error_messages=_required(PROJECT_REQUIRED),
    )
    budgetMax = serializers.DecimalField(
        max_digits=12, decimal_places=2, error_messages=_required(PROJECT_REQUIRED),
    )
    deadline = serializers.DateTimeField(error_messages=_required(PROJECT_REQUIRED))

    def to_service_kwargs(self):
        data = self.validated_data
        return {
            'title': data['title'],
            'description': data['description'],
            'budget_min': data['budgetMin'],
            'budget_max': data['budgetMax'],
            'deadline': data['deadline'],
        }


class ProjectUpdateSerializer(serializers.Serializer):
    """Partial update; omitted fields are left unchanged."""

    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False)
    budgetMin = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    budgetMax = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    deadline = serializers.DateTimeField(required=False)

    FIELD_MAP = {
        'title': 'title',
        'description': 'description',
        'budgetMin': 'budget_min',
        'budgetMax': 'budget_max',
        'deadline': 'deadline',
    }

    def to_service_kwargs(self):
        return {self.FIELD_MAP[key]: value for key, value in self.validated_data.items()}
