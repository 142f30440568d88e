"""
Projects API Views - REST API endpoints.

This module provides the marketplace endpoints:
- ProjectViewSet: project CRUD and listing filters
- BidViewSet: bidding and bid selection
- DeliverableViewSet: deliverable upload, listing and project completion
- ReviewViewSet: reviews
- SellerReviewViewSet: per-seller ratings (public)

Views translate HTTP into calls on projects.services and shape the
response envelope; every rule is enforced in the service layer.
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import permissions, status, viewsets
from rest_framework.response import Response

from accounts.models import User
from accounts.permissions import HasRole

from .. import services
from ..models import Project
from .filters import ProjectFilterSet
from .permissions import load_owned_project, load_project
from .serializers import (
    BidCreateSerializer,
    BidSerializer,
    DeliverableSerializer,
    DeliverableUploadSerializer,
    ProjectCreateSerializer,
    ProjectDetailSerializer,
    ProjectSerializer,
    ProjectUpdateSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
    SellerReviewSerializer,
)

logger = logging.getLogger(__name__)

BUYER = User.Role.BUYER
SELLER = User.Role.SELLER


def success(status_code=status.HTTP_200_OK, **payload):
    return Response({'status': 'success', **payload}, status=status_code)


def success_list(key, items, **extra):
    return success(results=len(items), **{key: items}, **extra)


# ============================================================================
# PROJECT VIEWSET
# ============================================================================

class ProjectViewSet(viewsets.GenericViewSet):
    """
    ViewSet for projects.

    Provides:
    - list: GET /api/projects
    - create: POST /api/projects (BUYER)
    - retrieve: GET /api/projects/{id}
    - partial_update: PATCH /api/projects/{id} (owning BUYER, PENDING)
    - destroy: DELETE /api/projects/{id} (owning BUYER, PENDING)

    Filtering:
    - ?status=PENDING
    - ?minBudget=100&maxBudget=500
    """

    serializer_class = ProjectSerializer
    permission_classes = [permissions.IsAuthenticated, HasRole]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProjectFilterSet
    action_roles = {
        'create': [BUYER],
        'partial_update': [BUYER],
        'destroy': [BUYER],
    }
    role_denied_message = {'create': "Only buyers can create projects"}

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Project.objects.none()
        return services.projects_visible_to(self.request.user)

    def list(self, request):
        projects = self.filter_queryset(self.get_queryset())
        return success_list('projects', ProjectSerializer(projects, many=True).data)

    def create(self, request):
        serializer = ProjectCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = services.create_project(request.user, **serializer.to_service_kwargs())
        return success(status.HTTP_201_CREATED, project=ProjectSerializer(project).data)

    def retrieve(self, request, pk=None):
        project = services.view_project(request.user, load_project(request, pk))
        return success(project=ProjectDetailSerializer(project).data)

    def partial_update(self, request, pk=None):
        project = load_owned_project(
            request, pk, reason="You do not have permission to update this project"
        )
        serializer = ProjectUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = services.update_project(request.user, project, **serializer.to_service_kwargs())
        return success(project=ProjectSerializer(project).data)

    def destroy(self, request, pk=None):
        project = load_owned_project(
            request, pk, reason="You do not have permission to delete this project"
        )
        services.delete_project(request.user, project)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================================================
# BID VIEWSET
# ============================================================================

class BidViewSet(viewsets.GenericViewSet):
    """
    ViewSet for bids on a project.

    Provides:
    - list: GET /api/bids/{projectId} (ascending amount)
    - create: POST /api/bids/{projectId} (SELLER)
    - select: PUT /api/bids/{projectId}/{bidId}/select (owning BUYER)
    """

    serializer_class = BidSerializer
    permission_classes = [permissions.IsAuthenticated, HasRole]
    action_roles = {
        'create': [SELLER],
        'select': [BUYER],
    }
    role_denied_message = {
        'create': "Only sellers can create bids",
        'select': "Only buyers can select bids",
    }

    def list(self, request, project_id=None):
        project = load_project(request, project_id)
        bids = services.bids_for(request.user, project)
        return success_list('bids', BidSerializer(bids, many=True).data)

    def create(self, request, project_id=None):
        serializer = BidCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        project = load_project(request, project_id)
        bid = services.place_bid(
            request.user,
            project,
            bid_amount=data['bidAmount'],
            estimated_completion=data['estimatedCompletion'],
            message=data['message'],
        )
        return success(status.HTTP_201_CREATED, bid=BidSerializer(bid).data)

    def select(self, request, project_id=None, bid_id=None):
        project = load_owned_project(
            request, project_id,
            reason="You do not have permission to select a bid for this project",
        )
        project = services.select_bid(request.user, project, bid_id)
        return success(project=ProjectSerializer(project).data)


# ============================================================================
# DELIVERABLE VIEWSET
# ============================================================================

class DeliverableViewSet(viewsets.GenericViewSet):
    """
    ViewSet for deliverables on a project.

    Provides:
    - list: GET /api/deliverables/{projectId} (newest first)
    - create: POST /api/deliverables/{projectId} (selected SELLER, multipart ``file``)
    - complete: PUT /api/deliverables/{projectId}/complete (owning BUYER)
    """

    serializer_class = DeliverableSerializer
    permission_classes = [permissions.IsAuthenticated, HasRole]
    action_roles = {
        'create': [SELLER],
        'complete': [BUYER],
    }
    role_denied_message = {
        'create': "Only sellers can submit deliverables",
        'complete': "Only buyers can mark projects as complete",
    }

    def list(self, request, project_id=None):
        project = load_project(request, project_id)
        deliverables = services.deliverables_for(request.user, project)
        return success_list('deliverables', DeliverableSerializer(deliverables, many=True).data)

    def create(self, request, project_id=None):
        serializer = DeliverableUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = load_project(request, project_id)
        deliverable = services.submit_deliverable(
            request.user,
            project,
            serializer.validated_data['file'],
            description=serializer.validated_data.get('description', ''),
            build_url=request.build_absolute_uri,
        )
        return success(status.HTTP_201_CREATED, deliverable=DeliverableSerializer(deliverable).data)

    def complete(self, request, project_id=None):
        project = load_owned_project(
            request, project_id,
            reason="You do not have permission to complete this project",
        )
        project = services.complete_project(request.user, project)
        return success(project=ProjectSerializer(project).data)


# ============================================================================
# REVIEW VIEWSET
# ============================================================================

class ReviewViewSet(viewsets.GenericViewSet):
    """
    ViewSet for reviews.

    Provides:
    - create: POST /api/reviews/{projectId} (owning BUYER, COMPLETED)
    """

    serializer_class = ReviewSerializer
    permission_classes = [permissions.IsAuthenticated, HasRole]
    action_roles = {'create': [BUYER]}
    role_denied_message = {'create': "Only buyers can create reviews"}

    def create(self, request, project_id=None):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = load_owned_project(
            request, project_id,
            reason="You do not have permission to review this project",
        )
        review = services.create_review(
            request.user,
            project,
            rating=serializer.validated_data['rating'],
            review_text=serializer.validated_data.get('reviewText', ''),
        )
        return success(status.HTTP_201_CREATED, review=ReviewSerializer(review).data)


class SellerReviewViewSet(viewsets.GenericViewSet):
    """
    Public ratings for a seller.

    Provides:
    - list: GET /api/reviews/sellers/{sellerId} (reviews newest first, averageRating)
    """

    serializer_class = SellerReviewSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def list(self, request, seller_id=None):
        reviews, average = services.seller_reviews(seller_id)
        data = SellerReviewSerializer(reviews, many=True).data
        return success_list('reviews', data, averageRating=average)
