"""
Projects API URLs

Mounted under /api/ without trailing slashes:
- projects, projects/<id>
- bids/<projectId>, bids/<projectId>/<bidId>/select
- deliverables/<projectId>, deliverables/<projectId>/complete
- reviews/<projectId>, reviews/sellers/<sellerId>
"""

from django.urls import path

from .views import (
    BidViewSet,
    DeliverableViewSet,
    ProjectViewSet,
    ReviewViewSet,
    SellerReviewViewSet,
)

app_name = 'projects'

project_list = ProjectViewSet.as_view({'get': 'list', 'post': 'create'})
project_detail = ProjectViewSet.as_view({
    'get': 'retrieve',
    'patch': 'partial_update',
    'delete': 'destroy',
})
bid_list = BidViewSet.as_view({'get': 'list', 'post': 'create'})
bid_select = BidViewSet.as_view({'put': 'select'})
deliverable_list = DeliverableViewSet.as_view({'get': 'list', 'post': 'create'})
deliverable_complete = DeliverableViewSet.as_view({'put': 'complete'})
review_create = ReviewViewSet.as_view({'post': 'create'})
seller_reviews = SellerReviewViewSet.as_view({'get': 'list'})

urlpatterns = [
    path('projects', project_list, name='project-list'),
    path('projects/<str:pk>', project_detail, name='project-detail'),
    path('bids/<str:project_id>', bid_list, name='bid-list'),
    path('bids/<str:project_id>/<str:bid_id>/select', bid_select, name='bid-select'),
    path('deliverables/<str:project_id>', deliverable_list, name='deliverable-list'),
    path('deliverables/<str:project_id>/complete', deliverable_complete, name='deliverable-complete'),
    path('reviews/sellers/<str:seller_id>', seller_reviews, name='seller-reviews'),
    path('reviews/<str:project_id>', review_create, name='review-create'),
]
