"""
Bidmarket URL Configuration

Routes:
- /                      welcome message
- /admin/                Django admin
- /api/auth/             registration, login, current user
- /api/projects/         project CRUD
- /api/bids/             bids per project, bid selection
- /api/deliverables/     deliverable upload/listing, project completion
- /api/reviews/          reviews
- /api/schema/           OpenAPI schema
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView


def welcome(request):
    """Root endpoint."""
    return JsonResponse({'message': 'Welcome to the Seller-Buyer Project Bidding API'})


urlpatterns = [
    path('', welcome, name='welcome'),
    path('admin/', admin.site.urls),
    path('api/auth/', include('accounts.urls')),
    path('api/', include('projects.api.urls')),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
]
