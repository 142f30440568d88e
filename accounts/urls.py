"""
Accounts API URLs
"""

from django.urls import path

from .views import CurrentUserView, LoginView, RegisterView

app_name = 'accounts'

urlpatterns = [
    path('register', RegisterView.as_view(), name='register'),
    path('login', LoginView.as_view(), name='login'),
    path('me', CurrentUserView.as_view(), name='me'),
]
