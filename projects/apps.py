"""
Projects app configuration.

This app manages the marketplace lifecycle: buyers post projects, sellers
bid, the buyer selects a bid, the selected seller uploads deliverables and
the buyer completes the project and reviews the seller.
"""

from django.apps import AppConfig


class ProjectsConfig(AppConfig):
    """Configuration for the projects app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'projects'
    verbose_name = 'Projects'
