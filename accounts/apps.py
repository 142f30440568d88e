"""
Accounts app configuration.

Marketplace identities: every user is either a BUYER, who posts projects,
or a SELLER, who bids on them. Provides registration, login and bearer
token authentication for the API.
"""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Configuration for the accounts app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'accounts'
    verbose_name = 'Accounts'
