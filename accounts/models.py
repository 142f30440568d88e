"""
Accounts Models - Marketplace identities.

Models:
- User: login identity carrying exactly one marketplace role (BUYER or SELLER)

Email is the login identifier. The role is fixed at registration; only the
password may change afterwards.
"""

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Manager creating users keyed by email."""

    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('The email address must be set')
        # Stored exactly as given: lookups are case-sensitive exact matches
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', User.Role.BUYER)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self._create_user(email, password, **extra_fields)

    def sellers(self):
        return self.filter(role=User.Role.SELLER)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Marketplace user.

    BUYER users own projects, select bids, complete projects and write
    reviews. SELLER users place bids and submit deliverables.
    """

    class Role(models.TextChoices):
        BUYER = 'BUYER', _('Buyer')
        SELLER = 'SELLER', _('Seller')

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    email = models.EmailField(
        unique=True,
        help_text=_('Email address (used for login)')
    )
    role = models.CharField(
        max_length=10,
        choices=Role.choices,
        db_index=True
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        verbose_name = _('User')
        verbose_name_plural = _('Users')
        ordering = ['-date_joined']

    def __str__(self):
        return f"{self.name} <{self.email}> ({self.role})"
