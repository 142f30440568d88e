"""
Bidmarket Test Configuration - pytest fixtures and factories

This module provides:
- factory_boy factories for users, projects, bids, deliverables and reviews
- Role fixtures (buyer, seller, and a second of each for cross-ownership tests)
- API clients authenticated with real bearer tokens

RUNNING TESTS:
# Run all tests
pytest tests/ -v

# Run by module
pytest tests/test_services.py -v
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import factory
import pytest
from django.utils import timezone
from factory.django import DjangoModelFactory


# ============================================================================
# USER FACTORIES
# ============================================================================

class UserFactory(DjangoModelFactory):
    """Factory for marketplace users."""

    class Meta:
        model = 'accounts.User'

    name = factory.Faker('name')
    email = factory.LazyAttribute(lambda o: f"user_{uuid.uuid4().hex[:8]}@example.com")
    role = 'BUYER'
    password = 'testpass123'
    is_active = True

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Create through the manager so the password is hashed."""
        manager = cls._get_manager(model_class)
        return manager.create_user(*args, **kwargs)


class BuyerFactory(UserFactory):
    role = 'BUYER'


class SellerFactory(UserFactory):
    role = 'SELLER'


# ============================================================================
# PROJECT FACTORIES
# ============================================================================

class ProjectFactory(DjangoModelFactory):
    """Factory for PENDING projects with a 100-500 budget due in a week."""

    class Meta:
        model = 'projects.Project'

    buyer = factory.SubFactory(BuyerFactory)
    title = factory.Sequence(lambda n: f"Project {n}")
    description = factory.Faker('paragraph')
    budget_min = Decimal('100.00')
    budget_max = Decimal('500.00')
    deadline = factory.LazyFunction(lambda: timezone.now() + timedelta(days=7))
    status = 'PENDING'


class BidFactory(DjangoModelFactory):
    class Meta:
        model = 'projects.Bid'

    project = factory.SubFactory(ProjectFactory)
    seller = factory.SubFactory(SellerFactory)
    bid_amount = Decimal('300.00')
    estimated_completion = factory.LazyFunction(lambda: timezone.now() + timedelta(days=3))
    message = factory.Faker('sentence')


class DeliverableFactory(DjangoModelFactory):
    class Meta:
        model = 'projects.Deliverable'

    project = factory.SubFactory(ProjectFactory, status='IN_PROGRESS')
    submitted_by = factory.SubFactory(SellerFactory)
    description = factory.Faker('sentence')
    file_url = factory.Sequence(lambda n: f"https://files.example.com/deliverables/{n}.pdf")
    file_name = factory.Sequence(lambda n: f"deliverable-{n}.pdf")
    file_size = 2048
    file_type = 'application/pdf'


class ReviewFactory(DjangoModelFactory):
    class Meta:
        model = 'projects.Review'

    project = factory.SubFactory(ProjectFactory, status='COMPLETED')
    buyer = factory.LazyAttribute(lambda o: o.project.buyer)
    seller = factory.SubFactory(SellerFactory)
    rating = 5
    review_text = factory.Faker('sentence')


# ============================================================================
# STATE HELPERS
# ============================================================================

def make_in_progress(project, seller, amount=Decimal('300.00')):
    """Give ``project`` a selected bid from ``seller`` and move it to IN_PROGRESS."""
    bid = BidFactory(project=project, seller=seller, bid_amount=amount)
    project.selected_bid = bid
    project.status = 'IN_PROGRESS'
    project.save()
    return bid


def make_completed(project, seller):
    bid = make_in_progress(project, seller)
    DeliverableFactory(project=project, submitted_by=seller)
    project.status = 'COMPLETED'
    project.save()
    return bid


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def buyer(db):
    return BuyerFactory(name='Bea Buyer')


@pytest.fixture
def other_buyer(db):
    return BuyerFactory(name='Otto Buyer')


@pytest.fixture
def seller(db):
    return SellerFactory(name='Sam Seller')


@pytest.fixture
def other_seller(db):
    return SellerFactory(name='Sid Seller')


@pytest.fixture
def project(db, buyer):
    """A PENDING project owned by ``buyer``."""
    return ProjectFactory(buyer=buyer)


@pytest.fixture
def in_progress_project(db, project, seller):
    """``project`` with ``seller``'s bid selected."""
    make_in_progress(project, seller)
    project.refresh_from_db()
    return project


@pytest.fixture
def completed_project(db, project, seller):
    make_completed(project, seller)
    project.refresh_from_db()
    return project


@pytest.fixture
def api_client(db):
    """Provide a DRF API test client."""
    from rest_framework.test import APIClient
    return APIClient()


def _client_for(user):
    from rest_framework.test import APIClient
    from accounts.authentication import issue_token

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user)}")
    return client


@pytest.fixture
def buyer_client(db, buyer):
    """API client carrying ``buyer``'s bearer token."""
    return _client_for(buyer)


@pytest.fixture
def other_buyer_client(db, other_buyer):
    return _client_for(other_buyer)


@pytest.fixture
def seller_client(db, seller):
    """API client carrying ``seller``'s bearer token."""
    return _client_for(seller)


@pytest.fixture
def other_seller_client(db, other_seller):
    return _client_for(other_seller)


@pytest.fixture
def client_for(db):
    """Build an API client for any user."""
    return _client_for
