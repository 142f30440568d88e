"""
Accounts API Tests

This module tests:
1. Registration (validation, duplicate email, password hashing)
2. Login (uniform failure message for unknown email and wrong password)
3. Bearer token handling (missing, malformed, expired, revoked)
4. Current user endpoint
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken

from accounts.authentication import issue_token
from accounts.models import User
from accounts.serializers import RegisterSerializer
from conftest import BuyerFactory


REGISTER_URL = reverse('accounts:register')
LOGIN_URL = reverse('accounts:login')
ME_URL = reverse('accounts:me')


def _registration(**overrides):
    data = {
        'name': 'Bea Buyer',
        'email': 'bea@example.com',
        'password': 'S3cret-pass',
        'role': 'BUYER',
    }
    data.update(overrides)
    return data


# =============================================================================
# REGISTRATION
# =============================================================================

@pytest.mark.django_db
class TestRegister:

    def test_register_returns_token_and_user(self, api_client):
        response = api_client.post(REGISTER_URL, _registration(), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body['status'] == 'success'
        assert body['token']
        assert body['user']['email'] == 'bea@example.com'
        assert body['user']['role'] == 'BUYER'
        assert 'password' not in body['user']

    def test_password_is_hashed(self, api_client):
        api_client.post(REGISTER_URL, _registration(), format='json')

        user = User.objects.get(email='bea@example.com')
        assert user.password != 'S3cret-pass'
        assert user.check_password('S3cret-pass')

    def test_token_is_bound_to_new_user(self, api_client):
        response = api_client.post(REGISTER_URL, _registration(role='SELLER'), format='json')

        token = AccessToken(response.json()['token'])
        assert str(token['user_id']) == response.json()['user']['id']

    @pytest.mark.parametrize('missing', ['name', 'email', 'password', 'role'])
    def test_missing_field(self, api_client, missing):
        data = _registration()
        del data[missing]

        response = api_client.post(REGISTER_URL, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['status'] == 'error'
        assert response.json()['message'] == "Please provide name, email, password, and role"

    def test_invalid_role(self, api_client):
        response = api_client.post(REGISTER_URL, _registration(role='ADMIN'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'] == "Role must be either BUYER or SELLER"

    def test_duplicate_email(self, api_client):
        BuyerFactory(email='bea@example.com')

        response = api_client.post(REGISTER_URL, _registration(), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'] == "User already exists with this email"
        assert 'email' in response.json()['errors']

    def test_email_match_is_case_sensitive(self, api_client):
        BuyerFactory(email='bea@example.com')

        response = api_client.post(REGISTER_URL, _registration(email='Bea@example.com'), format='json')

        assert response.status_code == status.HTTP_201_CREATED

    def test_concurrent_registration_with_same_email(self, api_client):
        """The pre-check passed for both requests; the unique index rejects the second."""
        BuyerFactory(email='bea@example.com')

        with patch.object(RegisterSerializer, 'validate_email', lambda self, value: value):
            response = api_client.post(REGISTER_URL, _registration(), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'] == "User already exists with this email"
        assert User.objects.filter(email='bea@example.com').count() == 1

    def test_password_validators_apply(self, api_client):
        response = api_client.post(REGISTER_URL, _registration(password='abc'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.json()['errors']
        assert not User.objects.filter(email='bea@example.com').exists()


# =============================================================================
# LOGIN
# =============================================================================

@pytest.mark.django_db
class TestLogin:

    def test_login_with_valid_credentials(self, api_client):
        user = BuyerFactory(email='bea@example.com', password='S3cret-pass')

        response = api_client.post(
            LOGIN_URL, {'email': 'bea@example.com', 'password': 'S3cret-pass'}, format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['user']['id'] == str(user.id)
        assert response.json()['token']

    def test_missing_fields(self, api_client):
        response = api_client.post(LOGIN_URL, {'email': 'bea@example.com'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'] == "Please provide email and password"

    def test_wrong_password_and_unknown_email_look_identical(self, api_client):
        BuyerFactory(email='bea@example.com', password='S3cret-pass')

        wrong_password = api_client.post(
            LOGIN_URL, {'email': 'bea@example.com', 'password': 'nope'}, format='json',
        )
        unknown_email = api_client.post(
            LOGIN_URL, {'email': 'ghost@example.com', 'password': 'nope'}, format='json',
        )

        assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
        assert unknown_email.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()['message'] == "Invalid email or password"


# =============================================================================
# BEARER TOKENS
# =============================================================================

@pytest.mark.django_db
class TestBearerTokens:

    def test_me_returns_caller(self, buyer, buyer_client):
        response = buyer_client.get(ME_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['user']['id'] == str(buyer.id)
        assert response.json()['user']['name'] == buyer.name

    def test_missing_token(self, api_client):
        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {
            'status': 'error',
            'message': "You are not logged in. Please log in to get access.",
        }

    def test_malformed_token(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not.a.token')

        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()['message'] == "Invalid token. Please log in again."

    def test_tampered_signature(self, api_client, buyer):
        token = issue_token(buyer)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token[:-4]}abcd")

        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()['message'] == "Invalid token. Please log in again."

    def test_expired_token(self, api_client, buyer):
        token = AccessToken.for_user(buyer)
        token.set_exp(lifetime=-timedelta(seconds=1))
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()['message'] == "Invalid token. Please log in again."

    def test_deleted_user(self, api_client, buyer):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(buyer)}")
        buyer.delete()

        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()['message'] == "The user belonging to this token no longer exists."
