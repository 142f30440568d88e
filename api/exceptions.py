"""
API Exceptions - Domain error taxonomy for the Bidmarket API

This module provides the exception classes raised by the domain layer:
- Input exceptions (400)
- Business rule and lifecycle exceptions (400)
- Authentication exceptions (401)
- Permission exceptions (403)
- Resource exceptions (404)

api.handlers renders every error in a consistent format:
{
    "status": "error",
    "message": "Human-readable message"
}

Validation errors raised by serializers additionally carry
"errors": {"field": ["message", ...]}.
"""

from typing import Any, Dict

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class MarketplaceAPIException(APIException):
    """
    Base exception for all Bidmarket API errors.

    Attributes:
        status_code: HTTP status code
        default_detail: Default error message
        default_code: Machine-readable error code
        error_code: Specific error code for this instance
        extra_data: Additional context for logs and tests
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = _("An unexpected error occurred.")
    default_code = "ERROR"

    def __init__(self, detail: str = None, code: str = None, extra_data: Dict = None):
        self.error_code = code or self.default_code
        self.extra_data = extra_data or {}

        if detail is None:
            detail = str(self.default_detail)

        super().__init__(detail=detail, code=self.error_code)


# =============================================================================
# INPUT EXCEPTIONS
# =============================================================================

class InvalidInputError(MarketplaceAPIException):
    """Raised for missing, malformed or out-of-range request values."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Invalid input provided.")
    default_code = "INVALID_INPUT"


# =============================================================================
# BUSINESS RULE EXCEPTIONS
# =============================================================================

class BusinessRuleViolationError(MarketplaceAPIException):
    """
    Raised when a request conflicts with marketplace rules.

    Duplicate bids, a second review, completing without deliverables.
    Reported as 400: the caller resolves it by changing the request.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("This action violates a business rule.")
    default_code = "BUSINESS_RULE_VIOLATION"


class InvalidTransitionError(BusinessRuleViolationError):
    """Raised when a lifecycle event is not legal in the project's current status."""

    default_detail = _("This action is not allowed in the project's current status.")
    default_code = "INVALID_STATE_TRANSITION"

    def __init__(self, detail: str = None, current_status: str = None, event: str = None, **kwargs):
        extra_data = kwargs.pop('extra_data', {})
        if current_status:
            extra_data['current_status'] = current_status
        if event:
            extra_data['event'] = event
        super().__init__(detail=detail, extra_data=extra_data, **kwargs)


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthenticationFailedError(MarketplaceAPIException):
    """Raised when credentials are wrong or absent."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = _("You are not logged in. Please log in to get access.")
    default_code = "AUTHENTICATION_FAILED"


class InvalidTokenError(AuthenticationFailedError):
    """Raised when a bearer token is malformed, expired or badly signed."""

    default_detail = _("Invalid token. Please log in again.")
    default_code = "INVALID_TOKEN"


class UserRevokedError(AuthenticationFailedError):
    """Raised when a valid token references a user that no longer exists."""

    default_detail = _("The user belonging to this token no longer exists.")
    default_code = "USER_REVOKED"


# =============================================================================
# PERMISSION EXCEPTIONS
# =============================================================================

class PermissionDeniedError(MarketplaceAPIException):
    """Raised for wrong role, non-owner access or non-selected seller access."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("You do not have permission to perform this action")
    default_code = "PERMISSION_DENIED"


# =============================================================================
# RESOURCE EXCEPTIONS
# =============================================================================

class ResourceNotFoundError(MarketplaceAPIException):
    """Raised when a requested resource doesn't exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _("The requested resource was not found.")
    default_code = "NOT_FOUND"

    def __init__(self, resource_type: str = None, resource_id: Any = None, **kwargs):
        detail = kwargs.pop('detail', None)
        extra_data = kwargs.pop('extra_data', {})

        if resource_type:
            extra_data['resource_type'] = resource_type
            if detail is None:
                detail = f"{resource_type} not found"

        if resource_id is not None:
            extra_data['resource_id'] = str(resource_id)

        super().__init__(detail=detail, extra_data=extra_data, **kwargs)
