"""
API Handlers - DRF exception handler for the Bidmarket API

Installed as REST_FRAMEWORK['EXCEPTION_HANDLER']. api.exceptions must not import
rest_framework.views: that module loads the configured authentication
classes, which raise api.exceptions errors.
"""

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import MarketplaceAPIException, PermissionDeniedError

logger = logging.getLogger(__name__)

NOT_LOGGED_IN_MESSAGE = "You are not logged in. Please log in to get access."


def _first_message(detail) -> str:
    """Pull the first human-readable message out of a DRF error structure."""
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return "Validation failed."
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Validation failed."
    return str(detail)


def marketplace_exception_handler(exc, context):
    """
    Custom exception handler for standardized error responses.

    All errors are formatted as:
    {
        "status": "error",
        "message": "Error description"
    }

    Anything DRF does not recognise is logged and reported as a bare 500;
    no internal detail reaches the caller.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            "Unhandled exception in %s: %s",
            view.__class__.__name__ if view else 'unknown view',
            exc,
        )
        return Response(
            {"status": "error", "message": "Internal Server Error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    error_data = {"status": "error", "message": ""}

    if isinstance(exc, MarketplaceAPIException):
        error_data["message"] = str(exc.detail)

    elif isinstance(exc, ValidationError):
        error_data["message"] = _first_message(exc.detail)
        if isinstance(exc.detail, dict):
            error_data["errors"] = {
                field: [str(m) for m in msgs] if isinstance(msgs, list) else [str(msgs)]
                for field, msgs in exc.detail.items()
            }

    elif isinstance(exc, NotAuthenticated):
        error_data["message"] = NOT_LOGGED_IN_MESSAGE

    elif isinstance(exc, Http404):
        error_data["message"] = "Not found"

    elif isinstance(exc, DjangoPermissionDenied):
        error_data["message"] = str(PermissionDeniedError.default_detail)

    else:
        error_data["message"] = _first_message(exc.detail) if hasattr(exc, 'detail') else str(exc)

    response.data = error_data
    return response
