"""
API exception handlers.

This module maps domain exceptions to REST API responses. Every error body
has the shape {"error": {"code": ..., "message": ...}}.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AuthenticityError,
    CheckoutSessionNotFoundError,
    DomainException,
    LicenseAlreadyActiveError,
    LicenseNotFoundError,
    LicenseStateConflictError,
    PaymentGatewayError,
    StoreError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_EXCEPTION = (
    ((LicenseNotFoundError, CheckoutSessionNotFoundError), status.HTTP_404_NOT_FOUND),
    ((LicenseAlreadyActiveError, LicenseStateConflictError), status.HTTP_409_CONFLICT),
    ((StoreError,), status.HTTP_500_INTERNAL_SERVER_ERROR),
    ((PaymentGatewayError,), status.HTTP_502_BAD_GATEWAY),
)


def status_for(exc: DomainException) -> int:
    """HTTP status for a domain exception; 400 unless mapped otherwise."""
    for exception_types, status_code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exception_types):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, ValidationError):
        response = Response(
            {"error": {"code": "VALIDATION_ERROR", "message": _flatten(exc.detail)}},
            status=status.HTTP_400_BAD_REQUEST,
        )
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        response.data = {"error": {"code": code, "message": str(exc.detail)}}
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _flatten(detail: Any) -> str:
    """Render DRF validation detail as one message."""
    if isinstance(detail, dict):
        return "; ".join(f"{field}: {_flatten(value)}" for field, value in detail.items())
    if isinstance(detail, list):
        return " ".join(_flatten(item) for item in detail)
    return str(detail)


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_for(exc)

    if status_code >= 500:
        logger.error(
            "Domain exception: %s - %s", exc.code, exc.message,
            extra={"trace_id": trace_id}, exc_info=exc,
        )
    elif isinstance(exc, AuthenticityError):
        logger.warning("Rejected unauthenticated event: %s", exc.message, extra={"trace_id": trace_id})
    else:
        logger.info("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})

    return Response({"error": {"code": exc.code, "message": exc.message}}, status=status_code)


def _handle_unexpected_exception(exc: Exception, trace_id: Optional[str]) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=exc)
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
