"""
Admin key authentication middleware.

Guards bulk license generation with a shared admin key when one is
configured.
"""

import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

PROTECTED_PATHS = ("/generate",)


class AdminKeyAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for admin key authentication.

    When LICENSE_ADMIN_API_KEY is set, POST requests to protected paths must
    carry a matching X-Admin-Key header. Returns 401 otherwise.
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate the admin key.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        admin_key = getattr(settings, "LICENSE_ADMIN_API_KEY", "")
        if not admin_key:
            return None
        if request.method != "POST" or request.path.rstrip("/") not in PROTECTED_PATHS:
            return None

        provided = request.headers.get("X-Admin-Key", "")
        if not provided:
            return self._unauthorized("Missing admin key. Provide X-Admin-Key header.")

        if not hmac.compare_digest(provided.encode("utf-8"), admin_key.encode("utf-8")):
            logger.warning("Invalid admin key attempted on %s", request.path)
            return self._unauthorized("Invalid admin key")

        return None

    def _unauthorized(self, message: str) -> JsonResponse:
        return JsonResponse(
            {"error": {"code": "UNAUTHORIZED", "message": message}},
            status=401,
        )
