"""
License API views.

These endpoints are used to:
- Pre-issue batches of inactive licenses
- Activate a license key
- Verify a license key
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.licenses.serializers import (
    ActivateLicenseResponseSerializer,
    GenerateLicensesRequestSerializer,
    GenerateLicensesResponseSerializer,
    LicenseKeyRequestSerializer,
    VerifyLicenseResponseSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.commands.generate_licenses import GenerateLicensesCommand
from licenses.application.handlers.activate_license_handler import ActivateLicenseHandler
from licenses.application.handlers.generate_licenses_handler import GenerateLicensesHandler
from licenses.application.handlers.verify_license_handler import VerifyLicenseHandler
from licenses.application.queries.verify_license import VerifyLicenseQuery
from licenses.infrastructure.repositories.django_license_store import DjangoLicenseStore

# Initialize repositories (in production, use DI container)
_license_store = DjangoLicenseStore()

tracer = get_tracer(__name__)


class GenerateLicensesView(APIView):
    """View for bulk generation of inactive licenses."""

    @extend_schema(
        operation_id="generate_licenses",
        summary="Generate Licenses",
        description=(
            "Pre-issue `count` inactive licenses, optionally owned by `email`. "
            "The whole batch is persisted or none of it is."
        ),
        tags=["Licenses"],
        parameters=[
            OpenApiParameter(
                name="X-Admin-Key",
                type=str,
                location=OpenApiParameter.HEADER,
                required=False,
                description="Admin key, required when the server has one configured",
            ),
        ],
        request=GenerateLicensesRequestSerializer,
        responses={
            201: GenerateLicensesResponseSerializer,
            400: {"description": "Invalid count or email"},
            401: {"description": "Missing or invalid admin key"},
            500: {"description": "License store failure"},
        },
    )
    def post(self, request: Request) -> Response:
        """Generate a batch of inactive licenses."""
        return async_to_sync(self._handle_generate)(request)

    async def _handle_generate(self, request: Request) -> Response:
        """Async handler for generate licenses."""
        with tracer.start_as_current_span("generate_licenses") as span:
            serializer = GenerateLicensesRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            span.set_attribute("license.count", serializer.validated_data["count"])

            handler = GenerateLicensesHandler(
                license_store=_license_store,
                max_batch_size=settings.LICENSE_MAX_BATCH_SIZE,
            )
            result = await handler.handle(
                GenerateLicensesCommand(
                    count=serializer.validated_data["count"],
                    email=serializer.validated_data.get("email"),
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(
                GenerateLicensesResponseSerializer(result).data,
                status=status.HTTP_201_CREATED,
            )


class ActivateLicenseView(APIView):
    """View for activating a license key."""

    @extend_schema(
        operation_id="activate_license",
        summary="Activate License",
        description=(
            "Move an inactive license to active. Activating an already active "
            "license succeeds unchanged, or returns 409 when the server runs "
            "with the `conflict` re-activation policy."
        ),
        tags=["Licenses"],
        request=LicenseKeyRequestSerializer,
        responses={
            200: ActivateLicenseResponseSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License key not found"},
            409: {"description": "License already active"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a license."""
        return async_to_sync(self._handle_activate)(request)

    async def _handle_activate(self, request: Request) -> Response:
        """Async handler for activate license."""
        with tracer.start_as_current_span("activate_license") as span:
            serializer = LicenseKeyRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            key = serializer.validated_data["key"]
            span.set_attribute("license.key", key)

            handler = ActivateLicenseHandler(
                license_store=_license_store,
                reactivation_policy=settings.LICENSE_REACTIVATION_POLICY,
            )
            result = await handler.handle(ActivateLicenseCommand(key=key))

            span.set_status(Status(StatusCode.OK))
            return Response(ActivateLicenseResponseSerializer(result).data)


class VerifyLicenseView(APIView):
    """View for verifying a license key."""

    @extend_schema(
        operation_id="verify_license",
        summary="Verify License",
        description="Report whether a key exists and whether it is active. Never mutates state.",
        tags=["Licenses"],
        request=LicenseKeyRequestSerializer,
        responses={
            200: VerifyLicenseResponseSerializer,
            400: {"description": "Bad Request"},
        },
    )
    def post(self, request: Request) -> Response:
        """Verify a license."""
        return async_to_sync(self._handle_verify)(request)

    async def _handle_verify(self, request: Request) -> Response:
        """Async handler for verify license."""
        with tracer.start_as_current_span("verify_license") as span:
            serializer = LicenseKeyRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            key = serializer.validated_data["key"]
            span.set_attribute("license.key", key)

            result = await VerifyLicenseHandler(license_store=_license_store).handle(
                VerifyLicenseQuery(key=key)
            )

            span.set_attribute("license.valid", result.valid)
            return Response(VerifyLicenseResponseSerializer(result).data)
