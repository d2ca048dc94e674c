"""
Payment API views.

These endpoints are used by:
- Stripe, delivering signed checkout events
- Shopify, delivering signed order-created events
- The storefront, starting checkout and fetching the purchased key
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.payments.serializers import (
    CheckoutSessionResponseSerializer,
    CreateCheckoutSessionRequestSerializer,
    PaymentEventResponseSerializer,
    SessionLicenseResponseSerializer,
    SessionQuerySerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.infrastructure.repositories.django_license_store import DjangoLicenseStore
from payments.application.commands.create_checkout_session import CreateCheckoutSessionCommand
from payments.application.commands.process_payment_event import ProcessPaymentEventCommand
from payments.application.handlers.create_checkout_session_handler import (
    CreateCheckoutSessionHandler,
)
from payments.application.handlers.get_license_by_session_handler import (
    GetLicenseBySessionHandler,
)
from payments.application.handlers.process_payment_event_handler import (
    ProcessPaymentEventHandler,
)
from payments.application.queries.get_license_by_session import GetLicenseBySessionQuery
from payments.domain.verifiers import ShopifyOrderVerifier, StripeEventVerifier
from payments.infrastructure.stripe_gateway import StripePaymentGateway

# Initialize repositories (in production, use DI container)
_license_store = DjangoLicenseStore()

tracer = get_tracer(__name__)


def build_payment_gateway() -> StripePaymentGateway:
    """Build the Stripe gateway from settings."""
    return StripePaymentGateway(
        api_key=settings.STRIPE_SECRET_KEY,
        price_id=settings.STRIPE_PRICE_ID,
        success_url=settings.CHECKOUT_SUCCESS_URL,
        cancel_url=settings.CHECKOUT_CANCEL_URL,
    )


class _SignedEventView(APIView):
    """
    Base view for signed webhooks.

    The raw request body is handed to the verifier untouched; request.data
    is never read, so the bytes that were signed are the bytes verified.
    """

    signature_header = ""
    span_name = ""

    def build_verifier(self):
        raise NotImplementedError

    def post(self, request: Request) -> Response:
        """Receive a signed event."""
        return async_to_sync(self._handle_event)(request)

    async def _handle_event(self, request: Request) -> Response:
        with tracer.start_as_current_span(self.span_name) as span:
            handler = ProcessPaymentEventHandler(
                verifier=self.build_verifier(),
                license_store=_license_store,
            )
            result = await handler.handle(
                ProcessPaymentEventCommand(
                    payload=request.body,
                    signature=request.headers.get(self.signature_header, ""),
                )
            )

            span.set_attribute("event.kind", result.kind)
            span.set_attribute("license.created", result.created)
            span.set_status(Status(StatusCode.OK))
            return Response(PaymentEventResponseSerializer(result).data)


class StripeWebhookView(_SignedEventView):
    """View for Stripe webhook deliveries."""

    signature_header = "Stripe-Signature"
    span_name = "stripe_webhook"

    def build_verifier(self) -> StripeEventVerifier:
        return StripeEventVerifier(
            secret=settings.STRIPE_WEBHOOK_SECRET,
            tolerance=settings.STRIPE_WEBHOOK_TOLERANCE,
        )

    @extend_schema(
        operation_id="stripe_webhook",
        summary="Stripe Webhook",
        description=(
            "Receives Stripe events. `checkout.session.completed` issues one "
            "license per order; other event types are acknowledged and ignored. "
            "A 5xx response asks Stripe to redeliver."
        ),
        tags=["Payments"],
        parameters=[
            OpenApiParameter(
                name="Stripe-Signature",
                type=str,
                location=OpenApiParameter.HEADER,
                required=True,
            ),
        ],
        request=OpenApiTypes.OBJECT,
        responses={
            200: PaymentEventResponseSerializer,
            400: {"description": "Invalid signature or malformed event"},
            500: {"description": "License store failure"},
        },
    )
    def post(self, request: Request) -> Response:
        return super().post(request)


class ShopifyWebhookView(_SignedEventView):
    """View for Shopify order-created webhook deliveries."""

    signature_header = "X-Shopify-Hmac-Sha256"
    span_name = "shopify_webhook"

    def build_verifier(self) -> ShopifyOrderVerifier:
        return ShopifyOrderVerifier(secret=settings.SHOPIFY_WEBHOOK_SECRET)

    @extend_schema(
        operation_id="shopify_webhook",
        summary="Shopify Order Webhook",
        description=(
            "Receives Shopify `orders/create` events signed with the shared "
            "webhook secret and issues one license per order."
        ),
        tags=["Payments"],
        parameters=[
            OpenApiParameter(
                name="X-Shopify-Hmac-Sha256",
                type=str,
                location=OpenApiParameter.HEADER,
                required=True,
            ),
        ],
        request=OpenApiTypes.OBJECT,
        responses={
            200: PaymentEventResponseSerializer,
            400: {"description": "Invalid signature or malformed order"},
            500: {"description": "License store failure"},
        },
    )
    def post(self, request: Request) -> Response:
        return super().post(request)


class GetLicenseView(APIView):
    """View for fetching the license bought in a checkout session."""

    @extend_schema(
        operation_id="get_license_by_session",
        summary="Get License by Checkout Session",
        tags=["Payments"],
        parameters=[
            OpenApiParameter(
                name="session_id",
                type=str,
                location=OpenApiParameter.QUERY,
                required=True,
            ),
        ],
        responses={
            200: SessionLicenseResponseSerializer,
            400: {"description": "Missing session_id"},
            404: {"description": "Unknown session or no license yet"},
            502: {"description": "Payment processor unavailable"},
        },
    )
    def get(self, request: Request) -> Response:
        """Return the newest license for the session's customer."""
        return async_to_sync(self._handle_get_license)(request)

    async def _handle_get_license(self, request: Request) -> Response:
        with tracer.start_as_current_span("get_license_by_session") as span:
            serializer = SessionQuerySerializer(data=request.query_params)
            serializer.is_valid(raise_exception=True)
            session_id = serializer.validated_data["session_id"]
            span.set_attribute("checkout.session_id", session_id)

            handler = GetLicenseBySessionHandler(
                gateway=build_payment_gateway(),
                license_store=_license_store,
            )
            result = await handler.handle(GetLicenseBySessionQuery(session_id=session_id))
            return Response(SessionLicenseResponseSerializer(result).data)


class CreateCheckoutSessionView(APIView):
    """View for starting a hosted checkout."""

    @extend_schema(
        operation_id="create_checkout_session",
        summary="Create Checkout Session",
        tags=["Payments"],
        request=CreateCheckoutSessionRequestSerializer,
        responses={
            200: CheckoutSessionResponseSerializer,
            502: {"description": "Payment processor unavailable"},
        },
    )
    def post(self, request: Request) -> Response:
        """Create a checkout session and return its URL."""
        return async_to_sync(self._handle_create)(request)

    async def _handle_create(self, request: Request) -> Response:
        with tracer.start_as_current_span("create_checkout_session"):
            serializer = CreateCheckoutSessionRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = CreateCheckoutSessionHandler(gateway=build_payment_gateway())
            result = await handler.handle(
                CreateCheckoutSessionCommand(
                    external_order_ref=serializer.validated_data.get("external_order_ref"),
                )
            )
            return Response(CheckoutSessionResponseSerializer(result).data)
