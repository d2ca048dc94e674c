"""
Serializers for payment and checkout endpoints.
"""

from rest_framework import serializers


class PaymentEventResponseSerializer(serializers.Serializer):
    """Acknowledgement returned to the webhook sender."""

    received = serializers.BooleanField()


class SessionQuerySerializer(serializers.Serializer):
    """Serializer for get-license query parameters."""

    session_id = serializers.CharField(required=True, max_length=255)


class SessionLicenseResponseSerializer(serializers.Serializer):
    """Serializer for get-license response."""

    license = serializers.CharField()


class CreateCheckoutSessionRequestSerializer(serializers.Serializer):
    """Serializer for create-checkout-session request."""

    external_order_ref = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=128
    )


class CheckoutSessionResponseSerializer(serializers.Serializer):
    """Serializer for create-checkout-session response."""

    url = serializers.URLField()
