"""
Serializers for license endpoints.
"""

from rest_framework import serializers


class GenerateLicensesRequestSerializer(serializers.Serializer):
    """Serializer for generate licenses request."""

    count = serializers.IntegerField(required=True)
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=254)


class LicenseKeyRequestSerializer(serializers.Serializer):
    """Serializer for requests that carry a single license key."""

    key = serializers.CharField(required=True, max_length=64, trim_whitespace=True)


class LicenseDTOSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    key = serializers.CharField()
    email = serializers.EmailField(allow_null=True)
    active = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    activated_at = serializers.DateTimeField(allow_null=True)
    external_order_ref = serializers.CharField(allow_null=True)


class GenerateLicensesResponseSerializer(serializers.Serializer):
    """Serializer for generate licenses response."""

    keys = serializers.ListField(child=serializers.CharField())
    count = serializers.IntegerField()


class ActivateLicenseResponseSerializer(serializers.Serializer):
    """Serializer for activate license response."""

    success = serializers.BooleanField()
    license = LicenseDTOSerializer()


class VerifyLicenseResponseSerializer(serializers.Serializer):
    """Serializer for verify license response; active and license only for known keys."""

    valid = serializers.BooleanField()
    active = serializers.BooleanField(required=False)
    license = LicenseDTOSerializer(required=False)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not data["valid"]:
            return {"valid": False}
        return data
