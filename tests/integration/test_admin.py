"""
Integration tests for the license admin.
"""

from datetime import datetime, timezone

import pytest
from django.contrib import admin
from django.test import RequestFactory

from licenses.infrastructure.models import License as LicenseModel


@pytest.fixture
def model_admin():
    return admin.site._registry[LicenseModel]


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseAdmin:
    """Tests for LicenseAdmin."""

    def test_change_form_has_no_editable_fields(self, model_admin):
        """Records are only changed through the activation path."""
        row = LicenseModel.objects.create(
            key="a" * 32,
            email="a@b.com",
            active=False,
            created_at=datetime.now(timezone.utc),
        )
        request = RequestFactory().get("/admin/")

        form = model_admin.get_form(request, row, change=True)

        assert list(form.base_fields) == []

    def test_no_add_or_delete(self, model_admin):
        request = RequestFactory().get("/admin/")

        assert not model_admin.has_add_permission(request)
        assert not model_admin.has_delete_permission(request)
