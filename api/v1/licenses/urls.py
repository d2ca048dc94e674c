"""
URL configuration for license endpoints.
"""

from django.urls import path

from api.v1.licenses import views

urlpatterns = [
    path("generate", views.GenerateLicensesView.as_view(), name="generate-licenses"),
    path("activate", views.ActivateLicenseView.as_view(), name="activate-license"),
    path("verify", views.VerifyLicenseView.as_view(), name="verify-license"),
]
