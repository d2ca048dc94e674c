"""
URL configuration for payment endpoints.
"""

from django.urls import path

from api.v1.payments import views

urlpatterns = [
    path("webhook", views.StripeWebhookView.as_view(), name="stripe-webhook"),
    path("shopify-webhook", views.ShopifyWebhookView.as_view(), name="shopify-webhook"),
    path("get-license", views.GetLicenseView.as_view(), name="get-license"),
    path(
        "create-checkout-session",
        views.CreateCheckoutSessionView.as_view(),
        name="create-checkout-session",
    ),
]
