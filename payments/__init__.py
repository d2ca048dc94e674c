"""
Payments module - inbound payment events and checkout sessions.

This module handles:
- Authenticating payment processor and storefront webhooks
- Normalizing verified events into issuance triggers
- Checkout session creation and lookup
"""
