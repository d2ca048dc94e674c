"""
Orders app.

Best-effort annotation of storefront orders with issued license keys.
"""
