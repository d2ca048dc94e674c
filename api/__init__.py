"""
HTTP API for the license gateway.
"""
