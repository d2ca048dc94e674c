"""
Licenses module - license records and their lifecycle.

This module handles:
- License entity, key generation and state rules
- Issuance for confirmed purchases and bulk pre-issuance
- Activation and verification
"""
