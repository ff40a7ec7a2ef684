"""
Keys module - License key issuance and lifecycle.

This module handles:
- Key entity, generation and expiry
- Activity log
- Admin operations and the expiry janitor
"""
