"""
Activations module - Device activation and verification.

This module handles:
- Activation entity
- Device limit enforcement
- Key verification for a device
"""
