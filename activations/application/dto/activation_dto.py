"""
Activation DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class ActivateKeyResponseDTO:
    """DTO for activate key response."""

    success: bool
    expires_at: datetime
    duration_hours: int
    devices_used: int
    max_devices: int
    message: str


@dataclass
class VerifyKeyResponseDTO:
    """DTO for verify key response."""

    valid: bool
    expires_at: Optional[datetime]
    status: Optional[str]
    devices_used: Optional[int]
    max_devices: Optional[int]
    message: str
