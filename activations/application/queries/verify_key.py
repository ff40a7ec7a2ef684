"""
VerifyKeyQuery.

Query to check whether a device holds a valid activation of a key.
"""
from dataclasses import dataclass, field
from typing import Optional

from core.domain.value_objects import ClientInfo


@dataclass
class VerifyKeyQuery:
    """Query to verify a key for a device."""

    key: Optional[str]
    device_id: Optional[str]
    client: ClientInfo = field(default_factory=ClientInfo)
