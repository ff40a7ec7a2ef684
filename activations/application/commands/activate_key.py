"""
ActivateKeyCommand.

Command to bind a device to a key.
"""

from dataclasses import dataclass, field
from typing import Optional

from core.domain.value_objects import ClientInfo


@dataclass
class ActivateKeyCommand:
    """Command to activate a key on a device."""

    key: Optional[str]
    device_id: Optional[str]
    client: ClientInfo = field(default_factory=ClientInfo)
