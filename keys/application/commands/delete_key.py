"""
DeleteKeyCommand and CleanupExpiredKeysCommand.
"""
from dataclasses import dataclass


@dataclass
class DeleteKeyCommand:
    """Command to delete a key with its activations and logs."""

    key_id: int


@dataclass
class CleanupExpiredKeysCommand:
    """Command to hard-delete every key past its expiry time."""
