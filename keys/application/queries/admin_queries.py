"""
Admin read queries.
"""
from dataclasses import dataclass


@dataclass
class ListKeysQuery:
    """Query to list every key."""


@dataclass
class GetKeyLogsQuery:
    """Query to fetch the activity log of a key."""

    key_id: int
