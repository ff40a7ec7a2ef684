"""
Model registry for the keys app.

Models live in keys.infrastructure.models.
"""
from keys.infrastructure.models import Key, LogEntry  # noqa: F401
