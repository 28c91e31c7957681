"""
Packman configuration.

Usage in settings.py:
    PACKMAN = {
        "TICKETS_PER_PACK": 150,
        "MAX_BATCH_SIZE": 100,
        "GAME_LOOKUP": "packman.adapters.games.ModelGameLookup",
        "AUDIT_SINK": "packman.adapters.audit.LoggingAuditSink",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class PackmanSettings:
    """Packman configuration settings."""

    # Standard pack size when the game does not override it
    TICKETS_PER_PACK: int = 150

    # Upper bound of serialized numbers accepted by one reception call
    MAX_BATCH_SIZE: int = 100

    # Maximum length of the free-text reason on bin movements
    MOVE_REASON_MAX_LENGTH: int = 500

    # Game lookup backend (dotted path)
    GAME_LOOKUP: str = "packman.adapters.games.ModelGameLookup"

    # Audit sink backend (dotted path)
    AUDIT_SINK: str = "packman.adapters.audit.LoggingAuditSink"


def get_packman_settings() -> PackmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "PACKMAN", {})
    return PackmanSettings(**{
        k: v for k, v in user_settings.items()
        if k in PackmanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_packman_settings(), name)


packman_settings = _LazySettings()
