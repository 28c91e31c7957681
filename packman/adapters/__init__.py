"""
Packman Adapters.

Implementations of protocols for external systems.
"""

from packman.adapters.audit import LoggingAuditSink, get_audit_sink, reset_audit_sink
from packman.adapters.games import ModelGameLookup, get_game_lookup, reset_game_lookup

__all__ = [
    "LoggingAuditSink",
    "get_audit_sink",
    "reset_audit_sink",
    "ModelGameLookup",
    "get_game_lookup",
    "reset_game_lookup",
]
