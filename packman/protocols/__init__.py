"""
Packman Protocols.

Defines interfaces for external system integration.
"""

from packman.protocols.audit import AuditEntry, AuditSink
from packman.protocols.games import GameLookup

__all__ = [
    "AuditEntry",
    "AuditSink",
    "GameLookup",
]
