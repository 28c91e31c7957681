"""
Noop Audit Sink: stub adapter for development.

Usage in settings.py:
    PACKMAN = {
        "AUDIT_SINK": "packman.adapters.noop.NoopAuditSink",
    }

WARNING: Do NOT use in production. Every audit entry is discarded.
"""

from __future__ import annotations

from packman.protocols.audit import AuditEntry


class NoopAuditSink:
    """
    No-operation audit sink.

    Implements the ``AuditSink`` protocol without storing anything, for
    local development and scripts that do not need an audit trail.
    """

    def record(self, entry: AuditEntry) -> None:
        """Discard the entry."""
        return None
