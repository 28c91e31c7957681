"""
Packman Audit Adapter: load the configured AuditSink.

Usage:
    from packman.adapters import get_audit_sink

    get_audit_sink().record(AuditEntry(table="packman_pack", record_id=1, action="UPDATE"))

Settings:
    PACKMAN = {
        "AUDIT_SINK": "packman.adapters.audit.LoggingAuditSink",
    }
"""

from __future__ import annotations

import logging

from django.db import transaction

from packman.adapters.loading import AdapterLoader
from packman.protocols.audit import AuditEntry, AuditSink

audit_logger = logging.getLogger('packman.audit')


class LoggingAuditSink:
    """
    Default sink: one log record per entry on the ``packman.audit`` logger.

    Records are emitted after the surrounding transaction commits, so a
    rolled-back operation never shows up in the audit log.
    """

    def record(self, entry: AuditEntry) -> None:
        transaction.on_commit(lambda: self._emit(entry))

    def _emit(self, entry: AuditEntry) -> None:
        audit_logger.info(
            "packman.audit.%s",
            entry.action.lower(),
            extra={
                "table": entry.table,
                "record_id": entry.record_id,
                "action": entry.action,
                "old_values": entry.old_values,
                "new_values": entry.new_values,
                "user_id": entry.user_id,
            },
        )


_loader = AdapterLoader(
    'AUDIT_SINK',
    'audit sink',
    'packman.adapters.audit.LoggingAuditSink',
)


def get_audit_sink() -> AuditSink:
    """
    Return the configured audit sink.

    Raises:
        ImproperlyConfigured: If AUDIT_SINK is empty or import fails
    """
    return _loader.get()


def reset_audit_sink() -> None:
    """Reset the cached sink. Useful for testing."""
    _loader.reset()
