"""
Audit helpers: turn model changes into AuditEntry records for the sink.
"""

from packman.adapters.audit import get_audit_sink
from packman.protocols.audit import AuditEntry


def snapshot(instance, fields) -> dict:
    """Plain-value copy of ``fields`` from a model instance."""
    values = {}
    for name in fields:
        value = getattr(instance, name)
        values[name] = value.isoformat() if hasattr(value, 'isoformat') else value
    return values


def record(instance, action: str, old_values=None, new_values=None, user=None) -> AuditEntry:
    """Send one entry for ``instance`` to the configured sink."""
    entry = AuditEntry(
        table=instance._meta.db_table,
        record_id=instance.pk,
        action=action,
        old_values=old_values,
        new_values=new_values or {},
        user_id=getattr(user, 'pk', None),
    )
    get_audit_sink().record(entry)
    return entry
