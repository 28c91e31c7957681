"""
Audit Sink Protocol: where Packman sends its audit entries.

Packman decides WHAT to audit (pack creation, bin moves, status changes,
variance approvals). Storing the entries is the sink's job.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class AuditEntry:
    """One audited change of a record."""

    table: str
    record_id: int
    action: str  # "CREATE", "UPDATE", ...
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] = field(default_factory=dict)
    user_id: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@runtime_checkable
class AuditSink(Protocol):
    """
    Protocol for audit log storage.

    record() is called inside the transaction of the audited operation.
    A sink that writes to the same database is therefore atomic with the
    operation; a sink that writes elsewhere should defer its write with
    transaction.on_commit() so rolled-back operations leave no entry.
    Raising from record() rolls the operation back.
    """

    def record(self, entry: AuditEntry) -> None:
        """
        Store one audit entry.

        Args:
            entry: The change to record
        """
        ...
