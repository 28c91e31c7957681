"""
Exceptions for Packman.

All errors are PackError with a structured code for programmatic handling.
"""

from typing import Any


class BaseError(Exception):
    """
    Exception carrying a machine-readable code and context data.

    Subclasses declare ``_default_messages`` keyed by code; an explicit
    ``message`` always wins over the default.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, data={self.data!r})"


class PackError(BaseError):
    """
    Structured exception for pack operations.

    Usage:
        try:
            packs.close_shift(shift, closings, closed_by=manager)
        except PackError as e:
            if e.code == 'INVALID_CLOSING_SERIAL':
                print(f"Serial {e.data['ending_serial']} is out of range")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'INVALID_FORMAT': 'Invalid serial number format. Must be 24 digits.',
        'INVALID_SERIAL': 'Serial must be a 3-digit number within the pack range',
        'GAME_CODE_NOT_FOUND': 'Game code not found',
        'DUPLICATE_PACK': 'Pack number already exists in this store',
        'FOREIGN_KEY_VIOLATION': 'Referenced record does not exist or belongs to another store',
        'INVALID_CLOSING_SERIAL': 'Closing serial is outside the valid range',
        'MANUAL_ENTRY_UNAUTHORIZED': 'Manual entry requires an authorizer and authorization time',
        'DUPLICATE_OPENING': 'Opening already recorded for this pack in this shift',
        'DUPLICATE_CLOSING': 'Closing already recorded for this pack in this shift',
        'INVALID_STATUS': 'Invalid pack status for this operation',
        'BIN_INACTIVE': 'Bin is not active',
        'BIN_OCCUPIED': 'Bin already holds an active pack',
        'PACK_NOT_IN_BIN': 'Pack is not placed in the given bin',
        'REASON_TOO_LONG': 'Reason is too long',
        'REASON_REQUIRED': 'Reason is required',
        'EMPTY_BATCH': 'At least one serialized number is required',
        'BATCH_TOO_LARGE': 'Too many serialized numbers in one batch',
        'SHIFT_NOT_OPEN': 'Shift is not open',
        'CONCURRENT_MODIFICATION': 'Concurrent modification detected, retry the operation',
        'VARIANCE_ALREADY_APPROVED': 'Variance is already approved',
        'TICKET_ALREADY_SOLD': 'Ticket already recorded as sold',
        'INVALID_TEMPLATE': 'Invalid bin template',
    }

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if not isinstance(v, (int, bool, list, dict, type(None))) else v
                for k, v in self.data.items()
            }
        }
