"""
Serialized number codec for 24-digit pack barcodes.

A pack barcode is exactly 24 ASCII digits:

    0001 1234567 012 3456789012
    ^^^^ ^^^^^^^ ^^^ ^^^^^^^^^^
    game pack    ser identifier (not used here)

Every part stays a string: leading zeros are significant.

Examples:
    parse("000112345670123456789012").pack_number  # "1234567"
    offset_serial("000", 149)                        # "149"
"""

import re
from dataclasses import dataclass

from packman.exceptions import PackError

SERIALIZED_LENGTH = 24
SERIAL_WIDTH = 3
MAX_SERIAL = 10 ** SERIAL_WIDTH - 1

_SERIALIZED_RE = re.compile(r'[0-9]{24}')
_SERIAL_RE = re.compile(r'[0-9]{3}')


@dataclass(frozen=True)
class ParsedSerial:
    """Decoded parts of a 24-digit serialized number."""

    game_code: str
    pack_number: str
    serial_segment: str
    identifier: str

    @property
    def prefix(self) -> str:
        return f"{self.game_code}{self.pack_number}{self.serial_segment}"


def is_valid(code) -> bool:
    """True if ``code`` is exactly 24 ASCII digits."""
    return isinstance(code, str) and _SERIALIZED_RE.fullmatch(code) is not None


def parse(code: str) -> ParsedSerial:
    """
    Decode a serialized number.

    Raises:
        PackError('INVALID_FORMAT'): If code is not exactly 24 digits
    """
    if not is_valid(code):
        raise PackError('INVALID_FORMAT', value=code)

    return ParsedSerial(
        game_code=code[0:4],
        pack_number=code[4:11],
        serial_segment=code[11:14],
        identifier=code[14:24],
    )


def is_valid_serial(value) -> bool:
    """True if ``value`` is a 3-digit ticket serial ("000".."999")."""
    return isinstance(value, str) and _SERIAL_RE.fullmatch(value) is not None


def offset_serial(serial: str, offset: int) -> str:
    """
    Serial ``offset`` positions after ``serial``, zero-padded.

    Raises:
        PackError('INVALID_SERIAL'): If serial is malformed or the
            result falls outside 000-999
    """
    if not is_valid_serial(serial):
        raise PackError('INVALID_SERIAL', serial=serial)

    value = int(serial) + offset
    if value < 0 or value > MAX_SERIAL:
        raise PackError('INVALID_SERIAL', serial=serial, offset=offset)
    return str(value).zfill(SERIAL_WIDTH)


def serial_in_range(serial: str, start: str, end: str) -> bool:
    """Inclusive numeric range check for 3-digit serials."""
    if not is_valid_serial(serial):
        return False
    return int(start) <= int(serial) <= int(end)
