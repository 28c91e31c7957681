"""
Enums for Packman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class PackStatus(models.TextChoices):
    """
    Pack lifecycle status.

    RECEIVED: In the back office, not yet on sale.
    ACTIVE:   Placed in a bin, tickets being sold.
    DEPLETED: Every ticket sold (or marked sold out).
    RETURNED: Sent back to the lottery before selling out.
    """
    RECEIVED = 'received', _('Received')
    ACTIVE = 'active', _('Active')
    DEPLETED = 'depleted', _('Depleted')
    RETURNED = 'returned', _('Returned')


class GameStatus(models.TextChoices):
    """Game availability."""
    ACTIVE = 'active', _('Active')
    INACTIVE = 'inactive', _('Inactive')


class ShiftStatus(models.TextChoices):
    """Shift lifecycle status."""
    OPEN = 'open', _('Open')
    CLOSING = 'closing', _('Closing')
    CLOSED = 'closed', _('Closed')


class EntryMethod(models.TextChoices):
    """How a closing serial was captured."""
    SCAN = 'scan', _('Scan')        # Barcode scanner
    MANUAL = 'manual', _('Manual')  # Typed in, needs authorization


class DepletionReason(models.TextChoices):
    """Why a pack became DEPLETED."""
    SHIFT_CLOSE = 'shift_close', _('Closed at last serial')
    MANUAL_SOLD_OUT = 'manual_sold_out', _('Marked sold out')
    AUTO_REPLACED = 'auto_replaced', _('Replaced by a new pack')
