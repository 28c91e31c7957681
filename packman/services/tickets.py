"""
Ticket tracking: optional per-ticket sales, recorded by the register.
"""

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from packman import serials
from packman.exceptions import PackError
from packman.models.enums import PackStatus
from packman.models.ticket import TicketSerial

logger = logging.getLogger('packman')


class TicketTracking:
    """Per-ticket sale records."""

    @classmethod
    def record_sale(cls, pack, ticket_serial, shift=None, cashier=None):
        """
        Record the sale of one ticket of an ACTIVE pack.

        Raises:
            PackError('INVALID_STATUS'): Pack is not ACTIVE
            PackError('INVALID_SERIAL'): Ticket outside the pack range
            PackError('FOREIGN_KEY_VIOLATION'): Shift belongs to another store
            PackError('TICKET_ALREADY_SOLD'): Ticket already recorded
        """
        if pack.status != PackStatus.ACTIVE:
            raise PackError('INVALID_STATUS', current=pack.status, expected=[PackStatus.ACTIVE])

        if not serials.serial_in_range(ticket_serial, pack.serial_start, pack.serial_end):
            raise PackError(
                'INVALID_SERIAL',
                serial=ticket_serial,
                serial_start=pack.serial_start,
                serial_end=pack.serial_end,
            )

        if shift is not None and shift.store_id != pack.store_id:
            raise PackError('FOREIGN_KEY_VIOLATION', pack_id=pack.pk, shift_id=shift.pk)

        serial_number = f"{pack.game.game_code}{pack.pack_number}{ticket_serial}"
        try:
            with transaction.atomic():
                ticket = TicketSerial.objects.create(
                    pack=pack,
                    serial_number=serial_number,
                    sold_at=timezone.now(),
                    shift=shift,
                    cashier=cashier,
                )
        except IntegrityError:
            raise PackError('TICKET_ALREADY_SOLD', serial_number=serial_number) from None

        logger.debug(
            "packman.ticket.sold",
            extra={"serial_number": serial_number, "shift_id": getattr(shift, 'pk', None)},
        )
        return ticket

    @classmethod
    def sold_count(cls, pack, shift) -> int:
        """Tickets of ``pack`` recorded as sold during ``shift``."""
        return TicketSerial.objects.filter(
            pack=pack,
            shift=shift,
            sold_at__isnull=False,
        ).count()

    @classmethod
    def is_tracked(cls, pack) -> bool:
        """True if any ticket of ``pack`` has been recorded."""
        return TicketSerial.objects.filter(pack=pack).exists()
