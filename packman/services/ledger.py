"""
Shift serial ledger: where each pack starts a shift.
"""

import logging

from django.db import IntegrityError, transaction

from packman import serials
from packman.exceptions import PackError
from packman.models.pack import Pack
from packman.models.shift import ShiftClosing, ShiftOpening

logger = logging.getLogger('packman')


class ShiftLedger:
    """Opening serial snapshots and their resolution."""

    @classmethod
    def record_opening(cls, shift, pack, opening_serial):
        """
        Record the serial ``pack`` starts ``shift`` at.

        Raises:
            PackError('INVALID_SERIAL'): Not 3 digits or outside the pack range
            PackError('FOREIGN_KEY_VIOLATION'): Pack belongs to another store
            PackError('DUPLICATE_OPENING'): Already recorded for (shift, pack)
        """
        if not serials.serial_in_range(opening_serial, pack.serial_start, pack.serial_end):
            raise PackError(
                'INVALID_SERIAL',
                serial=opening_serial,
                serial_start=pack.serial_start,
                serial_end=pack.serial_end,
            )

        if pack.store_id != shift.store_id:
            raise PackError(
                'FOREIGN_KEY_VIOLATION',
                message='Pack and shift must belong to the same store',
                pack_id=pack.pk,
                shift_id=shift.pk,
            )

        try:
            with transaction.atomic():
                if ShiftOpening.objects.filter(shift=shift, pack=pack).exists():
                    raise PackError('DUPLICATE_OPENING', shift_id=shift.pk, pack_id=pack.pk)
                opening = ShiftOpening.objects.create(
                    shift=shift,
                    pack=pack,
                    opening_serial=opening_serial,
                )
        except IntegrityError:
            raise PackError('DUPLICATE_OPENING', shift_id=shift.pk, pack_id=pack.pk) from None

        logger.debug(
            "packman.shift.opening",
            extra={
                "shift_id": shift.pk,
                "pack_number": pack.pack_number,
                "opening_serial": opening_serial,
            },
        )
        return opening

    @classmethod
    def resolve_opening_serial(cls, pack, as_of_shift):
        """
        Serial ``pack`` opened ``as_of_shift`` at.

        Precedence:
            1. Opening recorded for the shift
            2. Closing serial of the latest earlier shift that closed the pack
            3. pack.serial_start
        """
        opening = (
            ShiftOpening.objects
            .filter(shift=as_of_shift, pack=pack)
            .values_list('opening_serial', flat=True)
            .first()
        )
        if opening is not None:
            return opening

        previous = (
            ShiftClosing.objects
            .filter(pack=pack, shift__opened_at__lte=as_of_shift.opened_at)
            .exclude(shift=as_of_shift)
            .order_by('-shift__opened_at', '-closed_at', '-pk')
            .values_list('closing_serial', flat=True)
            .first()
        )
        if previous is not None:
            return previous

        return pack.serial_start

    @classmethod
    def open_shift(cls, shift):
        """
        Snapshot the opening serial of every ACTIVE pack in the store.

        Packs already recorded for the shift are skipped.

        Returns:
            List of created ShiftOpening
        """
        with transaction.atomic():
            recorded = set(
                ShiftOpening.objects.filter(shift=shift).values_list('pack_id', flat=True)
            )
            packs = (
                Pack.objects.for_store(shift.store_id).active()
                .exclude(pk__in=recorded)
                .order_by('pack_number')
            )

            openings = [
                ShiftOpening.objects.create(
                    shift=shift,
                    pack=pack,
                    opening_serial=cls.resolve_opening_serial(pack, shift),
                )
                for pack in packs
            ]

            logger.info(
                "packman.shift.opened",
                extra={"shift_id": shift.pk, "openings": len(openings)},
            )
            return openings
