"""
Pack lifecycle: activation, manual depletion and return.

    RECEIVED ──activate()──► ACTIVE ──deplete()──► DEPLETED
        │                      │
        └──return_pack()───────┴─────────────────► RETURNED

Depletion at the last serial happens in ShiftCloser.close_shift().
"""

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from packman import serials
from packman.counting import calculate_expected_count
from packman.exceptions import PackError
from packman.models.bin import Bin
from packman.models.enums import DepletionReason, EntryMethod, PackStatus, ShiftStatus
from packman.models.pack import Pack
from packman.models.shift import ShiftClosing
from packman.services import audit
from packman.services.bins import BinAssignments
from packman.services.ledger import ShiftLedger
from packman.services.refs import pk_of

logger = logging.getLogger('packman')


def lock_pack(pack):
    """Re-read ``pack`` under a row lock. Must run inside transaction.atomic()."""
    try:
        return Pack.objects.select_for_update().select_related('game').get(pk=pk_of(pack))
    except Pack.DoesNotExist:
        raise PackError('FOREIGN_KEY_VIOLATION', pack_id=pk_of(pack)) from None


def check_shift(shift, pack):
    """Shift must be open and belong to the pack's store."""
    if shift is None:
        return
    if shift.store_id != pack.store_id:
        raise PackError(
            'FOREIGN_KEY_VIOLATION',
            message='Pack and shift must belong to the same store',
            pack_id=pack.pk,
            shift_id=shift.pk,
        )
    if shift.status == ShiftStatus.CLOSED:
        raise PackError('SHIFT_NOT_OPEN', shift_id=shift.pk)


def check_manual_entry(entry_method, authorized_by, authorized_at):
    if entry_method == EntryMethod.MANUAL and (authorized_by is None or authorized_at is None):
        raise PackError('MANUAL_ENTRY_UNAUTHORIZED')


def mark_depleted(pack, depleted_by, shift, reason):
    """
    Move a locked ACTIVE pack to DEPLETED and take it out of its bin.

    Caller owns the transaction.
    """
    old_values = {'status': pack.status, 'current_bin_id': pack.current_bin_id}

    pack.status = PackStatus.DEPLETED
    pack.depleted_at = timezone.now()
    pack.depleted_by = depleted_by
    pack.depleted_shift = shift
    pack.depletion_reason = reason
    pack.current_bin = None
    pack.save(update_fields=[
        'status', 'depleted_at', 'depleted_by', 'depleted_shift',
        'depletion_reason', 'current_bin', 'updated_at',
    ])

    audit.record(
        pack,
        'UPDATE',
        old_values=old_values,
        new_values={
            'status': pack.status,
            'current_bin_id': None,
            'depletion_reason': reason,
        },
        user=depleted_by,
    )
    logger.info(
        "packman.pack.depleted",
        extra={
            "pack_number": pack.pack_number,
            "reason": reason,
            "shift_id": getattr(shift, 'pk', None),
        },
    )
    return pack


class PackLifecycle:
    """Status transitions outside of shift closing."""

    @classmethod
    def activate(cls, pack, bin, activated_by=None, shift=None, deplete_previous=False):
        """
        Put a RECEIVED pack on sale in ``bin``.

        With ``deplete_previous`` an ACTIVE pack already in the bin is
        depleted as replaced; otherwise an occupied bin is an error.

        Raises:
            PackError('INVALID_STATUS'): Pack is not RECEIVED
            PackError('FOREIGN_KEY_VIOLATION'): Bin or shift of another store
            PackError('BIN_INACTIVE'): Bin is deactivated
            PackError('BIN_OCCUPIED'): Bin holds an ACTIVE pack
            PackError('SHIFT_NOT_OPEN'): Shift already closed
            PackError('CONCURRENT_MODIFICATION'): Status changed underneath
        """
        with transaction.atomic():
            locked = lock_pack(pack)
            if locked.status != PackStatus.RECEIVED:
                raise PackError(
                    'INVALID_STATUS',
                    current=locked.status,
                    expected=[PackStatus.RECEIVED],
                )

            try:
                target = Bin.objects.get(pk=pk_of(bin))
            except Bin.DoesNotExist:
                raise PackError('FOREIGN_KEY_VIOLATION', bin_id=pk_of(bin)) from None
            if target.store_id != locked.store_id:
                raise PackError(
                    'FOREIGN_KEY_VIOLATION',
                    message='Pack and bin must belong to the same store',
                    pack_id=locked.pk,
                    bin_id=target.pk,
                )
            if not target.is_active:
                raise PackError('BIN_INACTIVE', bin_id=target.pk)

            check_shift(shift, locked)

            occupant = (
                Pack.objects.select_for_update()
                .active().in_bin(target)
                .first()
            )
            if occupant is not None:
                if not deplete_previous:
                    raise PackError(
                        'BIN_OCCUPIED',
                        bin_id=target.pk,
                        occupant_pack_number=occupant.pack_number,
                    )
                mark_depleted(occupant, activated_by, shift, DepletionReason.AUTO_REPLACED)

            now = timezone.now()
            updated = Pack.objects.filter(
                pk=locked.pk,
                status=PackStatus.RECEIVED,
            ).update(
                status=PackStatus.ACTIVE,
                activated_at=now,
                activated_by=activated_by,
                activated_shift=shift,
                updated_at=now,
            )
            if updated != 1:
                raise PackError('CONCURRENT_MODIFICATION', pack_id=locked.pk)

            audit.record(
                locked,
                'UPDATE',
                old_values={'status': PackStatus.RECEIVED},
                new_values={'status': PackStatus.ACTIVE},
                user=activated_by,
            )

            BinAssignments.move_pack(locked, target, moved_by=activated_by, reason='Activated')

            if shift is not None:
                ShiftLedger.record_opening(shift, locked, locked.serial_start)

            locked.refresh_from_db()
            logger.info(
                "packman.pack.activated",
                extra={
                    "pack_number": locked.pack_number,
                    "bin_id": target.pk,
                    "shift_id": getattr(shift, 'pk', None),
                    "replaced": getattr(occupant, 'pack_number', None),
                },
            )
            return locked

    @classmethod
    def deplete(cls, pack, depleted_by=None, shift=None):
        """
        Mark an ACTIVE pack as sold out.

        No closing is written here; the closing at the last serial is
        generated when ``shift`` is closed.

        Raises:
            PackError('INVALID_STATUS'): Pack is not ACTIVE
            PackError('SHIFT_NOT_OPEN'): Shift already closed
        """
        with transaction.atomic():
            locked = lock_pack(pack)
            if locked.status != PackStatus.ACTIVE:
                raise PackError(
                    'INVALID_STATUS',
                    current=locked.status,
                    expected=[PackStatus.ACTIVE],
                )
            check_shift(shift, locked)
            return mark_depleted(locked, depleted_by, shift, DepletionReason.MANUAL_SOLD_OUT)

    @classmethod
    def return_pack(cls, pack, returned_by=None, shift=None, last_sold_serial=None,
                    reason='', entry_method=EntryMethod.SCAN,
                    manual_entry_authorized_by=None, manual_entry_authorized_at=None):
        """
        Send a RECEIVED or ACTIVE pack back to the lottery.

        For an ACTIVE pack, ``last_sold_serial`` records how far it sold.
        With a shift as well, the partial sale is closed in that shift.

        Raises:
            PackError('INVALID_STATUS'): Pack is DEPLETED/RETURNED, or a
                RECEIVED pack reports sales
            PackError('INVALID_CLOSING_SERIAL'): Last sold serial outside
                the unsold range
            PackError('MANUAL_ENTRY_UNAUTHORIZED'): Manual entry without authorization
            PackError('DUPLICATE_CLOSING'): Pack already closed in the shift
        """
        with transaction.atomic():
            locked = lock_pack(pack)
            if locked.status not in (PackStatus.RECEIVED, PackStatus.ACTIVE):
                raise PackError(
                    'INVALID_STATUS',
                    current=locked.status,
                    expected=[PackStatus.RECEIVED, PackStatus.ACTIVE],
                )
            check_shift(shift, locked)

            old_values = {'status': locked.status, 'current_bin_id': locked.current_bin_id}
            tickets_sold = None
            closing = None

            if last_sold_serial is not None:
                if locked.status == PackStatus.RECEIVED:
                    raise PackError(
                        'INVALID_STATUS',
                        message='A pack that was never activated cannot report sales',
                        current=locked.status,
                    )
                opening = (
                    ShiftLedger.resolve_opening_serial(locked, shift)
                    if shift is not None else locked.serial_start
                )
                if not serials.serial_in_range(last_sold_serial, opening, locked.serial_end):
                    raise PackError(
                        'INVALID_CLOSING_SERIAL',
                        ending_serial=last_sold_serial,
                        opening_serial=opening,
                        serial_end=locked.serial_end,
                    )
                check_manual_entry(entry_method, manual_entry_authorized_by, manual_entry_authorized_at)
                tickets_sold = calculate_expected_count(locked.serial_start, last_sold_serial)

                if shift is not None:
                    try:
                        with transaction.atomic():
                            closing = ShiftClosing.objects.create(
                                shift=shift,
                                pack=locked,
                                bin=locked.current_bin,
                                opening_serial=opening,
                                closing_serial=last_sold_serial,
                                tickets_sold=calculate_expected_count(opening, last_sold_serial),
                                entry_method=entry_method,
                                manual_entry_authorized_by=manual_entry_authorized_by,
                                manual_entry_authorized_at=manual_entry_authorized_at,
                                closed_by=returned_by,
                            )
                    except IntegrityError:
                        raise PackError(
                            'DUPLICATE_CLOSING', shift_id=shift.pk, pack_id=locked.pk,
                        ) from None

            locked.status = PackStatus.RETURNED
            locked.returned_at = timezone.now()
            locked.returned_by = returned_by
            locked.returned_shift = shift
            locked.return_reason = reason or ''
            locked.last_sold_serial = last_sold_serial or ''
            locked.tickets_sold_on_return = tickets_sold
            locked.current_bin = None
            locked.save(update_fields=[
                'status', 'returned_at', 'returned_by', 'returned_shift', 'return_reason',
                'last_sold_serial', 'tickets_sold_on_return', 'current_bin', 'updated_at',
            ])

            audit.record(
                locked,
                'UPDATE',
                old_values=old_values,
                new_values={'status': locked.status, 'current_bin_id': None},
                user=returned_by,
            )
            logger.info(
                "packman.pack.returned",
                extra={
                    "pack_number": locked.pack_number,
                    "last_sold_serial": last_sold_serial,
                    "tickets_sold": tickets_sold,
                    "closing_id": getattr(closing, 'pk', None),
                },
            )
            return locked
