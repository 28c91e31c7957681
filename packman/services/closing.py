"""
Shift closing: the reconciliation transaction.

close_shift() writes every closing of a shift, depletes packs closed at
their last serial, closes packs depleted earlier in the shift and raises
variances, all in one transaction. Any error rolls back the whole call.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from django.db import IntegrityError, transaction

from packman import serials
from packman.counting import calculate_expected_count
from packman.exceptions import PackError
from packman.models.bin import Bin
from packman.models.enums import DepletionReason, EntryMethod, PackStatus, ShiftStatus
from packman.models.pack import Pack
from packman.models.shift import Shift, ShiftClosing, ShiftOpening
from packman.models.variance import Variance
from packman.services.ledger import ShiftLedger
from packman.services.lifecycle import check_manual_entry, lock_pack, mark_depleted
from packman.services.refs import pk_of
from packman.services.tickets import TicketTracking
from packman.services.variances import VarianceDetector

logger = logging.getLogger('packman')


@dataclass(frozen=True)
class ClosingEntry:
    """
    One pack's closing as submitted by the store.

    ``bin`` and ``pack`` may be instances or primary keys.
    ``counted_tickets`` is an independent sales count, when the store has one.
    """

    bin: Any
    pack: Any
    ending_serial: str
    entry_method: str = EntryMethod.SCAN
    manual_entry_authorized_by: Any = None
    manual_entry_authorized_at: datetime | None = None
    counted_tickets: int | None = None

    @classmethod
    def coerce(cls, value) -> 'ClosingEntry':
        """
        Accept a ClosingEntry or a mapping with the same keys
        (``bin_id``/``pack_id`` are accepted as aliases).

        Raises:
            PackError('FOREIGN_KEY_VIOLATION'): Pack or bin missing
            PackError('INVALID_FORMAT'): Unknown entry method
        """
        if isinstance(value, cls):
            entry = value
        elif isinstance(value, Mapping):
            entry = cls(
                bin=value.get('bin', value.get('bin_id')),
                pack=value.get('pack', value.get('pack_id')),
                ending_serial=value.get('ending_serial'),
                entry_method=value.get('entry_method') or EntryMethod.SCAN,
                manual_entry_authorized_by=value.get('manual_entry_authorized_by'),
                manual_entry_authorized_at=value.get('manual_entry_authorized_at'),
                counted_tickets=value.get('counted_tickets'),
            )
        else:
            raise TypeError(f"Cannot build a ClosingEntry from {type(value).__name__}")

        if entry.pack is None or entry.bin is None:
            raise PackError('FOREIGN_KEY_VIOLATION', pack_id=entry.pack, bin_id=entry.bin)
        if entry.entry_method not in EntryMethod.values:
            raise PackError(
                'INVALID_FORMAT',
                message='Unknown entry method',
                entry_method=entry.entry_method,
            )
        return entry


@dataclass
class ShiftCloseResult:
    """Outcome of close_shift()."""

    packs_closed: int = 0
    packs_depleted: int = 0
    tickets_sold: int = 0
    closings: list[ShiftClosing] = field(default_factory=list)
    variances: list[Variance] = field(default_factory=list)

    @property
    def summary(self) -> dict[str, int]:
        return {
            'packs_closed': self.packs_closed,
            'packs_depleted': self.packs_depleted,
        }

    def as_dict(self) -> dict[str, Any]:
        return {
            'success': True,
            'summary': self.summary,
            'tickets_sold': self.tickets_sold,
            'variances': [variance.pk for variance in self.variances],
        }


class ShiftCloser:
    """Shift closing coordinator."""

    @classmethod
    def close_shift(cls, shift, closings, closed_by=None):
        """
        Close every listed pack of a shift.

        Steps, all in one transaction with the shift row locked:
            1. Packs depleted during the shift without a closing get one
               at their last serial (is_system_generated=True).
            2. Each entry is validated, counted and persisted; a pack
               closed at its last serial becomes DEPLETED.
            3. Variances are raised where an independent count disagrees.

        Returns:
            ShiftCloseResult

        Raises:
            PackError('SHIFT_NOT_OPEN'): Shift already closed
            PackError('FOREIGN_KEY_VIOLATION'): Pack/bin missing or of another store
            PackError('PACK_NOT_IN_BIN'): Pack is not in the given bin
            PackError('INVALID_STATUS'): Pack neither ACTIVE nor depleted in this shift
            PackError('INVALID_CLOSING_SERIAL'): Ending serial outside [opening, serial_end]
            PackError('MANUAL_ENTRY_UNAUTHORIZED'): Manual entry without authorization
            PackError('DUPLICATE_CLOSING'): Pack already closed in the shift
        """
        entries = [ClosingEntry.coerce(value) for value in closings]

        with transaction.atomic():
            try:
                locked_shift = Shift.objects.select_for_update().get(pk=pk_of(shift))
            except Shift.DoesNotExist:
                raise PackError('FOREIGN_KEY_VIOLATION', shift_id=pk_of(shift)) from None

            if locked_shift.status == ShiftStatus.CLOSED:
                raise PackError('SHIFT_NOT_OPEN', shift_id=locked_shift.pk)

            listed = set()
            for entry in entries:
                pack_id = pk_of(entry.pack)
                if pack_id in listed:
                    raise PackError('DUPLICATE_CLOSING', shift_id=locked_shift.pk, pack_id=pack_id)
                listed.add(pack_id)

            result = ShiftCloseResult()

            for pack in cls._depleted_without_closing(locked_shift, listed):
                cls._close_depleted(locked_shift, pack, closed_by, result)

            for entry in entries:
                cls._close_entry(locked_shift, entry, closed_by, result)

            logger.info(
                "packman.shift.closed",
                extra={
                    "shift_id": locked_shift.pk,
                    "store": locked_shift.store_id,
                    "packs_closed": result.packs_closed,
                    "packs_depleted": result.packs_depleted,
                    "tickets_sold": result.tickets_sold,
                    "variances": len(result.variances),
                },
            )
            return result

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _depleted_without_closing(cls, shift, listed):
        closed = ShiftClosing.objects.filter(shift=shift).values('pack_id')
        return (
            Pack.objects.select_for_update()
            .select_related('game')
            .for_store(shift.store_id)
            .depleted_in(shift)
            .exclude(pk__in=listed)
            .exclude(pk__in=closed)
            .order_by('pack_number')
        )

    @classmethod
    def _close_depleted(cls, shift, pack, closed_by, result):
        opening = ShiftLedger.resolve_opening_serial(pack, shift)
        tickets = calculate_expected_count(opening, pack.serial_end)
        closing = cls._persist(
            shift,
            pack,
            bin=None,
            opening=opening,
            ending=pack.serial_end,
            tickets=tickets,
            closed_by=closed_by,
            is_system_generated=True,
        )
        cls._tally(result, closing)
        cls._detect_variance(shift, pack, tickets, None, result)

    @classmethod
    def _close_entry(cls, shift, entry, closed_by, result):
        pack = lock_pack(entry.pack)
        if pack.store_id != shift.store_id:
            raise PackError(
                'FOREIGN_KEY_VIOLATION',
                message='Pack and shift must belong to the same store',
                pack_id=pack.pk,
                shift_id=shift.pk,
            )

        try:
            bin = Bin.objects.get(pk=pk_of(entry.bin))
        except Bin.DoesNotExist:
            raise PackError('FOREIGN_KEY_VIOLATION', bin_id=pk_of(entry.bin)) from None
        if bin.store_id != shift.store_id:
            raise PackError(
                'FOREIGN_KEY_VIOLATION',
                message='Bin and shift must belong to the same store',
                bin_id=bin.pk,
                shift_id=shift.pk,
            )

        if ShiftClosing.objects.filter(shift=shift, pack=pack).exists():
            raise PackError('DUPLICATE_CLOSING', shift_id=shift.pk, pack_id=pack.pk)

        # A pack sold out earlier in this shift is no longer in a bin.
        depleted_here = (
            pack.status == PackStatus.DEPLETED and pack.depleted_shift_id == shift.pk
        )
        if pack.status != PackStatus.ACTIVE and not depleted_here:
            raise PackError(
                'INVALID_STATUS',
                current=pack.status,
                expected=[PackStatus.ACTIVE],
                pack_number=pack.pack_number,
            )
        if not depleted_here and pack.current_bin_id != bin.pk:
            raise PackError('PACK_NOT_IN_BIN', pack_id=pack.pk, bin_id=bin.pk)

        opening = ShiftLedger.resolve_opening_serial(pack, shift)
        ending = entry.ending_serial
        # A sold-out pack can only close at its last serial.
        sold_out_mismatch = depleted_here and ending != pack.serial_end
        if sold_out_mismatch or not serials.serial_in_range(ending, opening, pack.serial_end):
            raise PackError(
                'INVALID_CLOSING_SERIAL',
                ending_serial=ending,
                opening_serial=opening,
                serial_end=pack.serial_end,
            )
        check_manual_entry(
            entry.entry_method,
            entry.manual_entry_authorized_by,
            entry.manual_entry_authorized_at,
        )

        if not ShiftOpening.objects.filter(shift=shift, pack=pack).exists():
            ShiftLedger.record_opening(shift, pack, opening)

        tickets = calculate_expected_count(opening, ending)
        closing = cls._persist(
            shift,
            pack,
            bin=bin,
            opening=opening,
            ending=ending,
            tickets=tickets,
            closed_by=closed_by,
            entry_method=entry.entry_method,
            manual_entry_authorized_by=entry.manual_entry_authorized_by,
            manual_entry_authorized_at=entry.manual_entry_authorized_at,
        )
        cls._tally(result, closing)

        if ending == pack.serial_end and not depleted_here:
            mark_depleted(pack, closed_by, shift, DepletionReason.SHIFT_CLOSE)
            result.packs_depleted += 1

        cls._detect_variance(shift, pack, tickets, entry.counted_tickets, result)

    @staticmethod
    def _persist(shift, pack, bin, opening, ending, tickets, closed_by,
                 entry_method=EntryMethod.SCAN, manual_entry_authorized_by=None,
                 manual_entry_authorized_at=None, is_system_generated=False):
        try:
            with transaction.atomic():
                return ShiftClosing.objects.create(
                    shift=shift,
                    pack=pack,
                    bin=bin,
                    opening_serial=opening,
                    closing_serial=ending,
                    tickets_sold=tickets,
                    entry_method=entry_method,
                    manual_entry_authorized_by=manual_entry_authorized_by,
                    manual_entry_authorized_at=manual_entry_authorized_at,
                    is_system_generated=is_system_generated,
                    closed_by=closed_by,
                )
        except IntegrityError:
            raise PackError('DUPLICATE_CLOSING', shift_id=shift.pk, pack_id=pack.pk) from None

    @staticmethod
    def _tally(result, closing):
        result.closings.append(closing)
        result.packs_closed += 1
        result.tickets_sold += closing.tickets_sold

    @staticmethod
    def _detect_variance(shift, pack, expected, counted, result):
        """Compare against the counted tickets, else the tracked ticket sales."""
        if counted is not None:
            actual = counted
        elif TicketTracking.is_tracked(pack):
            actual = TicketTracking.sold_count(pack, shift)
        else:
            return

        variance = VarianceDetector.detect(shift, pack, expected, actual)
        if variance is not None:
            result.variances.append(variance)
