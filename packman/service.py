"""
Packs service: the single public interface for all pack operations.

Usage:
    from packman import packs, PackError

    result = packs.receive_batch(store, codes, received_by=clerk)
    packs.activate(result.created[0], bin_1, activated_by=clerk, shift=shift)
    packs.close_shift(shift, [{"bin": bin_1, "pack": pack, "ending_serial": "045"}])
"""

from packman.services.bins import BinAssignments
from packman.services.closing import ShiftCloser
from packman.services.ledger import ShiftLedger
from packman.services.lifecycle import PackLifecycle
from packman.services.queries import PackQueries
from packman.services.reception import PackReception
from packman.services.tickets import TicketTracking
from packman.services.variances import VarianceDetector


class Packs:
    """
    Single interface for all pack operations.

    Every method delegates to a service group in packman.services.
    State-changing methods run in their own transaction.atomic() block;
    called inside an outer transaction they join it.
    """

    # ══════════════════════════════════════════════════════════════
    # RECEPTION
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def receive_batch(cls, store, codes, received_by=None):
        return PackReception.receive_batch(store, codes, received_by=received_by)

    @classmethod
    def receive(cls, store, code, received_by=None):
        return PackReception.receive(store, code, received_by=received_by)

    # ══════════════════════════════════════════════════════════════
    # BINS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def move_pack(cls, pack, target_bin, moved_by=None, reason=None):
        return BinAssignments.move_pack(pack, target_bin, moved_by=moved_by, reason=reason)

    @classmethod
    def bin_history(cls, pack):
        return BinAssignments.history(pack)

    @classmethod
    def configure_bins(cls, store, templates):
        return BinAssignments.configure_bins(store, templates)

    # ══════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def activate(cls, pack, bin, activated_by=None, shift=None, deplete_previous=False):
        return PackLifecycle.activate(
            pack, bin,
            activated_by=activated_by,
            shift=shift,
            deplete_previous=deplete_previous,
        )

    @classmethod
    def deplete(cls, pack, depleted_by=None, shift=None):
        return PackLifecycle.deplete(pack, depleted_by=depleted_by, shift=shift)

    @classmethod
    def return_pack(cls, pack, returned_by=None, shift=None, last_sold_serial=None, **kwargs):
        return PackLifecycle.return_pack(
            pack,
            returned_by=returned_by,
            shift=shift,
            last_sold_serial=last_sold_serial,
            **kwargs,
        )

    # ══════════════════════════════════════════════════════════════
    # SHIFTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def open_shift(cls, shift):
        return ShiftLedger.open_shift(shift)

    @classmethod
    def record_opening(cls, shift, pack, opening_serial):
        return ShiftLedger.record_opening(shift, pack, opening_serial)

    @classmethod
    def opening_serial(cls, pack, shift):
        return ShiftLedger.resolve_opening_serial(pack, shift)

    @classmethod
    def close_shift(cls, shift, closings, closed_by=None):
        return ShiftCloser.close_shift(shift, closings, closed_by=closed_by)

    @classmethod
    def approve_variance(cls, variance, approved_by, reason):
        return VarianceDetector.approve(variance, approved_by, reason)

    # ══════════════════════════════════════════════════════════════
    # TICKETS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def record_sale(cls, pack, ticket_serial, shift=None, cashier=None):
        return TicketTracking.record_sale(pack, ticket_serial, shift=shift, cashier=cashier)

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def get_pack(cls, store, pack_number):
        return PackQueries.get_pack(store, pack_number)

    @classmethod
    def active_pack(cls, bin):
        return PackQueries.active_pack(bin)

    @classmethod
    def list_packs(cls, store, status=None, game=None):
        return PackQueries.list_packs(store, status=status, game=game)

    @classmethod
    def shift_summary(cls, shift):
        return PackQueries.shift_summary(shift)
