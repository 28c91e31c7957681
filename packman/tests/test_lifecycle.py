"""
Tests for pack activation, manual depletion and return.
"""

import pytest
from django.utils import timezone

from packman import packs
from packman.exceptions import PackError
from packman.models import (
    DepletionReason,
    EntryMethod,
    PackStatus,
    ShiftClosing,
    ShiftOpening,
    ShiftStatus,
)


pytestmark = pytest.mark.django_db


class TestActivate:
    """Tests for packs.activate()."""

    def test_activate_places_pack(self, received_pack, bin_1, shift, user):
        pack = packs.activate(received_pack, bin_1, activated_by=user, shift=shift)

        assert pack.status == PackStatus.ACTIVE
        assert pack.current_bin == bin_1
        assert pack.activated_by == user
        assert pack.activated_shift == shift
        assert pack.activated_at >= pack.received_at
        assert pack.bin_history.count() == 1

    def test_activate_records_opening(self, active_pack, shift):
        opening = ShiftOpening.objects.get(shift=shift, pack=active_pack)

        assert opening.opening_serial == '000'

    def test_activate_without_shift(self, received_pack, bin_1):
        pack = packs.activate(received_pack, bin_1)

        assert pack.status == PackStatus.ACTIVE
        assert not ShiftOpening.objects.exists()

    def test_activate_twice(self, active_pack, bin_2):
        with pytest.raises(PackError) as exc:
            packs.activate(active_pack, bin_2)

        assert exc.value.code == 'INVALID_STATUS'

    def test_occupied_bin(self, active_pack, small_pack, bin_1):
        with pytest.raises(PackError) as exc:
            packs.activate(small_pack, bin_1)

        assert exc.value.code == 'BIN_OCCUPIED'
        small_pack.refresh_from_db()
        assert small_pack.status == PackStatus.RECEIVED

    def test_deplete_previous_replaces_occupant(self, active_pack, small_pack, bin_1, shift, user):
        packs.activate(small_pack, bin_1, activated_by=user, shift=shift, deplete_previous=True)

        active_pack.refresh_from_db()
        small_pack.refresh_from_db()
        assert active_pack.status == PackStatus.DEPLETED
        assert active_pack.depletion_reason == DepletionReason.AUTO_REPLACED
        assert active_pack.current_bin is None
        assert small_pack.current_bin == bin_1

    def test_bin_of_other_store(self, received_pack, foreign_bin):
        with pytest.raises(PackError) as exc:
            packs.activate(received_pack, foreign_bin)

        assert exc.value.code == 'FOREIGN_KEY_VIOLATION'

    def test_closed_shift(self, received_pack, bin_1, shift):
        shift.status = ShiftStatus.CLOSED
        shift.save()

        with pytest.raises(PackError) as exc:
            packs.activate(received_pack, bin_1, shift=shift)

        assert exc.value.code == 'SHIFT_NOT_OPEN'

    def test_audits_status_change(self, received_pack, bin_1, audit_sink):
        packs.activate(received_pack, bin_1)

        statuses = [
            (entry.old_values, entry.new_values) for entry in audit_sink.for_table('packman_pack')
            if 'status' in entry.new_values and entry.action == 'UPDATE'
        ]
        assert statuses == [({'status': 'received'}, {'status': 'active'})]


class TestDeplete:
    """Tests for packs.deplete()."""

    def test_manual_sold_out(self, active_pack, shift, user):
        pack = packs.deplete(active_pack, depleted_by=user, shift=shift)

        assert pack.status == PackStatus.DEPLETED
        assert pack.depletion_reason == DepletionReason.MANUAL_SOLD_OUT
        assert pack.depleted_shift == shift
        assert pack.current_bin is None
        assert not ShiftClosing.objects.exists()

    def test_received_pack_cannot_deplete(self, received_pack):
        with pytest.raises(PackError) as exc:
            packs.deplete(received_pack)

        assert exc.value.code == 'INVALID_STATUS'


class TestReturnPack:
    """Tests for packs.return_pack()."""

    def test_return_received_pack(self, received_pack, user):
        pack = packs.return_pack(received_pack, returned_by=user, reason='Damaged')

        assert pack.status == PackStatus.RETURNED
        assert pack.return_reason == 'Damaged'
        assert pack.tickets_sold_on_return is None

    def test_received_pack_cannot_report_sales(self, received_pack):
        with pytest.raises(PackError) as exc:
            packs.return_pack(received_pack, last_sold_serial='010')

        assert exc.value.code == 'INVALID_STATUS'

    def test_return_active_pack_with_partial_sale(self, active_pack, shift, user):
        pack = packs.return_pack(active_pack, returned_by=user, shift=shift, last_sold_serial='049')

        assert pack.status == PackStatus.RETURNED
        assert pack.current_bin is None
        assert pack.last_sold_serial == '049'
        assert pack.tickets_sold_on_return == 50

        closing = ShiftClosing.objects.get(shift=shift, pack=pack)
        assert (closing.opening_serial, closing.closing_serial) == ('000', '049')
        assert closing.tickets_sold == 50

    def test_last_sold_serial_out_of_range(self, active_pack, shift):
        with pytest.raises(PackError) as exc:
            packs.return_pack(active_pack, shift=shift, last_sold_serial='150')

        assert exc.value.code == 'INVALID_CLOSING_SERIAL'
        active_pack.refresh_from_db()
        assert active_pack.status == PackStatus.ACTIVE

    def test_manual_entry_needs_authorization(self, active_pack, shift):
        with pytest.raises(PackError) as exc:
            packs.return_pack(
                active_pack,
                shift=shift,
                last_sold_serial='010',
                entry_method=EntryMethod.MANUAL,
            )

        assert exc.value.code == 'MANUAL_ENTRY_UNAUTHORIZED'

    def test_manual_entry_authorized(self, active_pack, shift, manager):
        pack = packs.return_pack(
            active_pack,
            shift=shift,
            last_sold_serial='010',
            entry_method=EntryMethod.MANUAL,
            manual_entry_authorized_by=manager,
            manual_entry_authorized_at=timezone.now(),
        )

        closing = ShiftClosing.objects.get(pack=pack)
        assert closing.entry_method == EntryMethod.MANUAL
        assert closing.manual_entry_authorized_by == manager

    def test_returned_pack_cannot_return_again(self, received_pack):
        packs.return_pack(received_pack)

        with pytest.raises(PackError) as exc:
            packs.return_pack(received_pack)

        assert exc.value.code == 'INVALID_STATUS'
