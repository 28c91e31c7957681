"""
Tests for shift opening serials.
"""

from datetime import timedelta

import pytest
from django.db import IntegrityError, transaction

from packman import packs
from packman.exceptions import PackError
from packman.models import Shift, ShiftOpening


pytestmark = pytest.mark.django_db


@pytest.fixture
def next_shift(store, shift):
    return Shift.objects.create(store=store, opened_at=shift.opened_at + timedelta(hours=8))


class TestRecordOpening:
    """Tests for packs.record_opening()."""

    def test_records_opening(self, received_pack, shift):
        opening = packs.record_opening(shift, received_pack, '010')

        assert opening.opening_serial == '010'

    def test_duplicate_opening(self, active_pack, shift):
        """active_pack already opened at 000 in ``shift``."""
        with pytest.raises(PackError) as exc:
            packs.record_opening(shift, active_pack, '000')

        assert exc.value.code == 'DUPLICATE_OPENING'

    def test_unique_constraint_backstop(self, active_pack, shift):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                ShiftOpening.objects.create(shift=shift, pack=active_pack, opening_serial='001')

    def test_serial_outside_pack(self, received_pack, shift):
        with pytest.raises(PackError) as exc:
            packs.record_opening(shift, received_pack, '150')

        assert exc.value.code == 'INVALID_SERIAL'

    def test_shift_of_other_store(self, received_pack, other_store):
        foreign_shift = Shift.objects.create(store=other_store)

        with pytest.raises(PackError) as exc:
            packs.record_opening(foreign_shift, received_pack, '000')

        assert exc.value.code == 'FOREIGN_KEY_VIOLATION'


class TestResolveOpeningSerial:
    """Tests for packs.opening_serial()."""

    def test_explicit_opening_wins(self, active_pack, shift):
        assert packs.opening_serial(active_pack, shift) == '000'

    def test_previous_closing_carries_over(self, active_pack, bin_1, shift, next_shift):
        packs.close_shift(shift, [{'bin': bin_1, 'pack': active_pack, 'ending_serial': '050'}])

        assert packs.opening_serial(active_pack, next_shift) == '050'

    def test_latest_previous_closing(self, active_pack, bin_1, store, shift, next_shift):
        packs.close_shift(shift, [{'bin': bin_1, 'pack': active_pack, 'ending_serial': '020'}])
        packs.close_shift(next_shift, [{'bin': bin_1, 'pack': active_pack, 'ending_serial': '070'}])
        third = Shift.objects.create(store=store, opened_at=next_shift.opened_at + timedelta(hours=8))

        assert packs.opening_serial(active_pack, third) == '070'

    def test_later_closings_are_ignored(self, active_pack, bin_1, store, shift, next_shift):
        earlier = Shift.objects.create(store=store, opened_at=shift.opened_at - timedelta(hours=8))
        packs.close_shift(next_shift, [{'bin': bin_1, 'pack': active_pack, 'ending_serial': '090'}])

        assert packs.opening_serial(active_pack, earlier) == active_pack.serial_start

    def test_falls_back_to_serial_start(self, received_pack, shift):
        assert packs.opening_serial(received_pack, shift) == '000'


class TestOpenShift:
    """Tests for packs.open_shift()."""

    def test_snapshots_active_packs(self, active_pack, small_pack, bin_1, bin_2, shift, next_shift, user):
        packs.activate(small_pack, bin_2, activated_by=user)
        packs.close_shift(shift, [{'bin': bin_1, 'pack': active_pack, 'ending_serial': '030'}])

        openings = packs.open_shift(next_shift)

        serials = {o.pack.pack_number: o.opening_serial for o in openings}
        assert serials == {'1234567': '030', '7654321': '000'}

    def test_skips_recorded_packs(self, active_pack, shift):
        assert packs.open_shift(shift) == []

    def test_ignores_received_packs(self, received_pack, shift):
        assert packs.open_shift(shift) == []
        assert not ShiftOpening.objects.filter(shift=shift).exists()
