"""
Tests for per-ticket sales tracking.
"""

import pytest

from packman import packs
from packman.exceptions import PackError
from packman.models import Shift, TicketSerial
from packman.services.tickets import TicketTracking


pytestmark = pytest.mark.django_db


class TestRecordSale:
    """Tests for packs.record_sale()."""

    def test_record_sale(self, active_pack, shift, user):
        ticket = packs.record_sale(active_pack, '007', shift=shift, cashier=user)

        assert ticket.serial_number == '00011234567007'
        assert ticket.ticket_serial == '007'
        assert ticket.sold_at is not None

    def test_ticket_sold_twice(self, active_pack, shift):
        packs.record_sale(active_pack, '007', shift=shift)

        with pytest.raises(PackError) as exc:
            packs.record_sale(active_pack, '007', shift=shift)

        assert exc.value.code == 'TICKET_ALREADY_SOLD'

    def test_ticket_outside_pack(self, active_pack, shift):
        with pytest.raises(PackError) as exc:
            packs.record_sale(active_pack, '150', shift=shift)

        assert exc.value.code == 'INVALID_SERIAL'

    def test_pack_not_active(self, received_pack):
        with pytest.raises(PackError) as exc:
            packs.record_sale(received_pack, '001')

        assert exc.value.code == 'INVALID_STATUS'

    def test_shift_of_other_store(self, active_pack, other_store):
        with pytest.raises(PackError) as exc:
            packs.record_sale(active_pack, '001', shift=Shift.objects.create(store=other_store))

        assert exc.value.code == 'FOREIGN_KEY_VIOLATION'


class TestSoldCount:
    """Tests for TicketTracking.sold_count()."""

    def test_counts_per_shift(self, active_pack, store, shift):
        other = Shift.objects.create(store=store)
        packs.record_sale(active_pack, '000', shift=shift)
        packs.record_sale(active_pack, '001', shift=shift)
        packs.record_sale(active_pack, '002', shift=other)

        assert TicketTracking.sold_count(active_pack, shift) == 2
        assert TicketTracking.sold_count(active_pack, other) == 1

    def test_deleting_shift_keeps_tickets(self, active_pack, store):
        other = Shift.objects.create(store=store)
        packs.record_sale(active_pack, '000', shift=other)

        other.delete()

        ticket = TicketSerial.objects.get()
        assert ticket.shift is None
