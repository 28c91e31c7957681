"""
Tests for pack reception.
"""

from unittest import mock

import pytest
from django.db import IntegrityError, transaction

from packman import packs
from packman.exceptions import PackError
from packman.models import Pack, PackStatus
from packman.services.reception import PackReception, ROLLED_BACK_REASON
from packman.tests.codes import make_code


pytestmark = pytest.mark.django_db


class TestReceiveBatch:
    """Tests for packs.receive_batch()."""

    def test_creates_received_packs(self, store, game, user):
        """Each valid code becomes a RECEIVED pack with a 150-ticket range."""
        result = packs.receive_batch(store, [
            make_code(pack_number='1000001', serial='000'),
            make_code(pack_number='1000002', serial='012'),
        ], received_by=user)

        assert len(result.created) == 2
        assert result.duplicates == []
        assert result.errors == []

        first, second = result.created
        assert first.status == PackStatus.RECEIVED
        assert (first.serial_start, first.serial_end) == ('000', '149')
        assert (second.serial_start, second.serial_end) == ('012', '161')
        assert first.received_by == user
        assert first.current_bin is None

    def test_duplicate_within_batch(self, store, game):
        """Second code with the same pack number is a duplicate."""
        result = packs.receive_batch(store, [
            '000112345670123456789012',
            '000112345670456789012345',
        ])

        assert len(result.created) == 1
        assert result.duplicates == ['000112345670456789012345']
        assert Pack.objects.filter(store=store).count() == 1

    def test_duplicate_of_existing_pack(self, store, game):
        packs.receive_batch(store, [make_code()])

        result = packs.receive_batch(store, [make_code(serial='050')])

        assert result.created == []
        assert result.duplicates == [make_code(serial='050')]

    def test_same_pack_number_in_other_store(self, store, other_store, game):
        """Pack numbers are unique per store only."""
        packs.receive_batch(store, [make_code()])

        result = packs.receive_batch(other_store, [make_code()])

        assert len(result.created) == 1

    def test_invalid_format_is_reported(self, store, game):
        result = packs.receive_batch(store, ['12345', make_code()])

        assert len(result.created) == 1
        assert result.errors[0].code == '12345'
        assert result.errors[0].reason == 'Invalid serial number format'

    def test_unknown_game_reported_with_code(self, store, game):
        result = packs.receive_batch(store, [make_code(game_code='0777')])

        assert result.created == []
        assert result.errors[0].reason == 'Game code 0777 not found in database.'

    def test_inactive_game_is_not_found(self, store, inactive_game):
        result = packs.receive_batch(store, [make_code(game_code='0099')])

        assert result.created == []
        assert '0099' in result.errors[0].reason

    def test_game_pack_size_override(self, store, small_game):
        result = packs.receive_batch(store, [make_code(game_code='0002')])

        assert result.created[0].serial_end == '029'

    def test_serial_range_overflow(self, store, game):
        """A 150-ticket pack starting at 900 would run past 999."""
        result = packs.receive_batch(store, [make_code(serial='900')])

        assert result.created == []
        assert result.errors[0].reason == 'Serial range exceeds 999 for pack 1234567.'

    def test_empty_batch(self, store):
        with pytest.raises(PackError) as exc:
            packs.receive_batch(store, [])

        assert exc.value.code == 'EMPTY_BATCH'

    def test_batch_too_large(self, store, settings):
        settings.PACKMAN = {**settings.PACKMAN, 'MAX_BATCH_SIZE': 2}

        with pytest.raises(PackError) as exc:
            packs.receive_batch(store, [make_code(pack_number=f'100000{i}') for i in range(3)])

        assert exc.value.code == 'BATCH_TOO_LARGE'

    def test_tickets_per_pack_setting(self, store, game, settings):
        settings.PACKMAN = {**settings.PACKMAN, 'TICKETS_PER_PACK': 300}

        result = packs.receive_batch(store, [make_code()])

        assert result.created[0].serial_end == '299'

    def test_audit_entry_per_created_pack(self, store, game, audit_sink):
        packs.receive_batch(store, [
            make_code(pack_number='1000001'),
            make_code(pack_number='1000002'),
        ])

        entries = audit_sink.for_table('packman_pack')
        assert [entry.action for entry in entries] == ['INSERT', 'INSERT']
        assert entries[0].new_values['status'] == PackStatus.RECEIVED

    def test_as_dict(self, store, game):
        result = packs.receive_batch(store, ['bad', make_code(), make_code(serial='001')])

        data = result.as_dict()
        assert data['created'] == [result.created[0].pk]
        assert data['duplicates'] == [make_code(serial='001')]
        assert data['errors'] == [{'code': 'bad', 'reason': 'Invalid serial number format'}]


class TestConcurrentDuplicate:
    """A unique-constraint violation rolls back the whole batch."""

    def test_integrity_error_rolls_back_batch(self, store, game):
        codes = [
            make_code(pack_number='1000001'),
            make_code(pack_number='1000002'),
            make_code(pack_number='1000003'),
        ]
        real_create = PackReception._create
        calls = []

        def create(*args, **kwargs):
            calls.append(args)
            if len(calls) == 2:
                raise IntegrityError('UNIQUE constraint failed')
            return real_create(*args, **kwargs)

        with mock.patch.object(PackReception, '_create', side_effect=create):
            result = packs.receive_batch(store, codes)

        assert result.created == []
        assert result.duplicates == [codes[1]]
        assert [e.code for e in result.errors] == [codes[0], codes[2]]
        assert all(e.reason == ROLLED_BACK_REASON for e in result.errors)
        assert not Pack.objects.filter(store=store).exists()

    def test_rolled_back_batch_keeps_item_reasons(self, store, game):
        ok = make_code(pack_number='1000001')
        conflict = make_code(pack_number='1000002')
        repeated = make_code(pack_number='1000001', identifier='9999999999')
        codes = [ok, conflict, 'bad', make_code(game_code='0777'), repeated]
        real_create = PackReception._create

        def create(store, game, parsed, *args, **kwargs):
            if parsed.pack_number == '1000002':
                raise IntegrityError('UNIQUE constraint failed')
            return real_create(store, game, parsed, *args, **kwargs)

        with mock.patch.object(PackReception, '_create', side_effect=create):
            result = packs.receive_batch(store, codes)

        assert result.created == []
        assert result.duplicates == [repeated, conflict]
        reasons = {e.code: e.reason for e in result.errors}
        assert reasons == {
            'bad': 'Invalid serial number format',
            codes[3]: 'Game code 0777 not found in database.',
            ok: ROLLED_BACK_REASON,
        }
        assert not Pack.objects.filter(store=store).exists()

    def test_unique_constraint_is_enforced_by_database(self, store, game):
        packs.receive_batch(store, [make_code()])

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Pack.objects.create(
                    store=store,
                    game=game,
                    pack_number='1234567',
                    serial_start='000',
                    serial_end='149',
                )


class TestReceive:
    """Tests for packs.receive()."""

    def test_receive_single(self, store, game):
        pack = packs.receive(store, make_code())

        assert pack.pack_number == '1234567'
        assert pack.status == PackStatus.RECEIVED

    def test_receive_duplicate_raises(self, store, game):
        packs.receive(store, make_code())

        with pytest.raises(PackError) as exc:
            packs.receive(store, make_code())

        assert exc.value.code == 'DUPLICATE_PACK'

    def test_receive_unknown_game(self, store):
        with pytest.raises(PackError) as exc:
            packs.receive(store, make_code(game_code='0777'))

        assert exc.value.code == 'GAME_CODE_NOT_FOUND'
        assert exc.value.data['game_code'] == '0777'

    def test_receive_invalid_format(self, store):
        with pytest.raises(PackError) as exc:
            packs.receive(store, 'not-a-code')

        assert exc.value.code == 'INVALID_FORMAT'
