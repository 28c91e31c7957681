"""
Pytest fixtures for Packman tests.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from packman import packs
from packman.adapters import get_audit_sink, reset_audit_sink, reset_game_lookup
from packman.models import Bin, Game, GameStatus, Shift, Store
from packman.tests.codes import make_code


User = get_user_model()


@pytest.fixture(autouse=True)
def audit_sink():
    """Fresh recording sink (and game lookup) for every test."""
    reset_audit_sink()
    reset_game_lookup()
    sink = get_audit_sink()
    yield sink
    reset_audit_sink()
    reset_game_lookup()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='clerk',
        password='testpass123'
    )


@pytest.fixture
def manager(db):
    """Create a user who authorizes manual entries."""
    return User.objects.create_user(
        username='manager',
        password='testpass123'
    )


@pytest.fixture
def store(db):
    return Store.objects.create(code='main-st', name='Main Street')


@pytest.fixture
def other_store(db):
    return Store.objects.create(code='elm-st', name='Elm Street')


@pytest.fixture
def game(db):
    """$5 game with the default pack size."""
    return Game.objects.create(
        game_code='0001',
        name='Lucky 7s',
        price=Decimal('5.00'),
    )


@pytest.fixture
def small_game(db):
    """$2 game with 30 tickets per pack."""
    return Game.objects.create(
        game_code='0002',
        name='Cash Blast',
        price=Decimal('2.00'),
        tickets_per_pack=30,
    )


@pytest.fixture
def inactive_game(db):
    return Game.objects.create(
        game_code='0099',
        name='Retired',
        price=Decimal('1.00'),
        status=GameStatus.INACTIVE,
    )


@pytest.fixture
def bin_1(store):
    return Bin.objects.create(store=store, name='Bin 1', display_order=1)


@pytest.fixture
def bin_2(store):
    return Bin.objects.create(store=store, name='Bin 2', display_order=2)


@pytest.fixture
def foreign_bin(other_store):
    return Bin.objects.create(store=other_store, name='Bin 1', display_order=1)


@pytest.fixture
def shift(store, user):
    return Shift.objects.create(store=store, opened_by=user)


@pytest.fixture
def received_pack(store, game, user):
    """RECEIVED pack 1234567, serials 000-149."""
    return packs.receive(store, make_code(), received_by=user)


@pytest.fixture
def active_pack(received_pack, bin_1, shift, user):
    """ACTIVE pack 1234567 in bin 1, opened in ``shift`` at 000."""
    return packs.activate(received_pack, bin_1, activated_by=user, shift=shift)


@pytest.fixture
def small_pack(store, small_game, user):
    """RECEIVED pack 7654321, serials 000-029."""
    return packs.receive(store, make_code('0002', '7654321'), received_by=user)
