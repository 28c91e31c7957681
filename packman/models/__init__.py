"""
Packman Models.

Core models for lottery pack management:
- Store, Game, Bin: reference data
- Pack: inventory unit and its lifecycle
- PackBinHistory: immutable placement trail
- Shift, ShiftOpening, ShiftClosing: per-shift serial snapshots
- Variance: expected vs. actual disagreements
- TicketSerial: optional per-ticket sales
"""

from packman.models.bin import Bin
from packman.models.enums import (
    DepletionReason,
    EntryMethod,
    GameStatus,
    PackStatus,
    ShiftStatus,
)
from packman.models.game import Game
from packman.models.history import PackBinHistory
from packman.models.pack import Pack
from packman.models.shift import Shift, ShiftClosing, ShiftOpening
from packman.models.store import Store
from packman.models.ticket import TicketSerial
from packman.models.variance import Variance

__all__ = [
    'PackStatus',
    'GameStatus',
    'ShiftStatus',
    'EntryMethod',
    'DepletionReason',
    'Store',
    'Game',
    'Bin',
    'Pack',
    'PackBinHistory',
    'Shift',
    'ShiftOpening',
    'ShiftClosing',
    'Variance',
    'TicketSerial',
]
