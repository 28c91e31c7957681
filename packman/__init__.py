"""
Django Packman: lottery pack lifecycle and shift reconciliation.

Usage:
    from packman import packs, PackError

    result = packs.receive_batch(store, ["000112345670123456789012"])
    packs.activate(result.created[0], bin_1, activated_by=clerk, shift=shift)
    packs.close_shift(shift, [
        {"bin": bin_1, "pack": pack, "ending_serial": "045", "entry_method": "scan"},
    ], closed_by=manager)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'packs':
        from packman.service import Packs
        return Packs
    elif name == 'PackError':
        from packman.exceptions import PackError
        return PackError
    elif name == 'Store':
        from packman.models.store import Store
        return Store
    elif name == 'Game':
        from packman.models.game import Game
        return Game
    elif name == 'Bin':
        from packman.models.bin import Bin
        return Bin
    elif name == 'Pack':
        from packman.models.pack import Pack
        return Pack
    elif name == 'PackBinHistory':
        from packman.models.history import PackBinHistory
        return PackBinHistory
    elif name == 'Shift':
        from packman.models.shift import Shift
        return Shift
    elif name == 'ShiftOpening':
        from packman.models.shift import ShiftOpening
        return ShiftOpening
    elif name == 'ShiftClosing':
        from packman.models.shift import ShiftClosing
        return ShiftClosing
    elif name == 'Variance':
        from packman.models.variance import Variance
        return Variance
    elif name == 'TicketSerial':
        from packman.models.ticket import TicketSerial
        return TicketSerial
    elif name == 'PackStatus':
        from packman.models.enums import PackStatus
        return PackStatus
    elif name == 'EntryMethod':
        from packman.models.enums import EntryMethod
        return EntryMethod
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'packs',
    'PackError',
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
    'PackStatus',
    'EntryMethod',
]

__version__ = '0.1.0'
