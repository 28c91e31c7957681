"""
Packman services: modular organization of pack operations.

    from packman.services import PackReception, BinAssignments, ShiftCloser
"""

from packman.services.bins import BinAssignments, BinTemplate, MoveResult
from packman.services.closing import ClosingEntry, ShiftCloser, ShiftCloseResult
from packman.services.ledger import ShiftLedger
from packman.services.lifecycle import PackLifecycle
from packman.services.queries import PackQueries
from packman.services.reception import BatchResult, PackReception, ReceptionError
from packman.services.tickets import TicketTracking
from packman.services.variances import VarianceDetector

__all__ = [
    'BinAssignments',
    'BinTemplate',
    'MoveResult',
    'PackReception',
    'BatchResult',
    'ReceptionError',
    'ShiftLedger',
    'VarianceDetector',
    'ShiftCloser',
    'ClosingEntry',
    'ShiftCloseResult',
    'PackLifecycle',
    'TicketTracking',
    'PackQueries',
]
