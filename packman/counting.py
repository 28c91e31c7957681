"""
Ticket counting: the single formula behind every sales figure.

Both endpoints of a serial range are sold tickets, so the count is
inclusive: 000 → 014 is 15 tickets.

    calculate_expected_count("000", "014")  # 15
    calculate_expected_count("050", "050")  # 1
    calculate_expected_count("050", "025")  # 0 (clamped)
"""

from decimal import Decimal


def calculate_expected_count(opening_serial: str, closing_serial: str) -> int:
    """
    Tickets sold between two serials, both inclusive.

    An inverted range returns 0 instead of a negative count. Callers
    reject inverted ranges before this point; the clamp only keeps a
    bad input from turning into a negative sale.
    """
    opening = int(opening_serial)
    closing = int(closing_serial)

    if closing < opening:
        return 0
    return closing - opening + 1


def pack_ticket_count(pack) -> int:
    """Number of tickets in a pack's full serial range."""
    return calculate_expected_count(pack.serial_start, pack.serial_end)


def sales_amount(tickets: int, price: Decimal) -> Decimal:
    """Money value of ``tickets`` sold at ``price`` each."""
    return Decimal(tickets) * price
