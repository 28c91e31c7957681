"""
Pack queries: read-only operations.

All methods are classmethods and use no locking.
"""

from decimal import Decimal

from django.db.models import DecimalField, ExpressionWrapper, F, Sum
from django.db.models.functions import Coalesce

from packman.exceptions import PackError
from packman.models.pack import Pack
from packman.models.shift import ShiftClosing
from packman.models.variance import Variance


class PackQueries:
    """Read-only pack query methods."""

    @classmethod
    def get_pack(cls, store, pack_number):
        """
        Pack of ``store`` by its 7-digit number.

        Raises:
            PackError('FOREIGN_KEY_VIOLATION'): No such pack in the store
        """
        try:
            return Pack.objects.select_related('game', 'current_bin').get(
                store=store,
                pack_number=pack_number,
            )
        except Pack.DoesNotExist:
            raise PackError(
                'FOREIGN_KEY_VIOLATION',
                message='Pack not found',
                pack_number=pack_number,
            ) from None

    @classmethod
    def active_pack(cls, bin):
        """ACTIVE pack in ``bin``, or None."""
        return Pack.objects.active().in_bin(bin).select_related('game').first()

    @classmethod
    def list_packs(cls, store, status=None, game=None):
        """Packs of a store, optionally filtered by status and game."""
        qs = Pack.objects.for_store(store).select_related('game', 'current_bin')
        if status:
            qs = qs.filter(status=status)
        if game:
            qs = qs.filter(game=game)
        return qs.order_by('pack_number')

    @classmethod
    def shift_summary(cls, shift) -> dict:
        """
        Sales figures of a shift.

        Returns:
            dict with packs_closed, packs_depleted, tickets_sold,
            sales_amount and open_variances
        """
        closings = ShiftClosing.objects.filter(shift=shift)
        totals = closings.aggregate(
            tickets=Coalesce(Sum('tickets_sold'), 0),
            amount=Coalesce(
                Sum(
                    ExpressionWrapper(
                        F('tickets_sold') * F('pack__game__price'),
                        output_field=DecimalField(max_digits=14, decimal_places=2),
                    )
                ),
                Decimal('0'),
                output_field=DecimalField(max_digits=14, decimal_places=2),
            ),
        )

        return {
            'packs_closed': closings.count(),
            'packs_depleted': Pack.objects.depleted_in(shift).count(),
            'tickets_sold': totals['tickets'],
            'sales_amount': Decimal(totals['amount']),
            'open_variances': Variance.objects.filter(shift=shift).unresolved().count(),
        }
