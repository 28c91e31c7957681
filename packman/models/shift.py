"""
Shift models: work period plus its opening and closing serial snapshots.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from packman.models.enums import EntryMethod, ShiftStatus
from packman.models.pack import serial_validator


class Shift(models.Model):
    """
    Bounded work period of a store.

    Shift management (cash, cashiers) lives outside Packman. The lottery
    engine only needs its store, ordering and whether it is still open.
    """

    store = models.ForeignKey(
        'packman.Store',
        on_delete=models.CASCADE,
        related_name='shifts',
        verbose_name=_('Store'),
    )
    opened_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Opened by'),
    )
    opened_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Opened at'))
    closed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Closed at'))
    status = models.CharField(
        max_length=20,
        choices=ShiftStatus.choices,
        default=ShiftStatus.OPEN,
        db_index=True,
        verbose_name=_('Status'),
    )

    class Meta:
        verbose_name = _('Shift')
        verbose_name_plural = _('Shifts')
        ordering = ['-opened_at']
        indexes = [
            models.Index(fields=['store', 'opened_at'], name='packman_shift_store_open_idx'),
        ]

    @property
    def is_closed(self) -> bool:
        return self.status == ShiftStatus.CLOSED

    def __str__(self) -> str:
        return f"Shift {self.pk} [{self.store.code}] {self.opened_at:%Y-%m-%d %H:%M}"


class ShiftOpening(models.Model):
    """Serial a pack started the shift at. One per (shift, pack)."""

    shift = models.ForeignKey(
        Shift,
        on_delete=models.CASCADE,
        related_name='openings',
        verbose_name=_('Shift'),
    )
    pack = models.ForeignKey(
        'packman.Pack',
        on_delete=models.CASCADE,
        related_name='shift_openings',
        verbose_name=_('Pack'),
    )
    opening_serial = models.CharField(
        max_length=3,
        validators=[serial_validator],
        verbose_name=_('Opening serial'),
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _('Shift opening')
        verbose_name_plural = _('Shift openings')
        constraints = [
            models.UniqueConstraint(
                fields=['shift', 'pack'],
                name='unique_opening_per_shift_pack',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.pack.pack_number} opens at {self.opening_serial}"


class ShiftClosing(models.Model):
    """
    Serial a pack ended the shift at. One per (shift, pack).

    A second closing for the same pair is an error, never an overwrite.
    """

    shift = models.ForeignKey(
        Shift,
        on_delete=models.CASCADE,
        related_name='closings',
        verbose_name=_('Shift'),
    )
    pack = models.ForeignKey(
        'packman.Pack',
        on_delete=models.CASCADE,
        related_name='shift_closings',
        verbose_name=_('Pack'),
    )
    bin = models.ForeignKey(
        'packman.Bin',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Bin'),
    )
    opening_serial = models.CharField(
        max_length=3,
        validators=[serial_validator],
        verbose_name=_('Opening serial'),
    )
    closing_serial = models.CharField(
        max_length=3,
        validators=[serial_validator],
        verbose_name=_('Closing serial'),
    )
    tickets_sold = models.PositiveIntegerField(verbose_name=_('Tickets sold'))
    entry_method = models.CharField(
        max_length=10,
        choices=EntryMethod.choices,
        default=EntryMethod.SCAN,
        verbose_name=_('Entry method'),
    )
    manual_entry_authorized_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Manual entry authorized by'),
    )
    manual_entry_authorized_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Manual entry authorized at'),
    )
    is_system_generated = models.BooleanField(
        default=False,
        verbose_name=_('System generated'),
        help_text=_('Closed automatically for a pack depleted during the shift.'),
    )
    closed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Closed by'),
    )
    closed_at = models.DateTimeField(default=timezone.now, verbose_name=_('Closed at'))

    class Meta:
        verbose_name = _('Shift closing')
        verbose_name_plural = _('Shift closings')
        ordering = ['closed_at', 'pk']
        constraints = [
            models.UniqueConstraint(
                fields=['shift', 'pack'],
                name='unique_closing_per_shift_pack',
            ),
        ]
        indexes = [
            models.Index(fields=['pack', 'closed_at'], name='packman_closing_pack_idx'),
        ]

    @property
    def sales_amount(self):
        """Money value of the tickets sold in this closing."""
        from packman.counting import sales_amount
        return sales_amount(self.tickets_sold, self.pack.game.price)

    def __str__(self) -> str:
        return (
            f"{self.pack.pack_number}: {self.opening_serial}→{self.closing_serial} "
            f"({self.tickets_sold} sold)"
        )
