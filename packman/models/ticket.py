"""
TicketSerial model: optional per-ticket sales tracking.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class TicketSerial(models.Model):
    """
    A single ticket of a pack, recorded when the register sells it.

    serial_number is game_code + pack_number + ticket serial (14 digits),
    unique across all stores. Deleting the shift or the cashier keeps
    the ticket and clears the reference.
    """

    pack = models.ForeignKey(
        'packman.Pack',
        on_delete=models.CASCADE,
        related_name='tickets',
        verbose_name=_('Pack'),
    )
    serial_number = models.CharField(
        max_length=14,
        unique=True,
        verbose_name=_('Serial number'),
    )
    sold_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Sold at'))
    shift = models.ForeignKey(
        'packman.Shift',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tickets',
        verbose_name=_('Shift'),
    )
    cashier = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Cashier'),
    )

    class Meta:
        verbose_name = _('Ticket')
        verbose_name_plural = _('Tickets')
        ordering = ['serial_number']
        indexes = [
            models.Index(fields=['pack', 'shift'], name='packman_ticket_pack_shift_idx'),
        ]

    @property
    def ticket_serial(self) -> str:
        """The 3-digit position inside the pack."""
        return self.serial_number[-3:]

    def __str__(self) -> str:
        return self.serial_number
