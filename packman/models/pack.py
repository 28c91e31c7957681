"""
Pack model: a bundle of sequentially serialized tickets.
"""

from django.conf import settings
from django.core.validators import RegexValidator
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from packman.models.enums import DepletionReason, PackStatus

serial_validator = RegexValidator(r'^\d{3}$', _('Serial must be 3 digits.'))


class PackQuerySet(models.QuerySet):
    """Custom QuerySet for Pack with lifecycle filters."""

    def for_store(self, store):
        return self.filter(store=store)

    def active(self):
        return self.filter(status=PackStatus.ACTIVE)

    def in_bin(self, bin):
        return self.filter(current_bin=bin)

    def depleted_in(self, shift):
        """Packs that became DEPLETED during ``shift``."""
        return self.filter(status=PackStatus.DEPLETED, depleted_shift=shift)


class Pack(models.Model):
    """
    Inventory unit of a game, tracked from reception to depletion/return.

    LIFECYCLE:

        RECEIVED ──activate()──► ACTIVE ──close at serial_end / deplete()──► DEPLETED
            │                      │
            └──────return_pack()───┴──────────────────────────────────────► RETURNED

    Each state owns its timestamp fields (activated_*, depleted_*,
    returned_*). They are set once, when the pack enters the state, and
    never cleared. Status changes go through the service layer only.
    """

    store = models.ForeignKey(
        'packman.Store',
        on_delete=models.CASCADE,
        related_name='packs',
        verbose_name=_('Store'),
    )
    game = models.ForeignKey(
        'packman.Game',
        on_delete=models.PROTECT,
        related_name='packs',
        verbose_name=_('Game'),
    )
    pack_number = models.CharField(
        max_length=7,
        validators=[RegexValidator(r'^\d{7}$', _('Pack number must be 7 digits.'))],
        verbose_name=_('Pack number'),
    )
    serial_start = models.CharField(
        max_length=3,
        validators=[serial_validator],
        verbose_name=_('First serial'),
    )
    serial_end = models.CharField(
        max_length=3,
        validators=[serial_validator],
        verbose_name=_('Last serial'),
    )
    status = models.CharField(
        max_length=20,
        choices=PackStatus.choices,
        default=PackStatus.RECEIVED,
        db_index=True,
        verbose_name=_('Status'),
    )
    current_bin = models.ForeignKey(
        'packman.Bin',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='packs',
        verbose_name=_('Current bin'),
    )

    # RECEIVED
    received_at = models.DateTimeField(default=timezone.now, verbose_name=_('Received at'))
    received_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Received by'),
    )

    # ACTIVE
    activated_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Activated at'))
    activated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Activated by'),
    )
    activated_shift = models.ForeignKey(
        'packman.Shift',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Activated in shift'),
    )

    # DEPLETED
    depleted_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Depleted at'))
    depleted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Depleted by'),
    )
    depleted_shift = models.ForeignKey(
        'packman.Shift',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Depleted in shift'),
    )
    depletion_reason = models.CharField(
        max_length=20,
        choices=DepletionReason.choices,
        blank=True,
        default='',
        verbose_name=_('Depletion reason'),
    )

    # RETURNED
    returned_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Returned at'))
    returned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Returned by'),
    )
    returned_shift = models.ForeignKey(
        'packman.Shift',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Returned in shift'),
    )
    return_reason = models.TextField(blank=True, default='', verbose_name=_('Return reason'))
    last_sold_serial = models.CharField(
        max_length=3,
        blank=True,
        default='',
        validators=[serial_validator],
        verbose_name=_('Last sold serial'),
    )
    tickets_sold_on_return = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Tickets sold on return'),
    )

    metadata = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PackQuerySet.as_manager()

    class Meta:
        verbose_name = _('Pack')
        verbose_name_plural = _('Packs')
        ordering = ['store', 'pack_number']
        constraints = [
            models.UniqueConstraint(
                fields=['store', 'pack_number'],
                name='unique_pack_number_per_store',
            ),
            models.CheckConstraint(
                condition=Q(serial_start__lte=F('serial_end')),
                name='pack_serial_range_ordered',
            ),
            models.CheckConstraint(
                condition=Q(activated_at__isnull=True) | Q(activated_at__gte=F('received_at')),
                name='pack_activated_after_received',
            ),
            models.CheckConstraint(
                condition=Q(depleted_at__isnull=True) | Q(depleted_at__gte=F('activated_at')),
                name='pack_depleted_after_activated',
            ),
            models.CheckConstraint(
                condition=Q(returned_at__isnull=True) | Q(returned_at__gte=F('received_at')),
                name='pack_returned_after_received',
            ),
        ]
        indexes = [
            models.Index(fields=['store', 'status'], name='packman_pack_store_status_idx'),
            models.Index(fields=['current_bin', 'status'], name='packman_pack_bin_status_idx'),
            models.Index(fields=['depleted_shift'], name='packman_pack_depl_shift_idx'),
        ]

    @property
    def is_active(self) -> bool:
        return self.status == PackStatus.ACTIVE

    @property
    def ticket_count(self) -> int:
        """Tickets in the full serial range."""
        from packman.counting import pack_ticket_count
        return pack_ticket_count(self)

    def __str__(self) -> str:
        return f"Pack {self.pack_number} ({self.serial_start}-{self.serial_end}) [{self.status}]"
