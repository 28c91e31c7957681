"""
Bin model: physical slot that holds one active pack.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from packman.models.enums import PackStatus


class Bin(models.Model):
    """
    Store-local dispenser slot.

    A bin holds at most one ACTIVE pack. That rule is enforced by the
    services that place packs (BinAssignments, PackLifecycle), not here.
    """

    store = models.ForeignKey(
        'packman.Store',
        on_delete=models.CASCADE,
        related_name='bins',
        verbose_name=_('Store'),
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_('Name'),
    )
    location = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name=_('Location'),
    )
    display_order = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Display order'),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Active'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Bin')
        verbose_name_plural = _('Bins')
        ordering = ['store', 'display_order']
        indexes = [
            models.Index(fields=['store', 'display_order'], name='packman_bin_store_order_idx'),
        ]

    @property
    def active_pack(self):
        """The ACTIVE pack currently in this bin, if any."""
        return self.packs.filter(status=PackStatus.ACTIVE).first()

    def __str__(self) -> str:
        return f"{self.name} [{self.store.code}]"
