"""
PackBinHistory model: append-only trail of pack placements.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class PackBinHistory(models.Model):
    """
    Immutable record of a pack being placed in a bin.

    Rules:
    - NEVER update() or delete()
    - Rows go away only with their pack or bin (CASCADE)
    - moved_at is assigned by the server, not by callers
    """

    pack = models.ForeignKey(
        'packman.Pack',
        on_delete=models.CASCADE,
        related_name='bin_history',
        verbose_name=_('Pack'),
    )
    bin = models.ForeignKey(
        'packman.Bin',
        on_delete=models.CASCADE,
        related_name='pack_history',
        verbose_name=_('Bin'),
    )
    moved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Moved by'),
    )
    moved_at = models.DateTimeField(
        default=timezone.now,
        editable=False,
        db_index=True,
        verbose_name=_('Moved at'),
    )
    reason = models.CharField(
        max_length=500,
        blank=True,
        default='',
        verbose_name=_('Reason'),
    )

    class Meta:
        verbose_name = _('Pack movement')
        verbose_name_plural = _('Pack movements')
        ordering = ['moved_at', 'pk']
        indexes = [
            models.Index(fields=['pack', 'moved_at'], name='packman_hist_pack_moved_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "Pack movements are immutable. "
                "Record a new movement instead."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError(
            "Pack movements are immutable. "
            "They are removed only together with their pack or bin."
        )

    def __str__(self) -> str:
        return f"{self.pack.pack_number} → {self.bin.name} @ {self.moved_at:%Y-%m-%d %H:%M}"
