"""
Variance model: disagreement between computed and counted sales.
"""

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class VarianceQuerySet(models.QuerySet):
    """Custom QuerySet for Variance."""

    def unresolved(self):
        return self.filter(approved_at__isnull=True)

    def resolved(self):
        return self.filter(approved_at__isnull=False)


class Variance(models.Model):
    """
    Signed difference between expected and actual tickets for a pack.

    difference = actual - expected
        > 0: overage (more sold than the serials explain)
        < 0: shortage

    Stays unresolved until a manager approves it with a reason.
    """

    shift = models.ForeignKey(
        'packman.Shift',
        on_delete=models.CASCADE,
        related_name='variances',
        verbose_name=_('Shift'),
    )
    pack = models.ForeignKey(
        'packman.Pack',
        on_delete=models.CASCADE,
        related_name='variances',
        verbose_name=_('Pack'),
    )
    expected = models.IntegerField(verbose_name=_('Expected'))
    actual = models.IntegerField(verbose_name=_('Actual'))
    difference = models.IntegerField(verbose_name=_('Difference'))
    reason = models.TextField(blank=True, default='', verbose_name=_('Reason'))

    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Approved by'),
    )
    approved_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Approved at'))
    created_at = models.DateTimeField(default=timezone.now)

    objects = VarianceQuerySet.as_manager()

    class Meta:
        verbose_name = _('Variance')
        verbose_name_plural = _('Variances')
        ordering = ['created_at', 'pk']
        constraints = [
            models.UniqueConstraint(
                fields=['shift', 'pack'],
                name='unique_variance_per_shift_pack',
            ),
            models.CheckConstraint(
                condition=Q(difference=F('actual') - F('expected')),
                name='variance_difference_consistent',
            ),
        ]

    def save(self, *args, **kwargs):
        self.difference = self.actual - self.expected
        super().save(*args, **kwargs)

    @property
    def is_resolved(self) -> bool:
        return self.approved_at is not None

    def __str__(self) -> str:
        sign = '+' if self.difference > 0 else ''
        return f"{self.pack.pack_number}: {sign}{self.difference} (shift {self.shift_id})"
