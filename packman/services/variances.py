"""
Variance detection: compare computed and counted sales.
"""

import logging

from django.db import transaction
from django.utils import timezone

from packman.exceptions import PackError
from packman.models.variance import Variance
from packman.services import audit

logger = logging.getLogger('packman')


class VarianceDetector:
    """Variance creation and approval."""

    @classmethod
    def detect(cls, shift, pack, expected, actual, reason=''):
        """
        Record a Variance when ``actual`` differs from ``expected``.

        Never approves the variance it creates.

        Returns:
            Variance, or None when the counts agree
        """
        if expected == actual:
            return None

        variance = Variance.objects.create(
            shift=shift,
            pack=pack,
            expected=expected,
            actual=actual,
            reason=reason,
        )
        logger.warning(
            "packman.variance.detected",
            extra={
                "shift_id": shift.pk,
                "pack_number": pack.pack_number,
                "expected": expected,
                "actual": actual,
                "difference": variance.difference,
            },
        )
        return variance

    @classmethod
    def approve(cls, variance, approved_by, reason):
        """
        Resolve a variance with an explanation.

        Raises:
            PackError('REASON_REQUIRED'): If reason is empty
            PackError('VARIANCE_ALREADY_APPROVED'): If already resolved
        """
        if not reason or not reason.strip():
            raise PackError('REASON_REQUIRED')

        with transaction.atomic():
            locked = Variance.objects.select_for_update().get(pk=variance.pk)
            if locked.is_resolved:
                raise PackError('VARIANCE_ALREADY_APPROVED', variance_id=locked.pk)

            locked.approved_by = approved_by
            locked.approved_at = timezone.now()
            locked.reason = reason.strip()
            locked.save(update_fields=['approved_by', 'approved_at', 'reason', 'difference'])

            audit.record(
                locked,
                'UPDATE',
                old_values={'approved_at': None},
                new_values=audit.snapshot(locked, ['approved_at', 'reason']),
                user=approved_by,
            )
            logger.info(
                "packman.variance.approved",
                extra={"variance_id": locked.pk, "difference": locked.difference},
            )
            return locked
