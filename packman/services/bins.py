"""
Bin assignments: where each pack is, and how it got there.

All state-changing methods run under transaction.atomic() with the pack
row locked.
"""

import logging
from dataclasses import dataclass
from typing import Any

from django.db import transaction

from packman.conf import packman_settings
from packman.exceptions import PackError
from packman.models.bin import Bin
from packman.models.enums import PackStatus
from packman.models.history import PackBinHistory
from packman.models.pack import Pack
from packman.services import audit
from packman.services.refs import pk_of

logger = logging.getLogger('packman')

UNMOVABLE_STATUSES = (PackStatus.DEPLETED, PackStatus.RETURNED)


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a bin movement."""

    pack: Pack
    history: PackBinHistory

    @property
    def history_id(self) -> int:
        return self.history.pk

    def as_dict(self) -> dict[str, Any]:
        return {'pack': self.pack.pk, 'history_id': self.history.pk}


@dataclass(frozen=True)
class BinTemplate:
    """
    One bin of a store layout.

    Validated once in from_dict(); services trust instances afterwards.
    """

    name: str
    display_order: int
    location: str = ''
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'BinTemplate':
        """
        Build a template from untyped input (JSON, forms).

        Raises:
            PackError('INVALID_TEMPLATE'): If a field is missing or has the wrong type
        """
        name = data.get('name')
        if not isinstance(name, str) or not name.strip() or len(name) > 100:
            raise PackError('INVALID_TEMPLATE', field='name', value=name)

        display_order = data.get('display_order')
        if isinstance(display_order, bool) or not isinstance(display_order, int) or display_order < 0:
            raise PackError('INVALID_TEMPLATE', field='display_order', value=display_order)

        location = data.get('location', '')
        if location is None:
            location = ''
        if not isinstance(location, str) or len(location) > 255:
            raise PackError('INVALID_TEMPLATE', field='location', value=location)

        is_active = data.get('is_active', True)
        if not isinstance(is_active, bool):
            raise PackError('INVALID_TEMPLATE', field='is_active', value=is_active)

        return cls(
            name=name.strip(),
            display_order=display_order,
            location=location,
            is_active=is_active,
        )


class BinAssignments:
    """Pack placement and bin layout methods."""

    @classmethod
    def move_pack(cls, pack, target_bin, moved_by=None, reason=None):
        """
        Place a pack in a bin and append a history row.

        The pack update, the history row and the audit entry commit
        together or not at all.

        Returns:
            MoveResult(pack, history)

        Raises:
            PackError('FOREIGN_KEY_VIOLATION'): Pack or bin missing, or different stores
            PackError('REASON_TOO_LONG'): Reason over MOVE_REASON_MAX_LENGTH
            PackError('BIN_INACTIVE'): Target bin is deactivated
            PackError('INVALID_STATUS'): Pack is DEPLETED or RETURNED
            PackError('BIN_OCCUPIED'): Another ACTIVE pack is in the target bin
        """
        reason = reason or ''
        max_length = packman_settings.MOVE_REASON_MAX_LENGTH
        if len(reason) > max_length:
            raise PackError('REASON_TOO_LONG', max_length=max_length, length=len(reason))

        with transaction.atomic():
            try:
                locked_pack = Pack.objects.select_for_update().get(pk=pk_of(pack))
            except Pack.DoesNotExist:
                raise PackError('FOREIGN_KEY_VIOLATION', pack_id=pk_of(pack)) from None

            try:
                bin = Bin.objects.get(pk=pk_of(target_bin))
            except Bin.DoesNotExist:
                raise PackError('FOREIGN_KEY_VIOLATION', bin_id=pk_of(target_bin)) from None

            if bin.store_id != locked_pack.store_id:
                raise PackError(
                    'FOREIGN_KEY_VIOLATION',
                    message='Pack and bin must belong to the same store',
                    pack_id=locked_pack.pk,
                    bin_id=bin.pk,
                )

            if not bin.is_active:
                raise PackError('BIN_INACTIVE', bin_id=bin.pk)

            if locked_pack.status in UNMOVABLE_STATUSES:
                raise PackError(
                    'INVALID_STATUS',
                    current=locked_pack.status,
                    expected=[PackStatus.RECEIVED, PackStatus.ACTIVE],
                )

            if locked_pack.status == PackStatus.ACTIVE:
                occupant = (
                    Pack.objects.active().in_bin(bin)
                    .exclude(pk=locked_pack.pk)
                    .first()
                )
                if occupant is not None:
                    raise PackError(
                        'BIN_OCCUPIED',
                        bin_id=bin.pk,
                        occupant_pack_number=occupant.pack_number,
                    )

            old_bin_id = locked_pack.current_bin_id
            locked_pack.current_bin = bin
            locked_pack.save(update_fields=['current_bin', 'updated_at'])

            history = PackBinHistory.objects.create(
                pack=locked_pack,
                bin=bin,
                moved_by=moved_by,
                reason=reason,
            )

            audit.record(
                locked_pack,
                'UPDATE',
                old_values={'current_bin_id': old_bin_id},
                new_values={'current_bin_id': bin.pk},
                user=moved_by,
            )

            logger.info(
                "packman.pack.moved",
                extra={
                    "pack_id": locked_pack.pk,
                    "pack_number": locked_pack.pack_number,
                    "from_bin": old_bin_id,
                    "to_bin": bin.pk,
                    "history_id": history.pk,
                },
            )
            return MoveResult(pack=locked_pack, history=history)

    @classmethod
    def history(cls, pack):
        """Every placement of a pack, oldest first."""
        return (
            PackBinHistory.objects
            .filter(pack_id=pk_of(pack))
            .select_related('bin', 'moved_by')
            .order_by('moved_at', 'pk')
        )

    @classmethod
    def configure_bins(cls, store, templates):
        """
        Apply a bin layout to a store, matching bins by display_order.

        Bins missing from the layout are deactivated, never deleted, so
        their history survives.

        Returns:
            List of Bin in layout order

        Raises:
            PackError('INVALID_TEMPLATE'): Malformed or repeated display_order
            PackError('BIN_OCCUPIED'): Layout drops or deactivates a bin holding an ACTIVE pack
        """
        layout = [
            t if isinstance(t, BinTemplate) else BinTemplate.from_dict(t)
            for t in templates
        ]
        orders = [t.display_order for t in layout]
        if len(orders) != len(set(orders)):
            raise PackError('INVALID_TEMPLATE', field='display_order', value=orders)

        with transaction.atomic():
            existing = {
                b.display_order: b
                for b in Bin.objects.select_for_update().filter(store=store)
            }

            bins = []
            for template in sorted(layout, key=lambda t: t.display_order):
                bin = existing.pop(template.display_order, None)
                if bin is None:
                    bin = Bin.objects.create(
                        store=store,
                        name=template.name,
                        location=template.location,
                        display_order=template.display_order,
                        is_active=template.is_active,
                    )
                else:
                    if bin.is_active and not template.is_active:
                        cls._check_vacant(bin)
                    bin.name = template.name
                    bin.location = template.location
                    bin.is_active = template.is_active
                    bin.save(update_fields=['name', 'location', 'is_active', 'updated_at'])
                bins.append(bin)

            for bin in existing.values():
                if not bin.is_active:
                    continue
                cls._check_vacant(bin)
                bin.is_active = False
                bin.save(update_fields=['is_active', 'updated_at'])

            logger.info(
                "packman.bins.configured",
                extra={"store": store.code, "bins": len(bins)},
            )
            return bins

    @staticmethod
    def _check_vacant(bin):
        if Pack.objects.active().in_bin(bin).exists():
            raise PackError('BIN_OCCUPIED', bin_id=bin.pk)
