"""
Pack reception: batch intake of serialized numbers.

Per-item problems (bad format, unknown game, duplicate pack) are
accumulated into the BatchResult; the batch keeps going. Everything the
call creates is written in one transaction.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from django.db import IntegrityError, transaction

from packman import serials
from packman.adapters.games import get_game_lookup
from packman.conf import packman_settings
from packman.exceptions import PackError
from packman.models.enums import PackStatus
from packman.models.pack import Pack
from packman.services import audit

logger = logging.getLogger('packman')

ROLLED_BACK_REASON = 'Batch rolled back after a concurrent duplicate pack.'


@dataclass(frozen=True)
class ReceptionError:
    """A code that could not be received, and why."""

    code: str
    reason: str

    def as_dict(self) -> dict[str, str]:
        return {'code': self.code, 'reason': self.reason}


@dataclass
class BatchResult:
    """
    Outcome of a reception batch.

    created:    Packs created, in input order
    duplicates: Codes whose pack number already exists for the store
    errors:     Codes rejected for any other reason
    """

    created: list[Pack] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)
    errors: list[ReceptionError] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            'created': [pack.pk for pack in self.created],
            'duplicates': list(self.duplicates),
            'errors': [error.as_dict() for error in self.errors],
        }


@dataclass(frozen=True)
class _Planned:
    """A code that passed the per-item checks and will be created."""

    code: str
    parsed: serials.ParsedSerial
    game: Any
    serial_end: str


class _ConcurrentDuplicate(Exception):
    """Unique constraint hit inside the batch transaction."""

    def __init__(self, position: int):
        self.position = position


class PackReception:
    """Pack intake methods."""

    @classmethod
    def receive_batch(cls, store, codes, received_by=None):
        """
        Receive serialized numbers into a store.

        Codes are processed in order. A pack number repeated within the
        batch, or already present in the store, is a duplicate. If another
        transaction creates the same pack number first, the whole batch
        is rolled back and reported.

        Returns:
            BatchResult

        Raises:
            PackError('EMPTY_BATCH'): No codes given
            PackError('BATCH_TOO_LARGE'): More than MAX_BATCH_SIZE codes
        """
        codes = list(codes)
        if not codes:
            raise PackError('EMPTY_BATCH')

        max_size = packman_settings.MAX_BATCH_SIZE
        if len(codes) > max_size:
            raise PackError('BATCH_TOO_LARGE', max_size=max_size, size=len(codes))

        result = BatchResult()
        try:
            with transaction.atomic():
                plan = cls._classify(store, codes, result)
                cls._create_all(store, plan, received_by, result)
        except _ConcurrentDuplicate as e:
            result = cls._rolled_back(plan, result, e.position)
            logger.warning(
                "packman.reception.rolled_back",
                extra={
                    "store": store.code,
                    "conflict": plan[e.position].code,
                    "size": len(codes),
                },
            )
            return result

        logger.info(
            "packman.reception.batch",
            extra={
                "store": store.code,
                "size": len(codes),
                "created": len(result.created),
                "duplicates": len(result.duplicates),
                "errors": len(result.errors),
            },
        )
        return result

    @classmethod
    def receive(cls, store, code, received_by=None):
        """
        Receive a single serialized number.

        Returns:
            Pack

        Raises:
            PackError('INVALID_FORMAT'): Code is not 24 digits
            PackError('GAME_CODE_NOT_FOUND'): No active game for the code
            PackError('DUPLICATE_PACK'): Pack number already in the store
            PackError('INVALID_SERIAL'): Serial range runs past 999
        """
        parsed = serials.parse(code)
        game = get_game_lookup().get_game(parsed.game_code)
        if game is None:
            raise PackError('GAME_CODE_NOT_FOUND', game_code=parsed.game_code)

        serial_end = cls._serial_end(parsed, game)
        if serial_end is None:
            raise PackError(
                'INVALID_SERIAL',
                serial=parsed.serial_segment,
                pack_number=parsed.pack_number,
            )

        try:
            with transaction.atomic():
                if Pack.objects.filter(store=store, pack_number=parsed.pack_number).exists():
                    raise PackError('DUPLICATE_PACK', pack_number=parsed.pack_number)
                pack = cls._create(store, game, parsed, serial_end, received_by)
        except IntegrityError:
            raise PackError('DUPLICATE_PACK', pack_number=parsed.pack_number) from None

        logger.info(
            "packman.reception.single",
            extra={"store": store.code, "pack_number": pack.pack_number},
        )
        return pack

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _classify(cls, store, codes, result):
        """
        Run the per-item checks over every code.

        Rejections go straight into ``result``; the returned plan lists
        the codes to create, in input order.
        """
        valid = [code for code in codes if serials.is_valid(code)]
        games = get_game_lookup().get_games([serials.parse(code).game_code for code in valid])
        existing = set(
            Pack.objects.filter(
                store=store,
                pack_number__in={serials.parse(code).pack_number for code in valid},
            ).values_list('pack_number', flat=True)
        )
        seen = set()
        plan = []

        for code in codes:
            if not serials.is_valid(code):
                result.errors.append(ReceptionError(code, 'Invalid serial number format'))
                continue

            parsed = serials.parse(code)
            game = games.get(parsed.game_code)
            if game is None:
                result.errors.append(ReceptionError(
                    code, f'Game code {parsed.game_code} not found in database.',
                ))
                continue

            if parsed.pack_number in seen or parsed.pack_number in existing:
                result.duplicates.append(code)
                continue

            serial_end = cls._serial_end(parsed, game)
            if serial_end is None:
                result.errors.append(ReceptionError(
                    code, f'Serial range exceeds 999 for pack {parsed.pack_number}.',
                ))
                continue

            seen.add(parsed.pack_number)
            plan.append(_Planned(code, parsed, game, serial_end))

        return plan

    @classmethod
    def _create_all(cls, store, plan, received_by, result):
        for position, item in enumerate(plan):
            try:
                with transaction.atomic():
                    pack = cls._create(store, item.game, item.parsed, item.serial_end, received_by)
            except IntegrityError:
                raise _ConcurrentDuplicate(position) from None
            result.created.append(pack)

    @staticmethod
    def _rolled_back(plan, partial, position):
        """
        Result for a batch undone by a concurrent duplicate at ``plan[position]``.

        Per-item rejections keep their reasons; every other planned code
        is reported as rolled back.
        """
        result = BatchResult(
            duplicates=list(partial.duplicates) + [plan[position].code],
            errors=list(partial.errors),
        )
        for item in plan[:position] + plan[position + 1:]:
            result.errors.append(ReceptionError(item.code, ROLLED_BACK_REASON))
        return result

    @staticmethod
    def _serial_end(parsed, game):
        """Last serial of the pack, or None if the range runs past 999."""
        size = game.tickets_per_pack or packman_settings.TICKETS_PER_PACK
        try:
            return serials.offset_serial(parsed.serial_segment, size - 1)
        except PackError:
            return None

    @staticmethod
    def _create(store, game, parsed, serial_end, received_by):
        pack = Pack.objects.create(
            store=store,
            game=game,
            pack_number=parsed.pack_number,
            serial_start=parsed.serial_segment,
            serial_end=serial_end,
            status=PackStatus.RECEIVED,
            received_by=received_by,
        )
        audit.record(
            pack,
            'INSERT',
            new_values=audit.snapshot(
                pack, ['pack_number', 'game_id', 'serial_start', 'serial_end', 'status'],
            ),
            user=received_by,
        )
        return pack
