"""
Game model: a scratch-off game and its ticket price.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from packman.models.enums import GameStatus


class Game(models.Model):
    """
    Lottery game, identified by the first 4 digits of a pack barcode.

    Packs reference games with PROTECT: once a pack exists the game
    cannot disappear from under it.
    """

    game_code = models.CharField(
        max_length=4,
        unique=True,
        validators=[RegexValidator(r'^\d{4}$', _('Game code must be 4 digits.'))],
        verbose_name=_('Game code'),
    )
    name = models.CharField(
        max_length=255,
        verbose_name=_('Name'),
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Ticket price'),
    )
    status = models.CharField(
        max_length=20,
        choices=GameStatus.choices,
        default=GameStatus.ACTIVE,
        db_index=True,
        verbose_name=_('Status'),
    )
    tickets_per_pack = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Tickets per pack'),
        help_text=_('Empty = PACKMAN["TICKETS_PER_PACK"].'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Game')
        verbose_name_plural = _('Games')
        ordering = ['game_code']
        constraints = [
            models.CheckConstraint(
                condition=Q(price__gt=0),
                name='game_price_positive',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.game_code} {self.name}"
