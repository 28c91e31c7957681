"""
Packman Game Adapter: game resolution backed by the Game model.

Usage:
    from packman.adapters import get_game_lookup

    game = get_game_lookup().get_game("0001")

Settings:
    PACKMAN = {
        "GAME_LOOKUP": "packman.adapters.games.ModelGameLookup",
    }
"""

from __future__ import annotations

from packman.adapters.loading import AdapterLoader
from packman.models.enums import GameStatus
from packman.models.game import Game
from packman.protocols.games import GameLookup


class ModelGameLookup:
    """Resolve game codes against active Game rows."""

    def get_game(self, game_code: str) -> Game | None:
        return Game.objects.filter(
            game_code=game_code,
            status=GameStatus.ACTIVE,
        ).first()

    def get_games(self, game_codes: list[str]) -> dict[str, Game]:
        games = Game.objects.filter(
            game_code__in=set(game_codes),
            status=GameStatus.ACTIVE,
        )
        return {game.game_code: game for game in games}


_loader = AdapterLoader(
    'GAME_LOOKUP',
    'game lookup',
    'packman.adapters.games.ModelGameLookup',
)


def get_game_lookup() -> GameLookup:
    """
    Return the configured game lookup.

    Raises:
        ImproperlyConfigured: If GAME_LOOKUP is empty or import fails
    """
    return _loader.get()


def reset_game_lookup() -> None:
    """Reset the cached lookup. Useful for testing."""
    _loader.reset()
