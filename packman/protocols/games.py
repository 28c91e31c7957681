"""
Game Lookup Protocol: resolve barcode game codes to games.

Packman ships a model-backed implementation; a deployment fed by a
state lottery catalog can provide its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from packman.models.game import Game


@runtime_checkable
class GameLookup(Protocol):
    """
    Protocol for game resolution.

    Implementations return only games that packs may be received for
    (active ones); anything else is "not found".
    """

    def get_game(self, game_code: str) -> Game | None:
        """
        Resolve one game code.

        Args:
            game_code: 4-digit code from the barcode

        Returns:
            Game or None if not found
        """
        ...

    def get_games(self, game_codes: list[str]) -> dict[str, Game]:
        """
        Resolve many game codes at once.

        Args:
            game_codes: 4-digit codes

        Returns:
            Dict[game_code, Game] for the codes that were found
        """
        ...
