"""In-memory room registry: one GamePhaseMachine per room id."""

import logging
import random
from typing import Optional

from game.config import GameConfig
from game.machine import GamePhaseMachine

logger = logging.getLogger(__name__)


class GameStore:
    """Creates a room on first join and discards it once its roster is empty."""

    def __init__(self, config: Optional[GameConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or GameConfig()
        self._rng = rng
        self._games: dict[str, GamePhaseMachine] = {}

    def get(self, game_id: str) -> Optional[GamePhaseMachine]:
        return self._games.get(game_id)

    def get_or_create(self, game_id: str) -> GamePhaseMachine:
        game = self._games.get(game_id)
        if game is None:
            game = GamePhaseMachine(game_id, config=self.config, rng=self._rng)
            self._games[game_id] = game
            logger.info("Created room %s", game_id)
        return game

    def discard_if_empty(self, game_id: str) -> bool:
        """Remove the room when nobody is left in it. Returns True if removed."""
        game = self._games.get(game_id)
        if game is not None and game.is_empty():
            del self._games[game_id]
            logger.info("Removed empty room %s", game_id)
            return True
        return False

    def list_games(self) -> list[str]:
        return list(self._games.keys())

    def __contains__(self, game_id: str) -> bool:
        return game_id in self._games

    def __len__(self) -> int:
        return len(self._games)
