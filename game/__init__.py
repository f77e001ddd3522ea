"""Game engine for Mafia rooms."""

from game.config import GameConfig, load_config
from game.engine import (
    apply_vote,
    declare_winner,
    get_winner,
    is_game_over,
    resolve_night,
    start_game,
)
from game.machine import GamePhaseMachine
from game.night import NightActionBoard
from game.roles import assign_roles
from game.rules import Phase, Role, Winner
from game.state import Event, GameState, Player
from game.voting import VoteTally

__all__ = [
    "apply_vote",
    "declare_winner",
    "get_winner",
    "is_game_over",
    "resolve_night",
    "start_game",
    "assign_roles",
    "GameConfig",
    "load_config",
    "GamePhaseMachine",
    "NightActionBoard",
    "VoteTally",
    "Role",
    "Phase",
    "Winner",
    "GameState",
    "Player",
    "Event",
]
