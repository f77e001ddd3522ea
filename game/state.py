"""Game state types for Mafia rooms."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from game.rules import UNKNOWN_PLAYER_NAME, Phase, Role, Winner


@dataclass(frozen=True)
class Player:
    """A player in the game."""

    id: str
    name: str
    role: Role = Role.UNASSIGNED
    alive: bool = True

    @property
    def is_mayor(self) -> bool:
        return self.role == Role.MAYOR


class EventKind(str, Enum):
    """Type of game event."""

    GAME_CREATED = "game_created"
    PLAYER_JOINED = "player_joined"
    PLAYER_LEFT = "player_left"
    GAME_START = "game_start"
    NIGHT_ACTION = "night_action"
    NIGHT_KILL = "night_kill"
    NIGHT_CHECK = "night_check"
    NIGHT_SHOT = "night_shot"
    NIGHT_REVIVE = "night_revive"
    NIGHT_QUIET = "night_quiet"
    VOTE = "vote"
    ELIMINATED = "eliminated"
    NO_ELIMINATION = "no_elimination"
    PHASE_CHANGE = "phase_change"
    GAME_OVER = "game_over"


@dataclass
class Event:
    """A single narration entry in the shared log."""

    kind: EventKind
    round_index: int
    phase: Phase
    message: str
    player_id: Optional[str] = None
    target_id: Optional[str] = None


@dataclass
class GameState:
    """Full state of one room."""

    game_id: str
    players: list[Player] = field(default_factory=list)
    phase: Phase = Phase.LOBBY
    round_index: int = 0
    events: list[Event] = field(default_factory=list)
    winner: Optional[Winner] = None

    @property
    def log(self) -> list[str]:
        """Narration strings in emission order."""
        return [e.message for e in self.events]

    def get_alive_players(self) -> list[Player]:
        """Return list of alive players."""
        return [p for p in self.players if p.alive]

    def get_player(self, player_id: str) -> Optional[Player]:
        """Return player by id or None."""
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def get_players_by_role(self, role: Role) -> list[Player]:
        """Return alive players with the given role."""
        return [p for p in self.players if p.alive and p.role == role]

    def player_name(self, player_id: Optional[str]) -> str:
        player = self.get_player(player_id) if player_id else None
        return player.name if player else UNKNOWN_PLAYER_NAME
