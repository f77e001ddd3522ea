"""Phase state machine for one room: the only entry point for player intents.

Every operation returns True when the intent was accepted and changed the
room, and False when it was ignored (wrong phase, unknown player, repeated
submission). Ignored intents leave the state untouched and should not be
broadcast.
"""

import logging
import random
from typing import Optional

from game import engine
from game.config import GameConfig
from game.engine import narrate
from game.night import NightActionBoard
from game.roles import assign_roles
from game.rules import NIGHT_PHASES, Phase, Role
from game.state import EventKind, GameState, Player
from game.voting import VoteTally

logger = logging.getLogger(__name__)


class GamePhaseMachine:
    """Owns one room's GameState, night action board and vote tally."""

    def __init__(
        self,
        game_id: str,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or GameConfig()
        self._rng = rng or random.Random()
        self.state = GameState(game_id=game_id)
        self.board = NightActionBoard()
        self.tally = VoteTally()
        narrate(self.state, EventKind.GAME_CREATED, f"Game created! ID: {game_id}")

    @property
    def game_id(self) -> str:
        return self.state.game_id

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def snapshot(self) -> GameState:
        return self.state

    def is_empty(self) -> bool:
        return not self.state.players

    def role_assignments(self) -> list[tuple[str, Role, bool]]:
        """(player_id, role, is_mayor) for every player; empty before the game starts."""
        if self.state.phase == Phase.LOBBY:
            return []
        return [(p.id, p.role, p.is_mayor) for p in self.state.players]

    def _ignore(self, intent: str, reason: str) -> bool:
        logger.debug("Ignoring %s in room %s (%s): %s", intent, self.game_id, self.state.phase.value, reason)
        return False

    def _expect(self, intent: str, *phases: Phase) -> bool:
        if self.state.phase in phases:
            return True
        return self._ignore(intent, "wrong phase")

    # Lobby and membership

    def join(self, player_id: str, name: str) -> bool:
        """Add a player in the lobby; a re-join by the same id renames the player in place."""
        if not self._expect("join", Phase.LOBBY):
            return False
        existing = self.state.get_player(player_id)
        if existing is None:
            self.state.players.append(Player(id=player_id, name=name))
            narrate(self.state, EventKind.PLAYER_JOINED, f"{name} joined the game", player_id=player_id)
            return True
        if existing.name == name:
            return self._ignore("join", "already joined")
        self.state.players = [
            Player(id=p.id, name=name, role=p.role, alive=p.alive) if p.id == player_id else p
            for p in self.state.players
        ]
        narrate(self.state, EventKind.PLAYER_JOINED, f"{existing.name} is now known as {name}", player_id=player_id)
        return True

    def leave(self, player_id: str) -> bool:
        """Remove a disconnected player in any phase; never advances the phase."""
        player = self.state.get_player(player_id)
        if player is None:
            return self._ignore("leave", "not in room")
        self.state.players = [p for p in self.state.players if p.id != player_id]
        self.board.mafia_targets.pop(player_id, None)
        self.tally.votes.pop(player_id, None)
        narrate(self.state, EventKind.PLAYER_LEFT, f"{player.name} disconnected", player_id=player_id)
        return True

    def start_game(self) -> bool:
        if not self._expect("start_game", Phase.LOBBY):
            return False
        count = len(self.state.players)
        if count < self.config.minimum_players or count < len(self.config.role_pool):
            return self._ignore("start_game", f"{count} players, need {self.config.minimum_players}")
        roles = assign_roles(count, self.config.role_pool, self._rng)
        self.state = engine.start_game(self.state, roles)
        logger.info("Room %s started with %d players", self.game_id, count)
        self._begin_night()
        return True

    # Night

    def _begin_night(self) -> None:
        self.board.reset()
        self.tally.reset()
        self.state.round_index += 1
        self.state.phase = Phase.NIGHT_MAFIA
        narrate(self.state, EventKind.PHASE_CHANGE, f"Night {self.state.round_index} phase begins...")

    def submit_mafia_target(self, player_id: str, target_id: str) -> bool:
        """
        Single-mafia pool: any submission is the mafia's choice and closes the sub-phase.
        Multi-mafia pool: only living mafia members count; closes once each has chosen.
        """
        if not self._expect("mafia_action", Phase.NIGHT_MAFIA):
            return False
        living_mafia = [p.id for p in self.state.get_players_by_role(Role.MAFIA)]
        if self.config.mafia_slots <= 1:
            member_id = living_mafia[0] if living_mafia else player_id
        elif player_id in living_mafia:
            member_id = player_id
        else:
            return self._ignore("mafia_action", f"{player_id} is not a living mafia member")
        if not self.board.submit_mafia_target(member_id, target_id):
            return self._ignore("mafia_action", "same target already submitted")
        if self.board.mafia_complete(living_mafia):
            narrate(self.state, EventKind.NIGHT_ACTION, "The Mafia has chosen a target.")
            self.state.phase = Phase.NIGHT_SHERIFF
        return True

    def submit_sheriff_action(self, player_id: str, target_id: str, shoot: bool) -> bool:
        if not self._expect("sheriff_action", Phase.NIGHT_SHERIFF):
            return False
        self.board.submit_sheriff_action(target_id, shoot)
        narrate(
            self.state,
            EventKind.NIGHT_ACTION,
            "The Sheriff has taken aim." if shoot else "The Sheriff has investigated.",
            player_id=player_id,
        )
        self.state.phase = Phase.NIGHT_DOCTOR
        return True

    def submit_doctor_action(self, player_id: str, target_id: str) -> bool:
        if not self._expect("doctor_action", Phase.NIGHT_DOCTOR):
            return False
        self.board.submit_doctor_action(target_id)
        narrate(self.state, EventKind.NIGHT_ACTION, "The Doctor has made a visit. Night results are ready.", player_id=player_id)
        self.state.phase = Phase.NIGHT_RESULTS
        return True

    def skip_to_voting(self) -> bool:
        if not self._expect("skip_to_voting", *NIGHT_PHASES):
            return False
        self.board.reset()
        self.tally.reset()
        self.state.phase = Phase.DAY_VOTING
        narrate(self.state, EventKind.PHASE_CHANGE, "Night actions skipped. Voting begins!")
        return True

    def process_night(self) -> bool:
        if not self._expect("process_night", Phase.NIGHT_RESULTS):
            return False
        outcome = engine.resolve_night(self.state, self.board)
        logger.debug("Room %s night %d resolved, any effect: %s", self.game_id, self.state.round_index, outcome.any_effect)
        self.board.reset()
        self.state = engine.declare_winner(outcome.state)
        if self.state.winner is not None:
            logger.info("Room %s over after night %d: %s win", self.game_id, self.state.round_index, self.state.winner.value)
            return True
        self.tally.reset()
        self.state.phase = Phase.DAY_DISCUSSION
        narrate(self.state, EventKind.PHASE_CHANGE, f"Day {self.state.round_index} phase begins! Discussion time!")
        return True

    # Day

    def start_voting(self) -> bool:
        if not self._expect("start_voting", Phase.DAY_DISCUSSION):
            return False
        self.tally.reset()
        self.state.phase = Phase.DAY_VOTING
        narrate(self.state, EventKind.PHASE_CHANGE, "Discussion is over. Voting begins!")
        return True

    def cast_vote(self, voter_id: str, target_id: str) -> bool:
        """Record a living player's vote; resolves the day once every living player has voted."""
        if not self._expect("vote", Phase.DAY_VOTING):
            return False
        voter = self.state.get_player(voter_id)
        if voter is None or not voter.alive:
            return self._ignore("vote", f"{voter_id} cannot vote")
        if not self.tally.cast_vote(voter_id, target_id):
            return self._ignore("vote", "same vote already cast")
        narrate(
            self.state,
            EventKind.VOTE,
            f"{voter.name} voted for {self.state.player_name(target_id)}",
            player_id=voter_id,
            target_id=target_id,
        )
        if self.tally.is_complete(p.id for p in self.state.get_alive_players()):
            self._resolve_votes()
        return True

    def skip_voting(self) -> bool:
        """Force resolution with whatever votes exist."""
        if not self._expect("skip_voting", Phase.DAY_VOTING):
            return False
        self._resolve_votes()
        return True

    def _resolve_votes(self) -> None:
        state = engine.apply_vote(self.state, self.tally)
        self.tally.reset()
        self.state = engine.declare_winner(state)
        if self.state.winner is not None:
            logger.info("Room %s over after day %d: %s win", self.game_id, self.state.round_index, self.state.winner.value)
            return
        self._begin_night()
