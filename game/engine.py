"""Game engine: pure state transitions for night resolution, day votes and win checks."""

import copy
import dataclasses
from dataclasses import dataclass, field
from typing import Optional

from game.night import NightActionBoard
from game.rules import Phase, Role, Winner
from game.state import Event, EventKind, GameState, Player
from game.voting import VoteTally


@dataclass
class NightOutcome:
    """Result of resolving one night."""

    state: GameState
    messages: list[str] = field(default_factory=list)
    any_effect: bool = False


def _emit(state: GameState, event: Event) -> None:
    """Append event to state (mutates state)."""
    state.events.append(event)


def narrate(
    state: GameState,
    kind: EventKind,
    message: str,
    player_id: Optional[str] = None,
    target_id: Optional[str] = None,
) -> None:
    """Append a narration for the current round and phase (mutates state)."""
    _emit(
        state,
        Event(
            kind=kind,
            round_index=state.round_index,
            phase=state.phase,
            message=message,
            player_id=player_id,
            target_id=target_id,
        ),
    )


def _set_alive(state: GameState, player_id: str, alive: bool) -> None:
    state.players = [
        dataclasses.replace(p, alive=alive) if p.id == player_id else p
        for p in state.players
    ]


def start_game(state: GameState, role_assignments: list[Role]) -> GameState:
    """
    Give each player, in join order, the role at the same index.
    Returns new state; does not mutate input.
    """
    if len(state.players) != len(role_assignments):
        raise ValueError("players and role_assignments must have same length")
    state = copy.deepcopy(state)
    state.players = [
        Player(id=p.id, name=p.name, role=role, alive=True)
        for p, role in zip(state.players, role_assignments)
    ]
    state.winner = None
    narrate(state, EventKind.GAME_START, f"Game started with {len(state.players)} players!")
    return state


def resolve_night(state: GameState, board: NightActionBoard) -> NightOutcome:
    """
    Resolve night in fixed order: mafia kill, then sheriff investigate/shoot,
    then doctor revive of someone who died earlier in this same pass.
    Returns new state; does not mutate input.
    """
    state = copy.deepcopy(state)
    start = len(state.events)
    died_tonight: set[str] = set()
    any_effect = False

    victim_id = board.mafia_victim()
    if victim_id is not None:
        target = state.get_player(victim_id)
        if target is None:
            narrate(state, EventKind.NIGHT_KILL, f"The Mafia went after {state.player_name(victim_id)}, but nobody was there.")
        elif target.alive:
            _set_alive(state, target.id, False)
            died_tonight.add(target.id)
            any_effect = True
            narrate(
                state,
                EventKind.NIGHT_KILL,
                f"Mafia killed {target.name} ({target.role.value})",
                target_id=target.id,
            )

    if board.sheriff_target_id is not None:
        target = state.get_player(board.sheriff_target_id)
        if target is None:
            narrate(state, EventKind.NIGHT_CHECK, f"The Sheriff's action on {state.player_name(board.sheriff_target_id)} had no effect.")
        elif not board.sheriff_shoot:
            verdict = "is" if target.role == Role.MAFIA else "is not"
            narrate(
                state,
                EventKind.NIGHT_CHECK,
                f"Sheriff investigated {target.name}: {target.name} {verdict} Mafia.",
                target_id=target.id,
            )
        elif target.alive:
            _set_alive(state, target.id, False)
            died_tonight.add(target.id)
            any_effect = True
            if target.role == Role.MAFIA:
                narrate(
                    state,
                    EventKind.NIGHT_SHOT,
                    f"Sheriff shot {target.name} ({target.role.value}) - Correct!",
                    target_id=target.id,
                )
            else:
                for sheriff in state.get_players_by_role(Role.SHERIFF):
                    _set_alive(state, sheriff.id, False)
                    died_tonight.add(sheriff.id)
                narrate(
                    state,
                    EventKind.NIGHT_SHOT,
                    f"Sheriff shot {target.name} ({target.role.value}) - Wrong! Sheriff dies too!",
                    target_id=target.id,
                )

    if board.doctor_target_id is not None:
        target = state.get_player(board.doctor_target_id)
        if target is None:
            narrate(state, EventKind.NIGHT_REVIVE, f"The Doctor's visit to {state.player_name(board.doctor_target_id)} had no effect.")
        elif not target.alive and target.id in died_tonight:
            _set_alive(state, target.id, True)
            any_effect = True
            died_tonight.discard(target.id)
            narrate(state, EventKind.NIGHT_REVIVE, f"Doctor revived {target.name}", target_id=target.id)

    if len(state.events) == start:
        narrate(state, EventKind.NIGHT_QUIET, "No actions were performed during the night.")
    return NightOutcome(state=state, messages=[e.message for e in state.events[start:]], any_effect=any_effect)


def apply_vote(state: GameState, tally: VoteTally) -> GameState:
    """
    Eliminate the weighted plurality target (or no one on a tie).
    Returns new state.
    """
    state = copy.deepcopy(state)
    eliminated_id = tally.resolve(state.players)
    if eliminated_id is None:
        narrate(state, EventKind.NO_ELIMINATION, "No one was eliminated - tied vote!")
        return state

    target = state.get_player(eliminated_id)
    if target is None or not target.alive:
        narrate(
            state,
            EventKind.NO_ELIMINATION,
            f"The vote against {state.player_name(eliminated_id)} had no effect; no one was eliminated.",
            target_id=eliminated_id,
        )
        return state

    _set_alive(state, target.id, False)
    narrate(
        state,
        EventKind.ELIMINATED,
        f"{target.name} ({target.role.value}) was eliminated by vote!",
        target_id=target.id,
    )
    return state


def is_game_over(state: GameState) -> bool:
    """True if mafia win or civilians win."""
    return get_winner(state) is not None


def get_winner(state: GameState) -> Optional[Winner]:
    """Return the winning side, or None while the game goes on."""
    alive = state.get_alive_players()
    mafia_alive = sum(1 for p in alive if p.role == Role.MAFIA)
    others_alive = len(alive) - mafia_alive
    if mafia_alive == 0:
        return Winner.CIVILIANS
    if mafia_alive >= others_alive:
        return Winner.MAFIA
    return None


def declare_winner(state: GameState) -> GameState:
    """
    If a side has won, set winner, move to GAME_OVER and narrate it.
    Returns new state (unchanged copy when the game goes on).
    """
    state = copy.deepcopy(state)
    winner = get_winner(state)
    if winner is None:
        return state
    state.winner = winner
    state.phase = Phase.GAME_OVER
    if winner == Winner.CIVILIANS:
        message = "Civilians win! All mafia have been eliminated!"
    else:
        message = "Mafia wins! They now equal or outnumber the innocents!"
    narrate(state, EventKind.GAME_OVER, message)
    return state
