"""Tests for the room phase machine."""

import dataclasses
import random

from game.config import GameConfig
from game.machine import GamePhaseMachine
from game.rules import DOUBLE_MAFIA_POOL, Phase, Role, Winner


def _lobby(names=("A", "B", "C", "D"), config: GameConfig | None = None) -> GamePhaseMachine:
    game = GamePhaseMachine("room1", config=config, rng=random.Random(0))
    for name in names:
        assert game.join(name.lower(), name)
    return game


def _force_roles(game: GamePhaseMachine, roles: dict[str, Role]) -> None:
    """Pin roles after start so scenarios do not depend on the shuffle."""
    game.state.players = [dataclasses.replace(p, role=roles[p.id]) for p in game.state.players]


def _started(roles: dict[str, Role], config: GameConfig | None = None) -> GamePhaseMachine:
    game = _lobby(tuple(pid.upper() for pid in roles), config=config)
    assert game.start_game()
    _force_roles(game, roles)
    return game


FOUR = {"a": Role.SHERIFF, "b": Role.DOCTOR, "c": Role.MAFIA, "d": Role.MAYOR}


def test_new_room_is_lobby():
    game = GamePhaseMachine("room1")
    assert game.phase == Phase.LOBBY
    assert game.is_empty()
    assert game.state.log == ["Game created! ID: room1"]


def test_start_requires_minimum_players():
    game = _lobby(("A", "B", "C"))
    log_before = list(game.state.log)
    assert not game.start_game()
    assert game.phase == Phase.LOBBY
    assert game.state.log == log_before
    assert all(p.role == Role.UNASSIGNED for p in game.state.players)


def test_start_assigns_roles_and_enters_night():
    game = _lobby()
    assert game.start_game()
    assert game.phase == Phase.NIGHT_MAFIA
    assert game.state.round_index == 1
    roles = sorted(p.role.value for p in game.state.players)
    assert roles == sorted(r.value for r in (Role.MAFIA, Role.SHERIFF, Role.DOCTOR, Role.MAYOR))
    assert sum(1 for p in game.state.players if p.is_mayor) == 1
    assignments = game.role_assignments()
    assert [pid for pid, _, _ in assignments] == ["a", "b", "c", "d"]


def test_role_assignments_empty_in_lobby():
    assert _lobby().role_assignments() == []


def test_start_twice_is_ignored():
    game = _lobby()
    assert game.start_game()
    assert not game.start_game()


def test_join_only_in_lobby():
    game = _lobby()
    game.start_game()
    assert not game.join("e", "E")
    assert game.state.get_player("e") is None


def test_rejoin_renames_in_place():
    game = _lobby()
    assert not game.join("b", "B")
    assert game.join("b", "Bobby")
    assert [p.name for p in game.state.players] == ["A", "Bobby", "C", "D"]
    assert len(game.state.players) == 4


def test_wrong_phase_intents_are_ignored():
    game = _lobby()
    log_before = list(game.state.log)
    assert not game.submit_mafia_target("a", "b")
    assert not game.submit_sheriff_action("a", "b", True)
    assert not game.submit_doctor_action("a", "b")
    assert not game.process_night()
    assert not game.start_voting()
    assert not game.cast_vote("a", "b")
    assert not game.skip_voting()
    assert not game.skip_to_voting()
    assert game.phase == Phase.LOBBY
    assert game.state.log == log_before


def test_end_to_end_single_mafia():
    game = _started(FOUR)
    assert game.phase == Phase.NIGHT_MAFIA

    # Single-mafia pool: whoever submits speaks for the mafia
    assert game.submit_mafia_target("a", "b")
    assert game.phase == Phase.NIGHT_SHERIFF
    assert game.submit_sheriff_action("a", "c", shoot=False)
    assert game.phase == Phase.NIGHT_DOCTOR
    assert game.submit_doctor_action("b", "d")
    assert game.phase == Phase.NIGHT_RESULTS

    assert game.process_night()
    assert game.phase == Phase.DAY_DISCUSSION
    assert not game.state.get_player("b").alive
    assert any("Mafia killed B" in line for line in game.state.log)
    assert any("C is Mafia" in line for line in game.state.log)

    assert game.start_voting()
    assert game.phase == Phase.DAY_VOTING
    assert game.cast_vote("a", "c")
    assert game.cast_vote("c", "a")
    assert game.phase == Phase.DAY_VOTING
    assert game.cast_vote("d", "c")  # mayor: c gets 3, a gets 1

    assert not game.state.get_player("c").alive
    assert game.phase == Phase.GAME_OVER
    assert game.state.winner == Winner.CIVILIANS
    assert not game.cast_vote("a", "d")
    assert not game.skip_voting()


def test_night_kill_can_end_game():
    game = _started(FOUR)
    game.submit_mafia_target("c", "a")
    game.submit_sheriff_action("a", "b", shoot=True)  # dead sheriff still fires; doctor dies
    game.submit_doctor_action("b", "d")
    game.process_night()
    # mafia vs mayor alone
    assert game.state.winner == Winner.MAFIA
    assert game.phase == Phase.GAME_OVER


def test_tied_vote_loops_to_next_night():
    game = _started(FOUR)
    assert game.skip_to_voting()
    assert game.cast_vote("a", "c")
    assert game.cast_vote("c", "a")
    assert game.skip_voting()
    assert all(p.alive for p in game.state.players)
    assert "No one was eliminated - tied vote!" in game.state.log
    assert game.phase == Phase.NIGHT_MAFIA
    assert game.state.round_index == 2
    assert game.tally.votes == {}
    assert game.board.is_empty()


def test_skip_to_voting_from_any_night_phase():
    game = _started(FOUR)
    game.submit_mafia_target("c", "a")
    game.submit_sheriff_action("a", "c", shoot=True)
    assert game.phase == Phase.NIGHT_DOCTOR
    assert game.skip_to_voting()
    assert game.phase == Phase.DAY_VOTING
    assert game.board.is_empty()
    assert all(p.alive for p in game.state.players)


def test_discussion_requires_explicit_start_voting():
    game = _started(FOUR)
    game.submit_mafia_target("c", "b")
    game.submit_sheriff_action("a", "d", shoot=False)
    game.submit_doctor_action("b", "a")
    game.process_night()
    assert game.phase == Phase.DAY_DISCUSSION
    assert not game.cast_vote("a", "c")
    assert not game.skip_voting()
    assert game.start_voting()
    assert game.cast_vote("a", "c")


def test_dead_player_cannot_vote():
    game = _started(FOUR)
    game.submit_mafia_target("c", "b")
    game.submit_sheriff_action("a", "d", shoot=False)
    game.submit_doctor_action("b", "a")
    game.process_night()
    game.start_voting()
    assert not game.cast_vote("b", "c")
    assert not game.cast_vote("stranger", "c")
    assert game.tally.votes == {}


def test_repeated_vote_is_not_a_change():
    game = _started(FOUR)
    game.skip_to_voting()
    assert game.cast_vote("a", "c")
    assert not game.cast_vote("a", "c")
    assert sum(1 for line in game.state.log if line == "A voted for C") == 1


def test_vote_for_unknown_player_uses_placeholder():
    game = _started(FOUR)
    game.skip_to_voting()
    assert game.cast_vote("a", "ghost")
    assert game.state.log[-1] == "A voted for Unknown"
    game.skip_voting()
    assert all(p.alive for p in game.state.players)
    assert game.phase == Phase.NIGHT_MAFIA


def test_duplicate_night_submission_ignored():
    game = _started(FOUR)
    assert game.submit_mafia_target("c", "a")
    assert not game.submit_mafia_target("c", "a")
    assert game.board.mafia_targets == {"c": "a"}


def test_double_mafia_waits_for_every_member():
    config = GameConfig(minimum_players=5, role_pool=DOUBLE_MAFIA_POOL)
    roles = {"a": Role.MAFIA, "b": Role.MAFIA, "c": Role.SHERIFF, "d": Role.DOCTOR, "e": Role.MAYOR}
    game = _started(roles, config=config)

    assert not game.submit_mafia_target("c", "d")  # not mafia
    assert game.submit_mafia_target("a", "d")
    assert game.phase == Phase.NIGHT_MAFIA
    assert not game.submit_mafia_target("a", "d")
    assert game.submit_mafia_target("a", "e")  # changed mind
    assert game.submit_mafia_target("b", "e")
    assert game.phase == Phase.NIGHT_SHERIFF
    assert game.board.mafia_targets == {"a": "e", "b": "e"}


def test_double_mafia_split_vote_kills_no_one():
    config = GameConfig(minimum_players=5, role_pool=DOUBLE_MAFIA_POOL)
    roles = {"a": Role.MAFIA, "b": Role.MAFIA, "c": Role.SHERIFF, "d": Role.DOCTOR, "e": Role.MAYOR}
    game = _started(roles, config=config)
    game.submit_mafia_target("a", "d")
    game.submit_mafia_target("b", "e")
    game.submit_sheriff_action("c", "a", shoot=False)
    game.submit_doctor_action("d", "c")
    game.process_night()
    assert all(p.alive for p in game.state.players)
    assert game.phase == Phase.DAY_DISCUSSION


def test_leave_removes_player_without_advancing():
    game = _started(FOUR)
    game.skip_to_voting()
    game.cast_vote("a", "c")
    game.cast_vote("b", "c")
    game.cast_vote("c", "a")
    assert game.leave("d")
    assert game.state.get_player("d") is None
    assert game.phase == Phase.DAY_VOTING  # remaining voters all voted; still waits
    assert game.state.log[-1] == "D disconnected"
    assert not game.leave("d")


def test_leave_drops_pending_vote():
    game = _started(FOUR)
    game.skip_to_voting()
    game.cast_vote("a", "c")
    game.leave("a")
    assert "a" not in game.tally.votes


def test_last_player_leaving_empties_room():
    game = _lobby(("A",))
    assert game.leave("a")
    assert game.is_empty()


def test_start_announces_night_once():
    game = _lobby()
    game.start_game()
    assert game.state.log[-2:] == ["Game started with 4 players!", "Night 1 phase begins..."]
