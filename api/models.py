"""Pydantic models for websocket intents and outbound messages."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from game.rules import Phase
from game.state import GameState

# Validation constants (no magic numbers in validation)
MAX_PLAYER_NAME_LENGTH = 50
MAX_ROOM_ID_LENGTH = 64


class IntentBase(BaseModel):
    room_id: str = Field(..., min_length=1, max_length=MAX_ROOM_ID_LENGTH)


class JoinIntent(IntentBase):
    type: Literal["join"] = "join"
    player_name: str = Field(..., min_length=1, max_length=MAX_PLAYER_NAME_LENGTH)


class StartGameIntent(IntentBase):
    type: Literal["start_game"] = "start_game"


class MafiaActionIntent(IntentBase):
    type: Literal["mafia_action"] = "mafia_action"
    target_id: str


class SheriffActionIntent(IntentBase):
    type: Literal["sheriff_action"] = "sheriff_action"
    target_id: str
    shoot: bool = Field(default=False, description="True to shoot, False to investigate")


class DoctorActionIntent(IntentBase):
    type: Literal["doctor_action"] = "doctor_action"
    target_id: str


class SkipToVotingIntent(IntentBase):
    type: Literal["skip_to_voting"] = "skip_to_voting"


class ProcessNightIntent(IntentBase):
    type: Literal["process_night"] = "process_night"


class StartVotingIntent(IntentBase):
    type: Literal["start_voting"] = "start_voting"


class VoteIntent(IntentBase):
    """Voter identity comes from the connection, never from the payload."""

    type: Literal["vote"] = "vote"
    target_id: str


class SkipVotingIntent(IntentBase):
    type: Literal["skip_voting"] = "skip_voting"


Intent = Annotated[
    Union[
        JoinIntent,
        StartGameIntent,
        MafiaActionIntent,
        SheriffActionIntent,
        DoctorActionIntent,
        SkipToVotingIntent,
        ProcessNightIntent,
        StartVotingIntent,
        VoteIntent,
        SkipVotingIntent,
    ],
    Field(discriminator="type"),
]

intent_adapter: TypeAdapter = TypeAdapter(Intent)


def parse_intent(raw: str):
    """Validate one JSON message into an intent model; raises pydantic.ValidationError."""
    return intent_adapter.validate_json(raw)


class PlayerPublic(BaseModel):
    """Player as shown to clients: role only revealed when dead or the game is over."""

    id: str
    name: str
    alive: bool
    role: Optional[str] = Field(default=None, description="Only set when not alive or after game over")


class GameStateResponse(BaseModel):
    """Full room snapshot broadcast after every accepted intent."""

    game_id: str
    phase: str
    round_index: int
    players: list[PlayerPublic]
    log: list[str]
    votes: dict[str, str] = Field(default_factory=dict, description="Voter id -> target id for the current day")
    winner: Optional[str] = Field(default=None, description="mafia or civilians when game over")


class GameStateUpdated(BaseModel):
    type: Literal["game_state_updated"] = "game_state_updated"
    game: GameStateResponse


class RoleAssigned(BaseModel):
    type: Literal["role_assigned"] = "role_assigned"
    role: str
    is_mayor: bool


class Welcome(BaseModel):
    type: Literal["welcome"] = "welcome"
    player_id: str


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str


def game_state_to_public(state: GameState, votes: Optional[dict[str, str]] = None) -> GameStateResponse:
    """Build the public snapshot; hide roles of living players until the game is over."""
    reveal_all = state.phase == Phase.GAME_OVER
    players_public = [
        PlayerPublic(
            id=p.id,
            name=p.name,
            alive=p.alive,
            role=p.role.value if (reveal_all or not p.alive) else None,
        )
        for p in state.players
    ]
    return GameStateResponse(
        game_id=state.game_id,
        phase=state.phase.value,
        round_index=state.round_index,
        players=players_public,
        log=state.log,
        votes=dict(votes or {}),
        winner=state.winner.value if state.winner else None,
    )
