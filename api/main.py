"""FastAPI app: websocket endpoint for room intents, read-only game routes."""

import logging
import uuid
from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from api.game_store import GameStore
from api.hub import RoomHub
from api.models import (
    DoctorActionIntent,
    ErrorMessage,
    GameStateResponse,
    GameStateUpdated,
    JoinIntent,
    MafiaActionIntent,
    ProcessNightIntent,
    RoleAssigned,
    SheriffActionIntent,
    SkipToVotingIntent,
    SkipVotingIntent,
    StartGameIntent,
    StartVotingIntent,
    VoteIntent,
    Welcome,
    game_state_to_public,
    parse_intent,
)
from game.config import load_config
from game.machine import GamePhaseMachine
from game.rules import Phase

logger = logging.getLogger(__name__)


def apply_intent(game: GamePhaseMachine, player_id: str, intent) -> bool:
    """Route a validated non-join intent to the room's machine. Returns True if accepted."""
    if isinstance(intent, StartGameIntent):
        return game.start_game()
    if isinstance(intent, MafiaActionIntent):
        return game.submit_mafia_target(player_id, intent.target_id)
    if isinstance(intent, SheriffActionIntent):
        return game.submit_sheriff_action(player_id, intent.target_id, intent.shoot)
    if isinstance(intent, DoctorActionIntent):
        return game.submit_doctor_action(player_id, intent.target_id)
    if isinstance(intent, SkipToVotingIntent):
        return game.skip_to_voting()
    if isinstance(intent, ProcessNightIntent):
        return game.process_night()
    if isinstance(intent, StartVotingIntent):
        return game.start_voting()
    if isinstance(intent, VoteIntent):
        return game.cast_vote(player_id, intent.target_id)
    if isinstance(intent, SkipVotingIntent):
        return game.skip_voting()
    raise ValueError(f"Unhandled intent type: {intent.type}")


def _state_message(game: GamePhaseMachine) -> str:
    snapshot = game_state_to_public(game.snapshot(), votes=game.tally.votes)
    return GameStateUpdated(game=snapshot).model_dump_json()


def create_app(store: Optional[GameStore] = None, hub: Optional[RoomHub] = None) -> FastAPI:
    """Build the app around an injected room registry (a fresh one from env config by default)."""
    if store is None:
        store = GameStore(load_config())
    if hub is None:
        hub = RoomHub()

    app = FastAPI(title="Mafia Rooms API", version="0.1.0")
    app.state.store = store
    app.state.hub = hub

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def broadcast_state(room_id: str) -> None:
        game = store.get(room_id)
        if game is not None:
            await hub.broadcast(room_id, _state_message(game))

    async def send_roles(room_id: str, game: GamePhaseMachine) -> None:
        for player_id, role, is_mayor in game.role_assignments():
            message = RoleAssigned(role=role.value, is_mayor=is_mayor).model_dump_json()
            await hub.send_to(room_id, player_id, message)

    async def leave_room(room_id: str, player_id: str) -> None:
        hub.remove(room_id, player_id)
        game = store.get(room_id)
        if game is None or not game.leave(player_id):
            return
        if not store.discard_if_empty(room_id):
            await broadcast_state(room_id)

    async def join_room(ws: WebSocket, player_id: str, current_room: Optional[str], intent: JoinIntent) -> Optional[str]:
        """Returns the room the connection belongs to afterwards."""
        target = store.get(intent.room_id)
        if target is not None and target.phase != Phase.LOBBY:
            logger.debug("Ignoring join of %s into room %s already in play", player_id, intent.room_id)
            return current_room
        if current_room is not None and current_room != intent.room_id:
            await leave_room(current_room, player_id)
            current_room = None
        game = store.get_or_create(intent.room_id)
        accepted = game.join(player_id, intent.player_name)
        if game.snapshot().get_player(player_id) is None:
            store.discard_if_empty(intent.room_id)
            return current_room
        hub.add(intent.room_id, player_id, ws)
        if accepted:
            await broadcast_state(intent.room_id)
        return intent.room_id

    @app.websocket("/ws")
    async def game_socket(websocket: WebSocket):
        """One connection = one player identity; messages are handled strictly in order."""
        await websocket.accept()
        player_id = uuid.uuid4().hex
        room_id: Optional[str] = None
        logger.info("Client connected: %s", player_id)
        await websocket.send_text(Welcome(player_id=player_id).model_dump_json())
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                raw = message.get("text")
                try:
                    if raw is None:
                        raise ValueError("binary frame")
                    intent = parse_intent(raw)
                except ValueError as e:
                    logger.warning("Invalid message from %s: %s", player_id, e)
                    await websocket.send_text(ErrorMessage(message="Invalid message format").model_dump_json())
                    continue

                if isinstance(intent, JoinIntent):
                    room_id = await join_room(websocket, player_id, room_id, intent)
                    continue

                game = store.get(intent.room_id)
                if game is None:
                    logger.debug("Ignoring %s for unknown room %s", intent.type, intent.room_id)
                    continue
                if not apply_intent(game, player_id, intent):
                    continue
                await broadcast_state(intent.room_id)
                if isinstance(intent, StartGameIntent):
                    await send_roles(intent.room_id, game)
        except WebSocketDisconnect:
            logger.info("Client disconnected: %s", player_id)
        finally:
            if room_id is not None:
                await leave_room(room_id, player_id)

    @app.get("/games", response_model=list[str], tags=["Games"], summary="List room IDs")
    def list_games_route():
        """List all active room IDs."""
        return store.list_games()

    @app.get("/games/{game_id}", response_model=GameStateResponse, tags=["Games"], summary="Get room state")
    def get_game(game_id: str):
        """Get public room snapshot."""
        game = store.get(game_id)
        if game is None:
            raise HTTPException(404, "Game not found")
        return game_state_to_public(game.snapshot(), votes=game.tally.votes)

    @app.get("/health", tags=["System"], summary="Health check")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
