"""Room configuration: role pool and minimum player count."""

import os

from pydantic import BaseModel, Field, model_validator

from game.rules import MIN_PLAYERS, ROLE_POOLS, SINGLE_MAFIA_POOL, Role

ENV_ROLE_POOL = "MAFIA_ROLE_POOL"
ENV_MIN_PLAYERS = "MAFIA_MIN_PLAYERS"


class GameConfig(BaseModel):
    """Parameters shared by every room on a server."""

    minimum_players: int = Field(default=MIN_PLAYERS, ge=1)
    role_pool: tuple[Role, ...] = Field(default=SINGLE_MAFIA_POOL, min_length=1)

    @model_validator(mode="after")
    def pool_fits_minimum(self) -> "GameConfig":
        if Role.UNASSIGNED in self.role_pool:
            raise ValueError("role_pool cannot contain 'unassigned'")
        if self.minimum_players < len(self.role_pool):
            raise ValueError(
                f"minimum_players ({self.minimum_players}) must be >= role pool size ({len(self.role_pool)})"
            )
        return self

    @property
    def mafia_slots(self) -> int:
        return sum(1 for r in self.role_pool if r == Role.MAFIA)


def parse_role_pool(value: str) -> tuple[Role, ...]:
    """Parse 'single', 'double' or a comma-separated list of role names."""
    value = value.strip().lower()
    if value in ROLE_POOLS:
        return ROLE_POOLS[value]
    return tuple(Role(part.strip()) for part in value.split(",") if part.strip())


def load_config() -> GameConfig:
    """
    Build GameConfig from env (MAFIA_ROLE_POOL, MAFIA_MIN_PLAYERS).
    Minimum players defaults to the larger of MIN_PLAYERS and the pool size.
    """
    pool = SINGLE_MAFIA_POOL
    raw_pool = os.environ.get(ENV_ROLE_POOL)
    if raw_pool:
        pool = parse_role_pool(raw_pool)
    raw_min = os.environ.get(ENV_MIN_PLAYERS)
    minimum = int(raw_min) if raw_min else max(MIN_PLAYERS, len(pool))
    return GameConfig(minimum_players=minimum, role_pool=pool)
