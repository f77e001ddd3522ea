"""Role assignment: fixed pool padded with civilians, uniformly shuffled."""

import random
from typing import Optional, Sequence

from game.rules import Role


def build_role_list(num_players: int, role_pool: Sequence[Role]) -> list[Role]:
    """Return the pool followed by one Civilian for every player beyond the pool size."""
    if num_players < len(role_pool):
        raise ValueError(f"{num_players} players cannot fill a pool of {len(role_pool)} roles")
    roles = list(role_pool)
    roles.extend([Role.CIVILIAN] * (num_players - len(role_pool)))
    return roles


def assign_roles(
    num_players: int,
    role_pool: Sequence[Role],
    rng: Optional[random.Random] = None,
) -> list[Role]:
    """
    Build the role list and permute it in place with a Fisher-Yates shuffle.
    Index i of the result belongs to the i-th player in join order.
    """
    roles = build_role_list(num_players, role_pool)
    (rng or random.Random()).shuffle(roles)
    return roles
