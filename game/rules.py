"""Game rules and constants for Mafia rooms."""

from enum import Enum


class Role(str, Enum):
    """Player roles in the game."""

    UNASSIGNED = "unassigned"
    MAFIA = "mafia"
    SHERIFF = "sheriff"
    DOCTOR = "doctor"
    MAYOR = "mayor"
    CIVILIAN = "civilian"


class Phase(str, Enum):
    """Current game phase."""

    LOBBY = "lobby"
    NIGHT_MAFIA = "night_mafia"
    NIGHT_SHERIFF = "night_sheriff"
    NIGHT_DOCTOR = "night_doctor"
    NIGHT_RESULTS = "night_results"
    DAY_DISCUSSION = "day_discussion"
    DAY_VOTING = "day_voting"
    GAME_OVER = "game_over"


class Winner(str, Enum):
    """Winning side once the game is over."""

    CIVILIANS = "civilians"
    MAFIA = "mafia"


# Sub-phases of a night, in the order roles act
NIGHT_PHASES = (Phase.NIGHT_MAFIA, Phase.NIGHT_SHERIFF, Phase.NIGHT_DOCTOR, Phase.NIGHT_RESULTS)

SINGLE_MAFIA_POOL = (Role.MAFIA, Role.SHERIFF, Role.DOCTOR, Role.MAYOR)
DOUBLE_MAFIA_POOL = (Role.MAFIA, Role.MAFIA, Role.SHERIFF, Role.DOCTOR, Role.MAYOR)

ROLE_POOLS = {
    "single": SINGLE_MAFIA_POOL,
    "double": DOUBLE_MAFIA_POOL,
}

# Minimum players to start
MIN_PLAYERS = 4

MAYOR_VOTE_WEIGHT = 2

# Display name for ids that are not in the roster
UNKNOWN_PLAYER_NAME = "Unknown"
