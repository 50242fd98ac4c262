"""
Enum definitions for the timeline share service.
"""
from enum import Enum


class MutationError(str, Enum):
    """Why a timeline operation was rejected and left the snapshot unchanged."""
    UNKNOWN_CHARACTER = "unknown_character"
    UNKNOWN_SUMMON = "unknown_summon"
    UNKNOWN_ACTOR = "unknown_actor"
    UNKNOWN_OPTION = "unknown_option"
    NO_ACTOR = "no_actor"
    BOSS_AREA = "boss_area"
    CELL_OCCUPIED = "cell_occupied"
    OUT_OF_BOUNDS = "out_of_bounds"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INVALID_PHASE = "invalid_phase"
    INVALID_ORDER = "invalid_order"
    NOTHING_TO_COPY = "nothing_to_copy"


class ActorKind(str, Enum):
    """Namespace an actor id belongs to."""
    CHARACTER = "character"
    SUMMON = "summon"
