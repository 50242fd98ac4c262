"""
Timeline share models.

Usage:
    from tlshare.models import Timeline, Turn, Step, Character, Summon
    from tlshare.models import OptionCatalog, CachedTimeline
    from tlshare.models import MutationError, TimelineMutation
"""

# --- Enums ---
from tlshare.models.enums import MutationError, ActorKind

# --- Domain models ---
from tlshare.models.domain import (
    TIMELINE_VERSION, GRID_SIZE, TURN_COUNT, PHASE_COUNT, MAX_SUMMONS,
    STEP_ORDERS, LIMIT_BREAK_MAX, KEY_SLOTS, SUMMON_PREFIX, KeyTriple,
    Grid, Position, Equipment, EquipmentUpdate, Character, Summon,
    Step, StepUpdate, Turn, Timeline,
    CharacterOption, WeaponOption, SummonOption, OptionCatalog,
    CachedTimeline, CachedTimelineSummary,
    TimelineRequest, TitleUpdateRequest, CharacterNameRequest,
    CharacterEquipmentRequest, SummonNameRequest, PlacementRequest,
    StepUpsertRequest, ShareEncodeRequest, ShareDecodeRequest,
)

# --- Result models ---
from tlshare.models.results import (
    OperationResult, TimelineMutation, ShareLink, SharedTimeline,
)

__all__ = [
    # Enums
    "MutationError", "ActorKind",
    # Domain
    "TIMELINE_VERSION", "GRID_SIZE", "TURN_COUNT", "PHASE_COUNT", "MAX_SUMMONS",
    "STEP_ORDERS", "LIMIT_BREAK_MAX", "KEY_SLOTS", "SUMMON_PREFIX", "KeyTriple",
    "Grid", "Position", "Equipment", "EquipmentUpdate", "Character", "Summon",
    "Step", "StepUpdate", "Turn", "Timeline",
    "CharacterOption", "WeaponOption", "SummonOption", "OptionCatalog",
    "CachedTimeline", "CachedTimelineSummary",
    "TimelineRequest", "TitleUpdateRequest", "CharacterNameRequest",
    "CharacterEquipmentRequest", "SummonNameRequest", "PlacementRequest",
    "StepUpsertRequest", "ShareEncodeRequest", "ShareDecodeRequest",
    # Results
    "OperationResult", "TimelineMutation", "ShareLink", "SharedTimeline",
]
