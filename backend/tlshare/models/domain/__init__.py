"""Domain models: the timeline aggregate, option catalog and cache records."""

from tlshare.models.domain.timeline import (
    TIMELINE_VERSION,
    GRID_SIZE,
    TURN_COUNT,
    PHASE_COUNT,
    MAX_SUMMONS,
    STEP_ORDERS,
    LIMIT_BREAK_MAX,
    KEY_SLOTS,
    SUMMON_PREFIX,
    KeyTriple,
    Grid,
    Position,
    Equipment,
    EquipmentUpdate,
    Character,
    Summon,
    Step,
    StepUpdate,
    Turn,
    Timeline,
)
from tlshare.models.domain.catalog import (
    CharacterOption,
    WeaponOption,
    SummonOption,
    OptionCatalog,
)
from tlshare.models.domain.cache import CachedTimeline, CachedTimelineSummary
from tlshare.models.domain.editing import (
    TimelineRequest,
    TitleUpdateRequest,
    CharacterNameRequest,
    CharacterEquipmentRequest,
    SummonNameRequest,
    PlacementRequest,
    StepUpsertRequest,
    ShareEncodeRequest,
    ShareDecodeRequest,
)

__all__ = [
    "TIMELINE_VERSION", "GRID_SIZE", "TURN_COUNT", "PHASE_COUNT", "MAX_SUMMONS",
    "STEP_ORDERS", "LIMIT_BREAK_MAX", "KEY_SLOTS", "SUMMON_PREFIX", "KeyTriple",
    "Grid", "Position", "Equipment", "EquipmentUpdate", "Character", "Summon",
    "Step", "StepUpdate", "Turn", "Timeline",
    "CharacterOption", "WeaponOption", "SummonOption", "OptionCatalog",
    "CachedTimeline", "CachedTimelineSummary",
    "TimelineRequest", "TitleUpdateRequest", "CharacterNameRequest",
    "CharacterEquipmentRequest", "SummonNameRequest", "PlacementRequest",
    "StepUpsertRequest", "ShareEncodeRequest", "ShareDecodeRequest",
]
