"""Timeline domain models.

Field aliases match the shared-link wire format, so ``model_dump(by_alias=True)``
is exactly the JSON that gets compressed into a link.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

TIMELINE_VERSION = 1
GRID_SIZE = 19
TURN_COUNT = 7
PHASE_COUNT = TURN_COUNT + 1
MAX_SUMMONS = 10
STEP_ORDERS = (1, 2, 3, 4, 5)
LIMIT_BREAK_MAX = 6
KEY_SLOTS = 3
SUMMON_PREFIX = "s"

KeyTriple = tuple[Optional[str], Optional[str], Optional[str]]

EMPTY_KEYS: KeyTriple = (None, None, None)


class Grid(BaseModel):
    """Logical battlefield size."""

    cols: int = Field(default=GRID_SIZE, ge=1)
    rows: int = Field(default=GRID_SIZE, ge=1)


class Position(BaseModel):
    x: int
    y: int


class Equipment(BaseModel):
    """Per-character loadout."""

    limit_break: int = Field(default=0, ge=0, le=LIMIT_BREAK_MAX, alias="limitBreak")
    weapon: str = ""
    unique_key_set: KeyTriple = Field(default=EMPTY_KEYS, alias="uniqueKeySet")
    common_key_set: KeyTriple = Field(default=EMPTY_KEYS, alias="commonKeySet")

    model_config = {"populate_by_name": True}

    @field_validator("weapon", mode="before")
    @classmethod
    def blank_weapon(cls, value):
        return "" if value is None else value


class EquipmentUpdate(BaseModel):
    """Partial equipment payload. Omitted fields keep their current value."""

    limit_break: Optional[int] = Field(default=None, ge=0, le=LIMIT_BREAK_MAX, alias="limitBreak")
    weapon: Optional[str] = None
    unique_key_set: Optional[KeyTriple] = Field(default=None, alias="uniqueKeySet")
    common_key_set: Optional[KeyTriple] = Field(default=None, alias="commonKeySet")

    model_config = {"populate_by_name": True}


class Character(BaseModel):
    """A roster slot. Ids are fixed for the lifetime of a timeline."""

    id: str
    name: str = ""
    alias: str = ""
    ctype: Optional[str] = None
    color: str
    equipment: Equipment = Field(default_factory=Equipment)

    @field_validator("name", "alias", mode="before")
    @classmethod
    def blank_text(cls, value):
        return "" if value is None else value


class Summon(BaseModel):
    """A summoned unit. Ids are always s1..sN in roster order."""

    id: str
    name: str
    alias: Optional[str] = None


class Step(BaseModel):
    """One entry of a phase's action order."""

    order: int = Field(ge=STEP_ORDERS[0], le=STEP_ORDERS[-1])
    actor_id: str = Field(alias="actorId")
    skill: str = ""
    note: Optional[str] = None

    model_config = {"populate_by_name": True}


class StepUpdate(BaseModel):
    """Partial step payload used by upserts."""

    actor_id: Optional[str] = Field(default=None, alias="actorId")
    skill: Optional[str] = None
    note: Optional[str] = None

    model_config = {"populate_by_name": True}


class Turn(BaseModel):
    """A phase: the preparation phase (index 0) or one of the numbered turns."""

    index: int = Field(ge=0, le=TURN_COUNT)
    placements: dict[str, Position] = Field(default_factory=dict)
    steps: list[Step] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_step_orders(self):
        orders = [s.order for s in self.steps]
        if len(set(orders)) != len(orders):
            raise ValueError(f"turn {self.index} has more than one step per order")
        return self


class Timeline(BaseModel):
    """The whole shareable encounter plan."""

    version: Literal[1] = Field(default=TIMELINE_VERSION, alias="v")
    title: Optional[str] = None
    grid: Grid = Field(default_factory=Grid)
    characters: list[Character] = Field(default_factory=list)
    summons: list[Summon] = Field(default_factory=list, max_length=MAX_SUMMONS)
    prep: Turn = Field(default_factory=lambda: Turn(index=0))
    turns: list[Turn] = Field(
        default_factory=lambda: [Turn(index=i) for i in range(1, TURN_COUNT + 1)],
        min_length=TURN_COUNT,
        max_length=TURN_COUNT,
    )

    model_config = {"populate_by_name": True}

    @field_validator("version", mode="before")
    @classmethod
    def reject_bool_version(cls, value):
        # JSON true would otherwise pass as 1
        if isinstance(value, bool):
            raise ValueError("version must be an integer")
        return value

    @model_validator(mode="after")
    def check_phase_indexes(self):
        if self.prep.index != 0:
            raise ValueError("prep must have index 0")
        for offset, turn in enumerate(self.turns, start=1):
            if turn.index != offset:
                raise ValueError(f"turn at position {offset} has index {turn.index}")
        return self

    @model_validator(mode="after")
    def check_actor_ids(self):
        character_ids = [c.id for c in self.characters]
        if not character_ids:
            raise ValueError("character roster is empty")
        if len(set(character_ids)) != len(character_ids):
            raise ValueError("duplicate character ids")
        if any(i.startswith(SUMMON_PREFIX) for i in character_ids):
            raise ValueError("character id in the summon namespace")

        summon_ids = [s.id for s in self.summons]
        if len(set(summon_ids)) != len(summon_ids):
            raise ValueError("duplicate summon ids")
        if any(not i.startswith(SUMMON_PREFIX) for i in summon_ids):
            raise ValueError("summon id outside the summon namespace")
        return self

    def phase(self, index: int) -> Turn:
        return self.prep if index == 0 else self.turns[index - 1]

    def phases(self) -> list[Turn]:
        return [self.prep, *self.turns]

    def actor_ids(self) -> set[str]:
        return {c.id for c in self.characters} | {s.id for s in self.summons}

    def character(self, char_id: str) -> Character | None:
        return next((c for c in self.characters if c.id == char_id), None)

    def summon(self, summon_id: str) -> Summon | None:
        return next((s for s in self.summons if s.id == summon_id), None)
