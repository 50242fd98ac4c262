"""Timeline service: snapshot-in, snapshot-out editing operations.

No operation mutates the snapshot it receives. Accepted operations work on a
deep copy and return it; rejected ones hand back the input object together
with a ``MutationError``.
"""

from typing import Iterable, Optional

from tlshare.logging import get_logger
from tlshare.models import (
    MAX_SUMMONS,
    PHASE_COUNT,
    STEP_ORDERS,
    Character,
    Equipment,
    EquipmentUpdate,
    Grid,
    KeyTriple,
    MutationError,
    OptionCatalog,
    Position,
    Step,
    StepUpdate,
    Summon,
    Timeline,
    TimelineMutation,
    Turn,
)
from tlshare.services.identifiers import (
    CHARACTER_SLOT_IDS,
    cell_key,
    is_boss_cell,
    is_summon_id,
    sanitize_key_triple,
    slot_color,
    summon_id,
)

logger = get_logger('services.timeline')

FALLBACK_CHARACTER_ID = CHARACTER_SLOT_IDS[0]


def _accept(timeline: Timeline, active_actor_id: Optional[str] = None) -> TimelineMutation:
    return TimelineMutation(applied=True, timeline=timeline, active_actor_id=active_actor_id)


def _reject(
    timeline: Timeline,
    error: MutationError,
    active_actor_id: Optional[str] = None,
) -> TimelineMutation:
    logger.debug(f"Rejected timeline operation: {error.value}")
    return TimelineMutation(
        applied=False,
        timeline=timeline,
        error=error,
        active_actor_id=active_actor_id,
    )


def _valid_phase(index: int) -> bool:
    return 0 <= index < PHASE_COUNT


def _in_grid(grid: Grid, x: int, y: int) -> bool:
    return 0 <= x < grid.cols and 0 <= y < grid.rows


def _first_character_id(timeline: Timeline) -> str:
    return timeline.characters[0].id if timeline.characters else FALLBACK_CHARACTER_ID


def _prune_in_place(timeline: Timeline) -> int:
    actor_ids = timeline.actor_ids()
    removed = 0
    for turn in timeline.phases():
        for actor_id in [k for k in turn.placements if k not in actor_ids]:
            del turn.placements[actor_id]
            removed += 1
    return removed


def _renumber_in_place(timeline: Timeline, active_actor_id: Optional[str]) -> Optional[str]:
    id_map: dict[str, str] = {}
    seen: set[str] = set()
    for position, s in enumerate(timeline.summons):
        new_id = summon_id(position)
        # a duplicated id keeps the placements of its first occurrence
        if s.id != new_id and s.id not in seen:
            id_map[s.id] = new_id
        seen.add(s.id)
        s.id = new_id

    if id_map:
        for turn in timeline.phases():
            turn.placements = {id_map.get(k, k): v for k, v in turn.placements.items()}
            for step in turn.steps:
                step.actor_id = id_map.get(step.actor_id, step.actor_id)
        logger.debug(f"Renumbered summons: {id_map}")

    if active_actor_id and is_summon_id(active_actor_id):
        return id_map.get(active_actor_id, active_actor_id)
    return active_actor_id


class TimelineService:
    """Editing operations over immutable timeline snapshots."""

    def __init__(self, catalog: OptionCatalog, default_title: str):
        self.catalog = catalog
        self.default_title = default_title

    def default_timeline(self) -> Timeline:
        return Timeline(
            title=self.default_title,
            grid=Grid(),
            characters=[
                Character(id=char_id, name="", alias="", color=slot_color(char_id), equipment=Equipment())
                for char_id in CHARACTER_SLOT_IDS
            ],
        )

    # --- sanitizers ---

    def sanitize_unique_keys(self, name: str, values: Iterable[Optional[str]]) -> KeyTriple:
        return sanitize_key_triple(values, self.catalog.unique_key_options_for_name(name))

    def sanitize_common_keys(self, values: Iterable[Optional[str]]) -> KeyTriple:
        return sanitize_key_triple(values, self.catalog.common_keys)

    def derive_weapon(self, name: str, ctype: Optional[str], current: Optional[str]) -> str:
        """
        Pick a weapon valid for a character's category.

        Keeps the current weapon when still legal, otherwise the category's
        first weapon; an unselected character carries no weapon.
        """
        if not name:
            return ""
        allowed = self.catalog.weapon_names_for_type(ctype)
        if current and current in allowed:
            return current
        return allowed[0] if allowed else ""

    # --- title & roster ---

    def set_title(self, timeline: Timeline, title: str) -> TimelineMutation:
        next_tl = timeline.model_copy(deep=True)
        next_tl.title = title
        return _accept(next_tl)

    def set_character_name(self, timeline: Timeline, char_id: str, name: str) -> TimelineMutation:
        if timeline.character(char_id) is None:
            return _reject(timeline, MutationError.UNKNOWN_CHARACTER)
        if name and self.catalog.character_option(name) is None:
            return _reject(timeline, MutationError.UNKNOWN_OPTION)

        next_tl = timeline.model_copy(deep=True)
        character = next_tl.character(char_id)
        ctype = self.catalog.category_for_name(name)
        equipment = character.equipment

        character.name = name
        character.alias = self.catalog.alias_for_name(name)
        character.ctype = ctype
        character.equipment = equipment.model_copy(update={
            "weapon": self.derive_weapon(name, ctype, equipment.weapon),
            "unique_key_set": self.sanitize_unique_keys(name, equipment.unique_key_set),
            "common_key_set": self.sanitize_common_keys(equipment.common_key_set),
        })
        return _accept(next_tl)

    def set_character_equipment(
        self,
        timeline: Timeline,
        char_id: str,
        patch: EquipmentUpdate,
    ) -> TimelineMutation:
        """Merge equipment fields. Key triples must already be sanitized."""
        if timeline.character(char_id) is None:
            return _reject(timeline, MutationError.UNKNOWN_CHARACTER)

        updates = {field: value for field, value in patch if value is not None}
        next_tl = timeline.model_copy(deep=True)
        character = next_tl.character(char_id)
        character.equipment = character.equipment.model_copy(update=updates)
        return _accept(next_tl)

    # --- summons ---

    def add_summon(self, timeline: Timeline, active_actor_id: Optional[str] = None) -> TimelineMutation:
        if len(timeline.summons) >= MAX_SUMMONS:
            return _reject(timeline, MutationError.CAPACITY_EXCEEDED, active_actor_id)

        next_tl = timeline.model_copy(deep=True)
        name = self.catalog.default_summon_name()
        next_tl.summons.append(Summon(
            id=summon_id(len(next_tl.summons)),
            name=name,
            alias=self.catalog.alias_for_summon(name),
        ))
        active = _renumber_in_place(next_tl, active_actor_id)
        return _accept(next_tl, active)

    def remove_summon(
        self,
        timeline: Timeline,
        summon_id_: str,
        active_actor_id: Optional[str] = None,
    ) -> TimelineMutation:
        if timeline.summon(summon_id_) is None:
            return _reject(timeline, MutationError.UNKNOWN_SUMMON, active_actor_id)

        next_tl = timeline.model_copy(deep=True)
        fallback_id = _first_character_id(next_tl)
        for turn in next_tl.phases():
            turn.placements.pop(summon_id_, None)
            # renumbering would hand the removed id to the next summon
            for step in turn.steps:
                if step.actor_id == summon_id_:
                    step.actor_id = fallback_id
        next_tl.summons = [s for s in next_tl.summons if s.id != summon_id_]
        _prune_in_place(next_tl)

        if active_actor_id == summon_id_:
            active_actor_id = _first_character_id(next_tl)
        active = _renumber_in_place(next_tl, active_actor_id)
        return _accept(next_tl, active)

    def set_summon_name(self, timeline: Timeline, summon_id_: str, name: str) -> TimelineMutation:
        if timeline.summon(summon_id_) is None:
            return _reject(timeline, MutationError.UNKNOWN_SUMMON)
        if self.catalog.summon_option(name) is None:
            return _reject(timeline, MutationError.UNKNOWN_OPTION)

        next_tl = timeline.model_copy(deep=True)
        summon = next_tl.summon(summon_id_)
        summon.name = name
        summon.alias = self.catalog.alias_for_summon(name)
        return _accept(next_tl)

    def renumber_summons(
        self,
        timeline: Timeline,
        active_actor_id: Optional[str] = None,
    ) -> TimelineMutation:
        """Reassign s1..sN in roster order and remap every placement key."""
        next_tl = timeline.model_copy(deep=True)
        active = _renumber_in_place(next_tl, active_actor_id)
        return _accept(next_tl, active)

    # --- placements ---

    def place_actor(
        self,
        timeline: Timeline,
        phase_index: int,
        actor_id: Optional[str],
        x: int,
        y: int,
    ) -> TimelineMutation:
        """Move an actor to a cell. One actor per cell and one cell per actor."""
        if not _valid_phase(phase_index):
            return _reject(timeline, MutationError.INVALID_PHASE)
        if not actor_id:
            return _reject(timeline, MutationError.NO_ACTOR)
        if is_boss_cell(x, y):
            return _reject(timeline, MutationError.BOSS_AREA)
        if not _in_grid(timeline.grid, x, y):
            return _reject(timeline, MutationError.OUT_OF_BOUNDS)
        if actor_id not in timeline.actor_ids():
            return _reject(timeline, MutationError.UNKNOWN_ACTOR)

        occupants = self.occupancy(timeline, phase_index).get(cell_key(x, y), [])
        if any(other != actor_id for other in occupants):
            return _reject(timeline, MutationError.CELL_OCCUPIED)

        next_tl = timeline.model_copy(deep=True)
        turn = next_tl.phase(phase_index)
        turn.placements.pop(actor_id, None)
        turn.placements[actor_id] = Position(x=x, y=y)
        return _accept(next_tl)

    def occupancy(self, timeline: Timeline, phase_index: int) -> dict[str, list[str]]:
        """
        Cells holding honored placements in a phase.

        Orphan ids, boss-area cells and off-grid positions are skipped.
        Overlapping placements from hand-edited links are reported together.

        :return: Mapping of cell key to actor ids in placement order
        :rtype: dict[str, list[str]]
        """
        if not _valid_phase(phase_index):
            return {}
        actor_ids = timeline.actor_ids()
        cells: dict[str, list[str]] = {}
        for actor_id, pos in timeline.phase(phase_index).placements.items():
            if actor_id not in actor_ids:
                continue
            if is_boss_cell(pos.x, pos.y) or not _in_grid(timeline.grid, pos.x, pos.y):
                continue
            cells.setdefault(cell_key(pos.x, pos.y), []).append(actor_id)
        return cells

    # --- phases ---

    def copy_phase(self, timeline: Timeline, from_index: int, to_index: int) -> TimelineMutation:
        if not _valid_phase(from_index) or not _valid_phase(to_index):
            return _reject(timeline, MutationError.INVALID_PHASE)

        next_tl = timeline.model_copy(deep=True)
        source = next_tl.phase(from_index)
        target = next_tl.phase(to_index)
        target.placements = {k: v.model_copy() for k, v in source.placements.items()}
        target.steps = [s.model_copy() for s in source.steps]
        return _accept(next_tl)

    def copy_from_previous(self, timeline: Timeline, phase_index: int) -> TimelineMutation:
        """Turn 1 copies from preparation; later turns from the turn before."""
        if not _valid_phase(phase_index):
            return _reject(timeline, MutationError.INVALID_PHASE)
        if phase_index == 0:
            return _reject(timeline, MutationError.NOTHING_TO_COPY)
        return self.copy_phase(timeline, phase_index - 1, phase_index)

    # --- steps ---

    def set_step(
        self,
        timeline: Timeline,
        phase_index: int,
        order: int,
        patch: StepUpdate,
    ) -> TimelineMutation:
        if not _valid_phase(phase_index):
            return _reject(timeline, MutationError.INVALID_PHASE)
        if order not in STEP_ORDERS:
            return _reject(timeline, MutationError.INVALID_ORDER)
        if patch.actor_id is not None and patch.actor_id not in timeline.actor_ids():
            return _reject(timeline, MutationError.UNKNOWN_ACTOR)

        updates = {field: value for field, value in patch if value is not None}
        next_tl = timeline.model_copy(deep=True)
        turn: Turn = next_tl.phase(phase_index)
        existing = next((s for s in turn.steps if s.order == order), None)
        if existing is None:
            turn.steps.append(Step(
                order=order,
                actor_id=_first_character_id(next_tl),
                skill="",
                note="",
            ).model_copy(update=updates))
        else:
            turn.steps = [
                s.model_copy(update=updates) if s.order == order else s
                for s in turn.steps
            ]
        turn.steps.sort(key=lambda s: s.order)
        return _accept(next_tl)

    def clear_step(self, timeline: Timeline, phase_index: int, order: int) -> TimelineMutation:
        if not _valid_phase(phase_index):
            return _reject(timeline, MutationError.INVALID_PHASE)
        if order not in STEP_ORDERS:
            return _reject(timeline, MutationError.INVALID_ORDER)

        next_tl = timeline.model_copy(deep=True)
        turn = next_tl.phase(phase_index)
        turn.steps = [s for s in turn.steps if s.order != order]
        return _accept(next_tl)

    # --- consistency passes ---

    def prune_orphans(self, timeline: Timeline) -> TimelineMutation:
        next_tl = timeline.model_copy(deep=True)
        removed = _prune_in_place(next_tl)
        if removed:
            logger.info(f"Pruned {removed} orphan placement(s)")
        return _accept(next_tl)

    def sanitize_all_equipment(self, timeline: Timeline) -> TimelineMutation:
        next_tl = timeline.model_copy(deep=True)
        changed = 0
        for character in next_tl.characters:
            equipment = character.equipment
            unique = self.sanitize_unique_keys(character.name, equipment.unique_key_set)
            common = self.sanitize_common_keys(equipment.common_key_set)
            if unique != equipment.unique_key_set or common != equipment.common_key_set:
                character.equipment = equipment.model_copy(update={
                    "unique_key_set": unique,
                    "common_key_set": common,
                })
                changed += 1
        if changed:
            logger.info(f"Sanitized equipment keys for {changed} character(s)")
        return _accept(next_tl)

    def heal(self, timeline: Timeline, active_actor_id: Optional[str] = None) -> TimelineMutation:
        """Run every consistency pass; used on data restored from links or cache."""
        next_tl = self.sanitize_all_equipment(timeline).timeline
        next_tl = self.prune_orphans(next_tl).timeline
        active = _renumber_in_place(next_tl, active_actor_id)
        return _accept(next_tl, active)
