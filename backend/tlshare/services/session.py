"""
Editing session context.

Holds the live snapshot and the editor's selection. Every mutation goes
through :class:`TimelineService` and publishes the returned snapshot as a
whole, so readers never observe a half-applied change.
"""

from typing import Optional

from tlshare.logging import get_logger
from tlshare.models import (
    PHASE_COUNT,
    EquipmentUpdate,
    StepUpdate,
    Timeline,
    TimelineMutation,
)
from tlshare.services import codec
from tlshare.services.identifiers import cell_key, is_boss_cell
from tlshare.services.timeline import TimelineService

logger = get_logger('services.session')


class EditorSession:
    """Live editing state for one user."""

    def __init__(self, service: TimelineService, timeline: Timeline | None = None):
        self.service = service
        self.timeline = timeline if timeline is not None else service.default_timeline()
        self.active_actor_id: Optional[str] = None
        self.active_phase = 0

    def _publish(self, result: TimelineMutation, remaps_selection: bool = False) -> TimelineMutation:
        self.timeline = result.timeline
        if remaps_selection and result.applied:
            self.active_actor_id = result.active_actor_id
        return result

    # --- loading ---

    @classmethod
    def from_fragment(cls, service: TimelineService, fragment: Optional[str]) -> "EditorSession":
        session = cls(service)
        session.restore(fragment)
        return session

    def restore(self, fragment: Optional[str]) -> bool:
        """
        Replace the timeline with one decoded from a shared link.

        Falls back to a fresh default timeline when the fragment is absent
        or not decodable.

        :return: True when a shared timeline was restored
        :rtype: bool
        """
        decoded = codec.decode_timeline(fragment)
        if decoded is None:
            self.load(self.service.default_timeline())
            return False
        self.load(decoded)
        return True

    def load(self, timeline: Timeline) -> None:
        healed = self.service.heal(timeline, self.active_actor_id)
        self.timeline = healed.timeline
        self.active_actor_id = healed.active_actor_id
        self.active_phase = 0

    def share_fragment(self) -> str:
        return codec.share_fragment(self.timeline)

    def share_url(self, base_url: str | None = None) -> str:
        return codec.share_url(self.timeline, base_url)

    # --- selection ---

    def select_actor(self, actor_id: Optional[str]) -> None:
        """Toggle selection; choosing the active actor again clears it."""
        self.active_actor_id = None if actor_id == self.active_actor_id else actor_id

    def set_active_phase(self, phase_index: int) -> bool:
        if not 0 <= phase_index < PHASE_COUNT:
            return False
        self.active_phase = phase_index
        return True

    def click_cell(self, x: int, y: int) -> Optional[TimelineMutation]:
        """
        Grid click: select an occupant or place the active actor.

        :return: The placement result, or None when the click only changed
            the selection or hit the boss area
        :rtype: Optional[TimelineMutation]
        """
        if is_boss_cell(x, y):
            return None
        occupants = self.service.occupancy(self.timeline, self.active_phase).get(cell_key(x, y), [])
        if len(occupants) == 1 and occupants[0] != self.active_actor_id:
            self.active_actor_id = occupants[0]
            return None
        if not self.active_actor_id and occupants:
            self.active_actor_id = occupants[0]
            return None
        if self.active_actor_id:
            return self.place(x, y)
        return None

    # --- mutations ---

    def set_title(self, title: str) -> TimelineMutation:
        return self._publish(self.service.set_title(self.timeline, title))

    def set_character_name(self, char_id: str, name: str) -> TimelineMutation:
        return self._publish(self.service.set_character_name(self.timeline, char_id, name))

    def set_character_equipment(self, char_id: str, patch: EquipmentUpdate) -> TimelineMutation:
        return self._publish(self.service.set_character_equipment(self.timeline, char_id, patch))

    def add_summon(self) -> TimelineMutation:
        result = self.service.add_summon(self.timeline, self.active_actor_id)
        return self._publish(result, remaps_selection=True)

    def remove_summon(self, summon_id: str) -> TimelineMutation:
        result = self.service.remove_summon(self.timeline, summon_id, self.active_actor_id)
        return self._publish(result, remaps_selection=True)

    def set_summon_name(self, summon_id: str, name: str) -> TimelineMutation:
        return self._publish(self.service.set_summon_name(self.timeline, summon_id, name))

    def place(self, x: int, y: int) -> TimelineMutation:
        result = self.service.place_actor(self.timeline, self.active_phase, self.active_actor_id, x, y)
        return self._publish(result)

    def copy_from_previous(self) -> TimelineMutation:
        return self._publish(self.service.copy_from_previous(self.timeline, self.active_phase))

    def set_step(self, order: int, patch: StepUpdate) -> TimelineMutation:
        return self._publish(self.service.set_step(self.timeline, self.active_phase, order, patch))

    def clear_step(self, order: int) -> TimelineMutation:
        return self._publish(self.service.clear_step(self.timeline, self.active_phase, order))
