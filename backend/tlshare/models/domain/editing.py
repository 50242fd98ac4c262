"""Request payloads for the stateless editing API.

Every request carries the snapshot it edits; the response carries the next one.
"""

from typing import Optional

from pydantic import BaseModel, Field

from tlshare.models.domain.timeline import EquipmentUpdate, StepUpdate, Timeline


class TimelineRequest(BaseModel):
    """Base payload: the current snapshot plus the editor's selected actor."""

    timeline: Timeline
    active_actor_id: Optional[str] = Field(default=None, alias="activeActorId")

    model_config = {"populate_by_name": True}


class TitleUpdateRequest(TimelineRequest):
    title: str


class CharacterNameRequest(TimelineRequest):
    name: str = Field(description='Catalog character name, or "" to unselect.')


class CharacterEquipmentRequest(TimelineRequest):
    equipment: EquipmentUpdate


class SummonNameRequest(TimelineRequest):
    name: str


class PlacementRequest(TimelineRequest):
    actor_id: Optional[str] = Field(default=None, alias="actorId")
    x: int
    y: int


class StepUpsertRequest(TimelineRequest):
    step: StepUpdate


class ShareEncodeRequest(BaseModel):
    timeline: Timeline


class ShareDecodeRequest(BaseModel):
    fragment: str = Field(description='Location hash, e.g. "#v1:eJy...".')
