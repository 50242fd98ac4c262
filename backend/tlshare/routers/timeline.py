"""Timeline editing API routes.

Stateless: each request carries the snapshot to edit and gets the next one
back. Rejected edits still answer 200 with ``applied: false`` and the reason.
"""

from typing import Annotated

from fastapi import APIRouter, Path

from tlshare.dependencies import TimelineServiceDep
from tlshare.models import (
    PHASE_COUNT,
    STEP_ORDERS,
    CharacterEquipmentRequest,
    CharacterNameRequest,
    PlacementRequest,
    StepUpsertRequest,
    SummonNameRequest,
    Timeline,
    TimelineMutation,
    TimelineRequest,
    TitleUpdateRequest,
)

router = APIRouter()

PhaseIndex = Annotated[int, Path(ge=0, le=PHASE_COUNT - 1)]
StepOrder = Annotated[int, Path(ge=STEP_ORDERS[0], le=STEP_ORDERS[-1])]


def _keep_selection(result: TimelineMutation, body: TimelineRequest) -> TimelineMutation:
    if result.active_actor_id is None:
        result.active_actor_id = body.active_actor_id
    return result


@router.get("/default", response_model=Timeline)
async def default_timeline(service: TimelineServiceDep):
    return service.default_timeline()


@router.put("/title", response_model=TimelineMutation)
async def set_title(body: TitleUpdateRequest, service: TimelineServiceDep):
    return _keep_selection(service.set_title(body.timeline, body.title), body)


@router.post("/characters/{char_id}/name", response_model=TimelineMutation)
async def set_character_name(char_id: str, body: CharacterNameRequest, service: TimelineServiceDep):
    return _keep_selection(service.set_character_name(body.timeline, char_id, body.name), body)


@router.post("/characters/{char_id}/equipment", response_model=TimelineMutation)
async def set_character_equipment(
    char_id: str,
    body: CharacterEquipmentRequest,
    service: TimelineServiceDep,
):
    timeline = body.timeline
    character = timeline.character(char_id)
    patch = body.equipment
    # keys arriving over HTTP are untrusted; sanitize before the merge
    if character is not None:
        updates = {}
        if patch.unique_key_set is not None:
            updates["unique_key_set"] = service.sanitize_unique_keys(character.name, patch.unique_key_set)
        if patch.common_key_set is not None:
            updates["common_key_set"] = service.sanitize_common_keys(patch.common_key_set)
        patch = patch.model_copy(update=updates)
    return _keep_selection(service.set_character_equipment(timeline, char_id, patch), body)


@router.post("/summons", response_model=TimelineMutation)
async def add_summon(body: TimelineRequest, service: TimelineServiceDep):
    return service.add_summon(body.timeline, body.active_actor_id)


@router.post("/summons/{summon_id}/remove", response_model=TimelineMutation)
async def remove_summon(summon_id: str, body: TimelineRequest, service: TimelineServiceDep):
    return service.remove_summon(body.timeline, summon_id, body.active_actor_id)


@router.post("/summons/{summon_id}/name", response_model=TimelineMutation)
async def set_summon_name(summon_id: str, body: SummonNameRequest, service: TimelineServiceDep):
    return _keep_selection(service.set_summon_name(body.timeline, summon_id, body.name), body)


@router.post("/phases/{phase_index}/placements", response_model=TimelineMutation)
async def place_actor(
    body: PlacementRequest,
    service: TimelineServiceDep,
    phase_index: PhaseIndex,
):
    actor_id = body.actor_id or body.active_actor_id
    result = service.place_actor(body.timeline, phase_index, actor_id, body.x, body.y)
    return _keep_selection(result, body)


@router.post("/phases/{phase_index}/occupancy", response_model=dict[str, list[str]])
async def occupancy(body: TimelineRequest, service: TimelineServiceDep, phase_index: PhaseIndex):
    return service.occupancy(body.timeline, phase_index)


@router.post("/phases/{phase_index}/copy-previous", response_model=TimelineMutation)
async def copy_from_previous(body: TimelineRequest, service: TimelineServiceDep, phase_index: PhaseIndex):
    return _keep_selection(service.copy_from_previous(body.timeline, phase_index), body)


@router.post("/phases/{from_index}/copy/{to_index}", response_model=TimelineMutation)
async def copy_phase(
    body: TimelineRequest,
    service: TimelineServiceDep,
    from_index: PhaseIndex,
    to_index: PhaseIndex,
):
    return _keep_selection(service.copy_phase(body.timeline, from_index, to_index), body)


@router.put("/phases/{phase_index}/steps/{order}", response_model=TimelineMutation)
async def set_step(
    body: StepUpsertRequest,
    service: TimelineServiceDep,
    phase_index: PhaseIndex,
    order: StepOrder,
):
    return _keep_selection(service.set_step(body.timeline, phase_index, order, body.step), body)


@router.post("/phases/{phase_index}/steps/{order}/clear", response_model=TimelineMutation)
async def clear_step(
    body: TimelineRequest,
    service: TimelineServiceDep,
    phase_index: PhaseIndex,
    order: StepOrder,
):
    return _keep_selection(service.clear_step(body.timeline, phase_index, order), body)


@router.post("/heal", response_model=TimelineMutation)
async def heal(body: TimelineRequest, service: TimelineServiceDep):
    return service.heal(body.timeline, body.active_actor_id)
