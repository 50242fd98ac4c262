"""Local timeline cache endpoints."""

from fastapi import APIRouter, HTTPException

from tlshare.dependencies import TimelineCacheServiceDep, TimelineServiceDep
from tlshare.models import CachedTimeline, CachedTimelineSummary, ShareEncodeRequest

router = APIRouter()


@router.get("/", response_model=list[CachedTimelineSummary])
async def list_cached(service: TimelineCacheServiceDep):
    return [
        CachedTimelineSummary(id=r.id, title=r.title, saved_at=r.saved_at)
        for r in await service.get_list()
    ]


@router.post("/", response_model=CachedTimeline, status_code=201)
async def save_cached(body: ShareEncodeRequest, service: TimelineCacheServiceDep):
    try:
        return await service.save(body.timeline)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc


@router.get("/{record_id}", response_model=CachedTimeline)
async def get_cached(
    record_id: str,
    service: TimelineCacheServiceDep,
    timeline_service: TimelineServiceDep,
):
    record = await service.get(record_id)
    if not record:
        raise HTTPException(404, "Cached timeline not found")
    record.data = timeline_service.heal(record.data).timeline
    return record


@router.delete("/{record_id}")
async def delete_cached(record_id: str, service: TimelineCacheServiceDep):
    deleted = await service.delete(record_id)
    if not deleted:
        raise HTTPException(404, "Cached timeline not found")
    return {"status": "deleted", "id": record_id}
