"""Shareable link endpoints."""

from fastapi import APIRouter, Query

from tlshare.dependencies import TimelineServiceDep
from tlshare.models import ShareDecodeRequest, ShareEncodeRequest, ShareLink, SharedTimeline
from tlshare.services import codec

router = APIRouter()


@router.post("/encode", response_model=ShareLink)
async def encode_link(
    body: ShareEncodeRequest,
    base_url: str | None = Query(default=None),
):
    return ShareLink(
        fragment=codec.share_fragment(body.timeline),
        url=codec.share_url(body.timeline, base_url),
    )


@router.post("/decode", response_model=SharedTimeline)
async def decode_link(body: ShareDecodeRequest, service: TimelineServiceDep):
    decoded = codec.decode_timeline(body.fragment)
    if decoded is None:
        return SharedTimeline(timeline=service.default_timeline(), restored=False)
    return SharedTimeline(timeline=service.heal(decoded).timeline, restored=True)
