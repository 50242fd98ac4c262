"""Local cache domain models."""

from pydantic import BaseModel, Field

from tlshare.models.domain.timeline import Timeline


class CachedTimeline(BaseModel):
    """A named snapshot saved to the local cache."""

    id: str
    title: str
    data: Timeline
    saved_at: int = Field(alias="savedAt", description="Save time in epoch milliseconds.")

    model_config = {"populate_by_name": True}


class CachedTimelineSummary(BaseModel):
    """List entry without the timeline payload."""

    id: str
    title: str
    saved_at: int = Field(alias="savedAt")

    model_config = {"populate_by_name": True}
