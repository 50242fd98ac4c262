"""
Result models for timeline and share operations.
"""

from pydantic import BaseModel, Field
from typing import Optional

from tlshare.models.domain.timeline import Timeline
from tlshare.models.enums import MutationError


class OperationResult(BaseModel):
    """Base result for timeline operations."""
    applied: bool


class TimelineMutation(OperationResult):
    """Outcome of a timeline operation.

    A rejected operation carries the prior snapshot object unchanged together
    with the reason; callers decide how to surface it.
    """
    timeline: Timeline
    error: Optional[MutationError] = None
    active_actor_id: Optional[str] = Field(default=None, alias="activeActorId")

    model_config = {"populate_by_name": True}


class ShareLink(BaseModel):
    """An encoded timeline ready to be placed after a URL's ``#``."""
    fragment: str
    url: str


class SharedTimeline(BaseModel):
    """Result of reading a shared link."""
    timeline: Timeline
    restored: bool
