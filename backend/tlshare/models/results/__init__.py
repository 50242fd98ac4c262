"""Result models for service operations."""

from tlshare.models.results.timeline import (
    OperationResult, TimelineMutation, ShareLink, SharedTimeline,
)

__all__ = [
    "OperationResult", "TimelineMutation", "ShareLink", "SharedTimeline",
]
