"""
Local timeline cache.

The whole list of saved snapshots lives as one JSON value under a single key,
most recent first. Writes are last-writer-wins.
"""

import json
import secrets
import string
from datetime import datetime, timezone

import aiosqlite
from pydantic import ValidationError

from tlshare.logging import get_logger
from tlshare.models import CachedTimeline, Timeline

logger = get_logger('services.cache')

_ID_ALPHABET = string.digits + string.ascii_lowercase
ID_LENGTH = 8


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(ID_LENGTH))


def _parse_records(raw: str | None) -> list[CachedTimeline]:
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Cached timeline list is not valid JSON; treating as empty")
        return []
    if not isinstance(items, list):
        return []

    records: list[CachedTimeline] = []
    for item in items:
        try:
            records.append(CachedTimeline.model_validate(item))
        except ValidationError:
            logger.warning("Dropping unreadable cached timeline entry")
    return records


class TimelineCacheService:
    """Service for saving, listing and deleting named timeline snapshots."""

    def __init__(self, db_path: str, cache_key: str, max_entries: int = 50):
        self.db_path = db_path
        self.cache_key = cache_key
        self.max_entries = max_entries

    async def _get_db(self) -> aiosqlite.Connection:
        db = await aiosqlite.connect(self.db_path)
        db.row_factory = aiosqlite.Row
        return db

    async def get_list(self) -> list[CachedTimeline]:
        db = await self._get_db()
        try:
            cursor = await db.execute("SELECT value FROM kv_store WHERE key = ?", (self.cache_key,))
            row = await cursor.fetchone()
        finally:
            await db.close()
        return _parse_records(row["value"] if row else None)

    async def set_list(self, records: list[CachedTimeline]) -> None:
        value = json.dumps(
            [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in records],
            ensure_ascii=False,
            separators=(",", ":"),
        )
        db = await self._get_db()
        try:
            await db.execute(
                """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at""",
                (self.cache_key, value, _now().isoformat()),
            )
            await db.commit()
        finally:
            await db.close()

    async def save(self, timeline: Timeline) -> CachedTimeline:
        """
        Save a snapshot under its title.

        :param timeline: Snapshot to store
        :type timeline: Timeline
        :return: The stored record
        :rtype: CachedTimeline
        :raises ValueError: If the timeline has no title
        """
        title = (timeline.title or "").strip()
        if not title:
            raise ValueError("A title is required to save a timeline")

        record = CachedTimeline(
            id=_new_id(),
            title=title,
            data=timeline.model_copy(deep=True),
            saved_at=int(_now().timestamp() * 1000),
        )
        records = [record, *await self.get_list()][:self.max_entries]
        await self.set_list(records)
        logger.info(f"Cached timeline '{title}' ({record.id}); {len(records)} saved")
        return record

    async def get(self, record_id: str) -> CachedTimeline | None:
        return next((r for r in await self.get_list() if r.id == record_id), None)

    async def delete(self, record_id: str) -> bool:
        records = await self.get_list()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        await self.set_list(remaining)
        logger.info(f"Deleted cached timeline {record_id}")
        return True
