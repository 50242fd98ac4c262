"""Identifier, grid and sanitization helpers. All pure, no state."""

import re
from collections.abc import Iterable
from typing import Optional

from tlshare.models import KEY_SLOTS, SUMMON_PREFIX, ActorKind, KeyTriple

BOSS_AREA_MIN = 8
BOSS_AREA_MAX = 10

CHARACTER_SLOT_IDS = ("c1", "c2", "c3", "c4", "c5")

SLOT_COLORS = {
    "c1": "#ef4444",
    "c2": "#3b82f6",
    "c3": "#10b981",
    "c4": "#f59e0b",
    "c5": "#8b5cf6",
}
FALLBACK_SLOT_COLOR = "#6b7280"

SUMMON_COLORS = (
    "#06b6d4",
    "#14b8a6",
    "#eab308",
    "#f97316",
    "#a855f7",
    "#22c55e",
    "#f43f5e",
    "#0ea5e9",
    "#84cc16",
    "#d946ef",
)
FALLBACK_SUMMON_COLOR = "#64748b"

_SUMMON_ID_RE = re.compile(r"^s(\d+)$")


def cell_key(x: int, y: int) -> str:
    return f"{x},{y}"


def is_boss_cell(x: int, y: int) -> bool:
    return BOSS_AREA_MIN <= x <= BOSS_AREA_MAX and BOSS_AREA_MIN <= y <= BOSS_AREA_MAX


def is_summon_id(actor_id: str) -> bool:
    return actor_id.startswith(SUMMON_PREFIX)


def actor_kind(actor_id: str) -> ActorKind:
    return ActorKind.SUMMON if is_summon_id(actor_id) else ActorKind.CHARACTER


def summon_id(position: int) -> str:
    """Summon id for a zero-based roster position."""
    return f"{SUMMON_PREFIX}{position + 1}"


def slot_color(char_id: str) -> str:
    return SLOT_COLORS.get(char_id, FALLBACK_SLOT_COLOR)


def summon_color(actor_id: str) -> str:
    match = _SUMMON_ID_RE.match(actor_id)
    if not match:
        return FALLBACK_SUMMON_COLOR
    return SUMMON_COLORS[(int(match.group(1)) - 1) % len(SUMMON_COLORS)]


def sanitize_key_triple(values: Iterable[Optional[str]], allowed: Iterable[str]) -> KeyTriple:
    """
    Keep only allowed values, slot by slot.

    A disallowed or blank value becomes ``None`` in place; the remaining
    values never shift position.

    :param values: Current slot values
    :type values: Iterable[Optional[str]]
    :param allowed: Values currently legal for these slots
    :type allowed: Iterable[str]
    :return: The sanitized triple
    :rtype: KeyTriple
    """
    allowed_set = set(allowed)
    slots = list(values)[:KEY_SLOTS]
    slots += [None] * (KEY_SLOTS - len(slots))
    return tuple(v if v and v in allowed_set else None for v in slots)
