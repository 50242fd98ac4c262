"""
Shareable-link codec.

Wire format: ``v1:`` + base64url(zlib-deflate(utf8(json(timeline)))), without
base64 padding. A link carries it after ``#``. Decoding never raises: any
failure collapses into ``None``, which callers treat as "no shared timeline".
"""

import base64
import binascii
import json
import re
import zlib
from typing import Optional

from pydantic import ValidationError

from tlshare.config import settings
from tlshare.logging import get_logger
from tlshare.models import TIMELINE_VERSION, Timeline

logger = get_logger('services.codec')

FORMAT_TAG = f"v{TIMELINE_VERSION}:"
FRAGMENT_PREFIX = f"#{FORMAT_TAG}"

_BASE64URL_RE = re.compile(r"^[A-Za-z0-9_-]*$")


class _DecodeError(Exception):
    """Internal marker for a failed decode stage."""


def timeline_to_json(timeline: Timeline) -> str:
    """Canonical compact JSON for a timeline, using wire field names."""
    payload = timeline.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(text: str) -> bytes:
    if not _BASE64URL_RE.match(text):
        raise _DecodeError("invalid base64url alphabet")
    padding = "=" * (-len(text) % 4)
    try:
        return base64.urlsafe_b64decode(text + padding)
    except (binascii.Error, ValueError) as exc:
        raise _DecodeError(f"invalid base64url: {exc}") from exc


def _inflate(raw: bytes, max_bytes: int) -> bytes:
    inflater = zlib.decompressobj()
    try:
        data = inflater.decompress(raw, max_bytes)
    except zlib.error as exc:
        raise _DecodeError(f"corrupt deflate stream: {exc}") from exc
    if inflater.unconsumed_tail:
        raise _DecodeError(f"payload exceeds {max_bytes} bytes when inflated")
    if not inflater.eof:
        raise _DecodeError("truncated deflate stream")
    if inflater.unused_data:
        raise _DecodeError("trailing bytes after deflate stream")
    return data


def encode_timeline(timeline: Timeline) -> str:
    """
    Encode a timeline into its versioned link payload.

    :param timeline: Snapshot to encode
    :type timeline: Timeline
    :return: ``v1:<base64url>`` payload
    :rtype: str
    """
    compressed = zlib.compress(timeline_to_json(timeline).encode("utf-8"))
    return FORMAT_TAG + b64url_encode(compressed)


def share_fragment(timeline: Timeline) -> str:
    return "#" + encode_timeline(timeline)


def share_url(timeline: Timeline, base_url: str | None = None) -> str:
    base = (base_url or settings.PUBLIC_BASE_URL).split("#", 1)[0]
    return base + share_fragment(timeline)


def _decode_payload(body: str, max_bytes: int) -> Timeline:
    raw = b64url_decode(body)
    data = _inflate(raw, max_bytes)
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise _DecodeError(f"invalid utf-8: {exc}") from exc
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise _DecodeError(f"invalid json: {exc}") from exc
    if not isinstance(payload, dict):
        raise _DecodeError("payload is not an object")
    version = payload.get("v")
    if type(version) is not int or version != TIMELINE_VERSION:
        raise _DecodeError(f"unsupported version {version!r}")
    try:
        return Timeline.model_validate(payload)
    except (ValidationError, RecursionError) as exc:
        raise _DecodeError(f"invalid timeline: {exc.__class__.__name__}") from exc


def decode_payload(payload: Optional[str], max_bytes: int | None = None) -> Timeline | None:
    """Inverse of :func:`encode_timeline`; accepts ``v1:...`` without the ``#``."""
    if not isinstance(payload, str):
        return None
    return decode_timeline("#" + payload, max_bytes)


def decode_timeline(fragment: Optional[str], max_bytes: int | None = None) -> Timeline | None:
    """
    Decode a location fragment such as ``#v1:eJy...``.

    Anything other than the exact ``#v1:`` prefix, or a failure at any
    stage, yields ``None``.

    :param fragment: Location hash including the leading ``#``
    :type fragment: Optional[str]
    :param max_bytes: Inflated size limit; defaults to the configured one
    :type max_bytes: int | None
    :return: Decoded timeline, or None when nothing usable is present
    :rtype: Timeline | None
    """
    if not isinstance(fragment, str) or not fragment.startswith(FRAGMENT_PREFIX):
        return None
    limit = max_bytes if max_bytes is not None else settings.SHARE_MAX_DECODED_BYTES
    try:
        return _decode_payload(fragment[len(FRAGMENT_PREFIX):], limit)
    except _DecodeError as exc:
        logger.info(f"Shared timeline not decodable: {exc}")
        return None
