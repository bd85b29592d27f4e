"""
Profile decoder: on-chain profile values -> canonical PersistedProfile records.

A chain binding returns a user's profiles either as positional tuples
(country, name, score, ageMonths, cards, totalAccounts, utilization,
delinquencies, contentReferenceId, timestamp) or as keyed records with the
same field names. Each item is classified into one of the two shapes and
decoded by the matching branch; both branches feed the same builder, so the
same underlying values always produce an equal PersistedProfile.

Unrecognized input never raises. None, empty collections and unknown shapes
decode to an empty collection; a non-empty input that yields nothing is
logged as a warning.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterable

from credit_passport.passport_logging import get_logger
from credit_passport.profiles.models import (
    CHAIN_FIELD_ORDER,
    DEFAULT_COUNTRY,
    DEFAULT_NAME,
    DEFAULT_UTILIZATION,
    WIRE_TO_ATTR,
    PersistedProfile,
)
from credit_passport.scoring.score_codec import score_from_value

logger = get_logger(__name__)

_ATTR_TO_WIRE: dict[str, str] = {attr: wire for wire, attr in WIRE_TO_ATTR.items()}


class ProfileShape(str, Enum):
    SEQUENCE = "sequence"
    RECORD = "record"


def classify_shape(item: Any) -> ProfileShape | None:
    """Return the encoding of one profile item, or None when it is neither shape."""
    if isinstance(item, Mapping):
        return ProfileShape.RECORD
    if isinstance(item, (str, bytes, bytearray)):
        return None
    if isinstance(item, (list, tuple)):
        return ProfileShape.SEQUENCE
    return None


def to_int(value: Any, default: int = 0) -> int:
    """
    Convert chain/JSON numerics (int, big-int wrappers, numeric strings,
    floats, Decimal) to int without float round-tripping. Invalid -> default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, Decimal):
        return int(value) if value.is_finite() else default
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return default
        return int(parsed) if parsed.is_finite() else default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _to_count(value: Any) -> int:
    return max(0, to_int(value))


def _to_text(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    text = str(value).strip()
    return text or default


def _build(fields: Mapping[str, Any]) -> PersistedProfile:
    """Shared builder: camelCase field map -> PersistedProfile with field defaults."""
    country = _to_text(fields.get("country"), DEFAULT_COUNTRY)
    reference = _to_text(fields.get("contentReferenceId"), "")
    return PersistedProfile(
        country=country,
        name=_to_text(fields.get("name"), DEFAULT_NAME),
        score=score_from_value(fields.get("score"), country),
        age_months=_to_count(fields.get("ageMonths")),
        cards=_to_count(fields.get("cards")),
        total_accounts=_to_count(fields.get("totalAccounts")),
        utilization=_to_text(fields.get("utilization"), DEFAULT_UTILIZATION),
        delinquencies=_to_count(fields.get("delinquencies")),
        analysis=_to_text(fields.get("analysis"), ""),
        markdown_summary=_to_text(fields.get("markdownSummary"), ""),
        timestamp=_to_count(fields.get("timestamp")),
        content_reference_id=reference or None,
    )


def _decode_sequence(item: list[Any] | tuple[Any, ...]) -> PersistedProfile:
    fields = {name: item[i] for i, name in enumerate(CHAIN_FIELD_ORDER) if i < len(item)}
    return _build(fields)


def _decode_record(item: Mapping[str, Any]) -> PersistedProfile:
    fields: dict[str, Any] = {}
    for key, value in item.items():
        wire = key if key in WIRE_TO_ATTR else _ATTR_TO_WIRE.get(key)
        if wire is not None and wire not in fields:
            fields[wire] = value
    return _build(fields)


def decode_profile(item: Any) -> PersistedProfile | None:
    """Decode one profile item; None when its shape is not recognized."""
    shape = classify_shape(item)
    if shape is ProfileShape.SEQUENCE:
        return _decode_sequence(item)
    if shape is ProfileShape.RECORD:
        return _decode_record(item)
    return None


def decode_profiles(raw: Any) -> tuple[PersistedProfile, ...]:
    """
    Decode a chain read into a ProfileCollection (tuple, chronological order).

    raw is the list returned by the chain binding. None, an empty list or an
    unrecognized value returns ().
    """
    if raw is None:
        return ()
    if isinstance(raw, (str, bytes, bytearray, Mapping)) or not isinstance(raw, Iterable):
        logger.warning("profile_decode_unrecognized_collection", type=type(raw).__name__)
        return ()
    items = list(raw)
    if not items:
        return ()
    out: list[PersistedProfile] = []
    skipped = 0
    for item in items:
        profile = decode_profile(item)
        if profile is None:
            skipped += 1
            continue
        out.append(profile)
    if skipped:
        logger.warning(
            "profile_decode_items_skipped",
            received=len(items),
            decoded=len(out),
            skipped=skipped,
        )
    return tuple(out)
