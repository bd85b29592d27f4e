"""
Persistence envelope: what gets stored once a user confirms a ParsedProfile.

Two payloads:
  1. content blob (every ParsedProfile field + userAddress + createdAt) pinned
     to content-addressed storage, which returns a content reference (CID);
  2. chain write arguments in record order, with that reference in the
     contentReferenceId slot. The chain assigns the timestamp.

commit_profile() runs the two calls in order. Either failing raises
PersistenceError; a content blob pinned before a failed chain write is left
as is (its reference is on the error) and nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol, Sequence

from credit_passport.core.exceptions import PersistenceError
from credit_passport.passport_logging import bind_address
from credit_passport.profiles.models import ParsedProfile
from credit_passport.scoring.score_codec import format_score

STAGE_CONTENT = "content"
STAGE_CHAIN = "chain"


class ContentPinner(Protocol):
    def pin_json(self, content: dict[str, Any]) -> str: ...


class ChainWriter(Protocol):
    def write_profile(self, address: str, args: Sequence[Any]) -> None: ...


@dataclass(frozen=True)
class CommitReceipt:
    content_reference_id: str
    chain_args: tuple[Any, ...]
    content: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"cid": self.content_reference_id, "args": list(self.chain_args)}


def _iso_utc(moment: datetime | None) -> str:
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def build_content_payload(
    profile: ParsedProfile,
    user_address: str,
    created_at: datetime | None = None,
) -> dict[str, Any]:
    """JSON-ready blob for content storage; createdAt is ISO-8601 UTC."""
    payload = profile.to_dict()
    payload["userAddress"] = user_address
    payload["createdAt"] = _iso_utc(created_at)
    return payload


def build_chain_args(profile: ParsedProfile, content_reference_id: str) -> tuple[Any, ...]:
    """(country, name, score, ageMonths, cards, totalAccounts, utilization, delinquencies, contentReferenceId)."""
    return (
        profile.country,
        profile.name,
        format_score(profile.score),
        profile.age_months,
        profile.cards,
        profile.total_accounts,
        profile.utilization,
        profile.delinquencies,
        content_reference_id,
    )


def commit_profile(
    profile: ParsedProfile,
    user_address: str,
    pinner: ContentPinner,
    chain_writer: ChainWriter,
    *,
    created_at: datetime | None = None,
) -> CommitReceipt:
    """Pin the content blob, then write the chain record. PersistenceError on either failure."""
    log = bind_address(user_address)
    content = build_content_payload(profile, user_address, created_at)

    try:
        reference = pinner.pin_json(content)
    except Exception as e:
        log.error("commit_content_failed", error=str(e))
        raise PersistenceError(f"Content storage failed: {e}", stage=STAGE_CONTENT) from e
    if not isinstance(reference, str) or not reference.strip():
        log.error("commit_content_missing_reference")
        raise PersistenceError("Content storage returned no content reference", stage=STAGE_CONTENT)
    reference = reference.strip()

    args = build_chain_args(profile, reference)
    try:
        chain_writer.write_profile(user_address, args)
    except Exception as e:
        log.error("commit_chain_failed", cid=reference, error=str(e))
        raise PersistenceError(
            f"Chain write failed: {e}",
            stage=STAGE_CHAIN,
            content_reference_id=reference,
        ) from e

    log.info("commit_profile_done", cid=reference, country=profile.country)
    return CommitReceipt(content_reference_id=reference, chain_args=args, content=content)
