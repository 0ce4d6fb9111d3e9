from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

from jobintel.schemas.candidates import JobCandidate
from jobintel.services.priority import pick_preferred_source

_FILL_IF_EMPTY_FIELDS = (
    "location",
    "industry",
    "seniority_level",
    "employment_type",
    "work_model",
    "salary",
    "salary_period",
    "currency",
    "external_id",
)
_UNION_FIELDS = ("evidence_sources", "core_duties", "must_haves", "benefits")
_EARLIEST_FIELDS = ("posted_at", "discovered_at")


def candidate_identity_key(candidate: JobCandidate) -> str:
    url = (candidate.url or "").strip().lower()
    if url:
        return f"url:{url}"
    title = (candidate.title or "").strip().lower()
    location = (candidate.location or "").strip().lower()
    return f"title:{title}|{location}"


def score_candidate_job(candidate: JobCandidate) -> int:
    """Completeness score; measures how much a record says, not whether it is right."""
    score = 0
    if _has_text(candidate.description):
        score += 5
    if _has_text(candidate.location):
        score += 2
    if candidate.core_duties:
        score += 2
    if candidate.must_haves:
        score += 1
    if candidate.benefits:
        score += 1
    if _has_text(candidate.industry):
        score += 1
    if _has_text(candidate.seniority_level):
        score += 1
    if _has_text(candidate.employment_type):
        score += 1
    if _has_text(candidate.work_model):
        score += 1
    if candidate.evidence_sources:
        score += 1
    if candidate.source and candidate.source != "other":
        score += 1
    return score


def merge_candidate_jobs(existing: JobCandidate | None, incoming: JobCandidate | None) -> JobCandidate | None:
    if existing is None:
        return incoming
    if incoming is None:
        return existing

    # Ties keep `existing` as the base record.
    if score_candidate_job(incoming) > score_candidate_job(existing):
        primary, secondary = incoming, existing
    else:
        primary, secondary = existing, incoming

    updates: dict[str, Any] = {}
    for field in _FILL_IF_EMPTY_FIELDS:
        current = getattr(primary, field)
        donor = getattr(secondary, field)
        if not _has_text(current) and _has_text(donor):
            updates[field] = donor
    # The market flag always travels with the country it was classified from.
    if primary.country is None and secondary.country is not None:
        updates["country"] = secondary.country
        updates["is_primary_market"] = secondary.is_primary_market
    if primary.city is None and secondary.city is not None:
        updates["city"] = secondary.city

    description =_longest_text(primary.description, secondary.description)
    if description != primary.description:
        updates["description"] = description

    updates["source"] = pick_preferred_source(primary.source, secondary.source) or "other"
    for field in _UNION_FIELDS:
        updates[field] = merge_text_lists(getattr(primary, field), getattr(secondary, field))
    for field in _EARLIEST_FIELDS:
        updates[field] = _earliest(getattr(primary, field), getattr(secondary, field))
    updates["field_confidence"] = merge_field_confidence(primary.field_confidence, secondary.field_confidence)
    updates["overall_confidence"] = _max_confidence(primary.overall_confidence, secondary.overall_confidence)

    return primary.model_copy(update=updates)


def dedupe_jobs(candidates: Iterable[JobCandidate | None]) -> list[JobCandidate]:
    merged: dict[str, JobCandidate] = {}
    for candidate in candidates:
        if candidate is None:
            continue
        key = candidate_identity_key(candidate)
        running = merged.get(key)
        if running is None:
            merged[key] = candidate
            continue
        merged[key] = merge_candidate_jobs(running, candidate) or running
    return list(merged.values())


def merge_text_lists(left: Iterable[Any] | None, right: Iterable[Any] | None) -> tuple[str, ...]:
    seen: set[str] = set()
    values: list[str] = []
    for source in (left or (), right or ()):
        for item in source:
            if not isinstance(item, str):
                continue
            stripped = item.strip()
            if not stripped or stripped in seen:
                continue
            seen.add(stripped)
            values.append(stripped)
    return tuple(values)


def merge_field_confidence(
    base: Mapping[str, Any] | None,
    incoming: Mapping[str, Any] | None,
) -> dict[str, float]:
    merged: dict[str, float] = {}
    for source in (base or {}, incoming or {}):
        for field, value in source.items():
            normalized = clamp_confidence(value)
            if normalized is None or not isinstance(field, str):
                continue
            merged[field] = max(merged.get(field, 0.0), normalized)
    return merged


def clamp_confidence(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return min(max(float(value), 0.0), 1.0)


def _max_confidence(left: Any, right: Any) -> float | None:
    values = [value for value in (clamp_confidence(left), clamp_confidence(right)) if value is not None]
    return max(values) if values else None


def _longest_text(current: str | None, candidate: str | None) -> str | None:
    current_text = current if _has_text(current) else ""
    next_text = candidate if _has_text(candidate) else ""
    if not next_text:
        return current
    if not current_text or len(next_text) > len(current_text):
        return next_text
    return current


def _earliest(left: datetime | None, right: datetime | None) -> datetime | None:
    left_utc = _as_utc(left)
    right_utc = _as_utc(right)
    if left_utc is None:
        return right_utc
    if right_utc is None:
        return left_utc
    return right_utc if right_utc < left_utc else left_utc


def _as_utc(value: Any) -> datetime | None:
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())
