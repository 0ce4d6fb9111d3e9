from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time, timezone
from typing import Any, Literal
from urllib.parse import urlparse

from pydantic import ValidationError

from jobintel.core.config import Settings, get_settings
from jobintel.core.reference_data import GENERIC_JOB_TITLES
from jobintel.core.urls import absolute_url, cached_normalization_overrides, normalize_url, url_host
from jobintel.schemas.candidates import JOB_SOURCES, JobCandidate
from jobintel.schemas.discoveries import RawJobDescriptor
from jobintel.services.dedupe import clamp_confidence, merge_text_lists
from jobintel.services.locations import classify_market, normalize_country, parse_location
from jobintel.services.trust import (
    CompanyTrustContext,
    determine_job_source,
    is_likely_real_job_url,
    is_suspicious_host,
)

NormalizationDrop = Literal[
    "malformed_descriptor",
    "missing_url",
    "invalid_url",
    "red_flag_host",
    "untrusted_host",
    "missing_title",
    "degenerate_title",
]

MIN_TITLE_LENGTH = 4
_WHITESPACE_RE = re.compile(r"\s+")
_DIGITS_RE = re.compile(r"\d+")
_SLUG_SEPARATOR_RE = re.compile(r"[-_+.]+")

logger = logging.getLogger(__name__)


def normalize_job(
    raw: RawJobDescriptor | Mapping[str, Any] | Any,
    trust: CompanyTrustContext,
    *,
    source_hint: str | None = None,
    evidence_tags: Iterable[str] = (),
    now: datetime | None = None,
    settings: Settings | None = None,
) -> JobCandidate | None:
    candidate, _ = normalize_job_with_reason(
        raw,
        trust,
        source_hint=source_hint,
        evidence_tags=evidence_tags,
        now=now,
        settings=settings,
    )
    return candidate


def normalize_job_with_reason(
    raw: RawJobDescriptor | Mapping[str, Any] | Any,
    trust: CompanyTrustContext,
    *,
    source_hint: str | None = None,
    evidence_tags: Iterable[str] = (),
    now: datetime | None = None,
    settings: Settings | None = None,
) -> tuple[JobCandidate | None, NormalizationDrop | None]:
    descriptor = _coerce_descriptor(raw)
    if descriptor is None:
        return _drop("malformed_descriptor", raw)

    if not _as_text(descriptor.url):
        return _drop("missing_url", descriptor.url)
    resolved = absolute_url(descriptor.url, base_url=_as_text(descriptor.base_url))
    if resolved is None:
        return _drop("invalid_url", descriptor.url)
    overrides = cached_normalization_overrides((settings or get_settings()).url_normalization_overrides_json)
    url = normalize_url(resolved, overrides=overrides)

    host = url_host(url) or ""
    if is_suspicious_host(host, trust):
        return _drop("red_flag_host", url)
    if not is_likely_real_job_url(url, trust):
        return _drop("untrusted_host", url)

    title = sanitize_job_title(descriptor.title)
    if not title or title.lower() in GENERIC_JOB_TITLES:
        title = infer_title_from_url(url)
        if not title:
            reason: NormalizationDrop = "degenerate_title" if descriptor.title else "missing_title"
            return _drop(reason, url)

    location = _as_text(descriptor.location)
    parsed = parse_location(location)
    city = _as_text(descriptor.city) or parsed.city
    country = normalize_country(descriptor.country) or parsed.country

    candidate = JobCandidate(
        title=title,
        url=url,
        source=_resolve_source(descriptor.source, url, trust, source_hint),
        location=location,
        city=city,
        country=country,
        is_primary_market=classify_market(country, trust.hq_country),
        description=_as_text(descriptor.description),
        industry=_as_text(descriptor.industry),
        seniority_level=_as_text(descriptor.seniority_level),
        employment_type=_as_text(descriptor.employment_type),
        work_model=_as_text(descriptor.work_model),
        salary=_as_text(descriptor.salary),
        salary_period=_as_text(descriptor.salary_period),
        currency=_as_text(descriptor.currency),
        external_id=_as_text(descriptor.external_id, allow_numbers=True),
        core_duties=merge_text_lists(_as_list(descriptor.core_duties), ()),
        must_haves=merge_text_lists(_as_list(descriptor.must_haves), ()),
        benefits=merge_text_lists(_as_list(descriptor.benefits), ()),
        evidence_sources=merge_text_lists(_as_list(descriptor.evidence_sources), list(evidence_tags)),
        overall_confidence=clamp_confidence(descriptor.overall_confidence),
        field_confidence=_field_confidence(descriptor.field_confidence),
        posted_at=parse_timestamp(descriptor.posted_at),
        discovered_at=parse_timestamp(descriptor.discovered_at) or now or datetime.now(timezone.utc),
    )
    return candidate, None


def normalize_jobs(
    raws: Iterable[Any] | None,
    trust: CompanyTrustContext,
    *,
    source_hint: str | None = None,
    evidence_tags: Iterable[str] = (),
    now: datetime | None = None,
    drops: dict[str, int] | None = None,
    settings: Settings | None = None,
) -> list[JobCandidate]:
    tags = list(evidence_tags)
    candidates: list[JobCandidate] = []
    for raw in raws or ():
        candidate, reason = normalize_job_with_reason(
            raw,
            trust,
            source_hint=source_hint,
            evidence_tags=tags,
            now=now,
            settings=settings,
        )
        if candidate is not None:
            candidates.append(candidate)
        elif drops is not None and reason is not None:
            drops[reason] = drops.get(reason, 0) + 1
    return candidates


def sanitize_job_title(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return _WHITESPACE_RE.sub(" ", value).strip()


def infer_title_from_url(url: str | None) -> str:
    if not url:
        return ""
    try:
        path = urlparse(url).path
    except ValueError:
        return ""
    segments = [segment for segment in path.split("/") if segment]
    slug = segments[-1] if segments else ""
    cleaned = _SLUG_SEPARATOR_RE.sub(" ", _DIGITS_RE.sub("", slug))
    title = sanitize_job_title(cleaned)
    return title if len(title) >= MIN_TITLE_LENGTH else ""


def parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _resolve_source(raw_source: Any, url: str, trust: CompanyTrustContext, source_hint: str | None) -> str:
    label = _as_text(raw_source)
    if label and label.lower() in JOB_SOURCES:
        return label.lower()
    if source_hint in JOB_SOURCES:
        return source_hint or "other"
    return determine_job_source(url, trust)


def _coerce_descriptor(raw: Any) -> RawJobDescriptor | None:
    if isinstance(raw, RawJobDescriptor):
        return raw
    if not isinstance(raw, Mapping):
        return None
    try:
        return RawJobDescriptor.model_validate(dict(raw))
    except ValidationError:
        return None


def _field_confidence(value: Any) -> dict[str, float]:
    if not isinstance(value, Mapping):
        return {}
    kept: dict[str, float] = {}
    for field, score in value.items():
        if not isinstance(field, str) or isinstance(score, bool) or not isinstance(score, (int, float)):
            continue
        if 0.0 <= score <= 1.0:
            kept[field] = float(score)
    return kept


def _as_text(value: Any, *, allow_numbers: bool = False) -> str | None:
    if allow_numbers and isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        stripped = _WHITESPACE_RE.sub(" ", value).strip()
        return stripped or None
    return None


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return [value]
    return []


def _drop(reason: NormalizationDrop, detail: Any) -> tuple[None, NormalizationDrop]:
    logger.debug("job descriptor dropped reason=%s detail=%r", reason, detail)
    return None, reason
