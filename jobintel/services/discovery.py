from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from jobintel.core.config import Settings, get_settings
from jobintel.core.reference_data import FIRST_PARTY_SOURCES
from jobintel.core.telemetry import pipeline_span, set_pipeline_attributes
from jobintel.schemas.candidates import JobCandidate
from jobintel.services.aggregation import AggregationStrategy, aggregate_jobs_with_priority, count_jobs_by_source
from jobintel.services.dedupe import dedupe_jobs
from jobintel.services.locations import classify_market, parse_location
from jobintel.services.normalizer import normalize_jobs
from jobintel.services.trust import CompanyTrustContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JobDiscoveryResult:
    jobs: list[JobCandidate]
    strategy: AggregationStrategy
    input_counts: dict[str, int]
    dropped_counts: dict[str, int]
    pre_dedupe_count: int
    source_counts_pre_dedupe: dict[str, int]
    source_counts: dict[str, int]
    preferred_country: str | None
    primary_market_count: int
    secondary_market_count: int
    first_party_count: int = 0
    intel_only_count: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def jobs_found(self) -> bool:
        return len(self.jobs) > 0

    @property
    def degraded_confidence(self) -> bool:
        return self.strategy == "fallback_intel" and self.jobs_found

    @property
    def is_first_party_dominant(self) -> bool:
        return self.first_party_count > 0 and self.first_party_count >= self.intel_only_count


def run_job_discovery(
    *,
    trust: CompanyTrustContext,
    career_jobs: Iterable[Any] = (),
    linkedin_jobs: Iterable[Any] = (),
    intel_jobs: Iterable[Any] = (),
    settings: Settings | None = None,
    now: datetime | None = None,
) -> JobDiscoveryResult:
    current = settings or get_settings()
    started_at = now or datetime.now(timezone.utc)
    drops: dict[str, int] = {}

    with pipeline_span("run") as run_span:
        set_pipeline_attributes(run_span, company_domain=trust.primary_domain, preferred_country=trust.hq_country)
        with pipeline_span("normalize") as normalize_span:
            career = normalize_jobs(
                career_jobs,
                trust,
                evidence_tags=["career-page"],
                now=started_at,
                drops=drops,
                settings=current,
            )
            linkedin = normalize_jobs(
                linkedin_jobs,
                trust,
                evidence_tags=["linkedin-feed"],
                now=started_at,
                drops=drops,
                settings=current,
            )
            intel = normalize_jobs(
                intel_jobs,
                trust,
                source_hint="intel-agent",
                evidence_tags=["intel-agent"],
                now=started_at,
                drops=drops,
                settings=current,
            )
            set_pipeline_attributes(
                normalize_span,
                career_count=len(career),
                linkedin_count=len(linkedin),
                intel_count=len(intel),
                dropped=sum(drops.values()),
            )

        with pipeline_span("aggregate") as aggregate_span:
            aggregation = aggregate_jobs_with_priority(
                career_jobs=career,
                linkedin_jobs=linkedin,
                intel_jobs=intel,
                career_intel_cap=current.career_primary_intel_cap,
                linkedin_intel_cap=current.linkedin_primary_intel_cap,
            )
            set_pipeline_attributes(
                aggregate_span,
                strategy=aggregation.strategy,
                pre_dedupe_count=len(aggregation.jobs),
            )

        with pipeline_span("dedupe") as dedupe_span:
            deduped = dedupe_jobs(aggregation.jobs)
            jobs = [tag_market(job, trust.hq_country) for job in deduped]
            set_pipeline_attributes(dedupe_span, removed=len(aggregation.jobs) - len(jobs))

        source_counts = count_jobs_by_source(jobs)
        primary, secondary = split_by_market(jobs)
        result = JobDiscoveryResult(
            jobs=jobs,
            strategy=aggregation.strategy,
            input_counts={"career": len(career), "linkedin": len(linkedin), "intel": len(intel)},
            dropped_counts=drops,
            pre_dedupe_count=len(aggregation.jobs),
            source_counts_pre_dedupe=aggregation.source_counts,
            source_counts=source_counts,
            preferred_country=trust.hq_country,
            primary_market_count=len(primary),
            secondary_market_count=len(secondary),
            first_party_count=sum(source_counts.get(source, 0) for source in FIRST_PARTY_SOURCES),
            intel_only_count=source_counts.get("intel-agent", 0),
        )
        set_pipeline_attributes(
            run_span,
            strategy=result.strategy,
            total=len(jobs),
            primary_market_count=result.primary_market_count,
            degraded_confidence=result.degraded_confidence,
        )

    logger.info(
        "job discovery complete strategy=%s career=%s linkedin=%s intel=%s pre_dedupe=%s total=%s dropped=%s primary_market=%s",
        result.strategy,
        len(career),
        len(linkedin),
        len(intel),
        result.pre_dedupe_count,
        len(jobs),
        sum(drops.values()),
        result.primary_market_count,
    )
    if result.degraded_confidence:
        result.warnings.append("fallback_to_intel_jobs")
        logger.warning(
            "job discovery fell back to intel-only jobs count=%s source_counts=%s",
            len(jobs),
            source_counts,
        )
    return result


def tag_market(job: JobCandidate, preferred_country: str | None) -> JobCandidate:
    """Fill city/country from the merged location and recompute the market flag."""
    updates: dict[str, Any] = {}
    if job.location and (job.city is None or job.country is None):
        parsed = parse_location(job.location)
        if job.city is None and parsed.city is not None:
            updates["city"] = parsed.city
        if job.country is None and parsed.country is not None:
            updates["country"] = parsed.country
    market = classify_market(updates.get("country", job.country), preferred_country)
    if market != job.is_primary_market:
        updates["is_primary_market"] = market
    return job.model_copy(update=updates) if updates else job


def split_by_market(jobs: Sequence[JobCandidate]) -> tuple[list[JobCandidate], list[JobCandidate]]:
    primary = [job for job in jobs if job.is_primary_market is True]
    secondary = [job for job in jobs if job.is_primary_market is not True]
    return primary, secondary
