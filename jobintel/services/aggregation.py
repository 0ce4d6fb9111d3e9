from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from jobintel.schemas.candidates import JOB_SOURCES, JobCandidate

AggregationStrategy = Literal["career_page_primary", "linkedin_primary", "fallback_intel"]

CAREER_PRIMARY_INTEL_CAP = 5
LINKEDIN_PRIMARY_INTEL_CAP = 10


@dataclass(slots=True)
class AggregationResult:
    jobs: list[JobCandidate]
    strategy: AggregationStrategy
    source_counts: dict[str, int]

    @property
    def degraded_confidence(self) -> bool:
        return self.strategy == "fallback_intel" and bool(self.jobs)


def aggregate_jobs_with_priority(
    *,
    career_jobs: Sequence[JobCandidate] = (),
    linkedin_jobs: Sequence[JobCandidate] = (),
    intel_jobs: Sequence[JobCandidate] = (),
    career_intel_cap: int = CAREER_PRIMARY_INTEL_CAP,
    linkedin_intel_cap: int = LINKEDIN_PRIMARY_INTEL_CAP,
) -> AggregationResult:
    """Combine source lists before dedupe, trusting first-party data over LLM hints.

    Career-page/ATS jobs win outright when present; LinkedIn leads otherwise.
    Intel hints only join a primary list when their URL is new, and are capped.
    With neither primary source available the hints are returned as-is under
    ``fallback_intel``, which callers treat as a degraded result.
    """
    first_party_urls = _url_keys(career_jobs)
    linkedin_urls = _url_keys(linkedin_jobs)

    jobs: list[JobCandidate]
    strategy: AggregationStrategy
    if career_jobs:
        strategy = "career_page_primary"
        jobs = [*career_jobs, *linkedin_jobs]
        distinct_intel = [job for job in intel_jobs if _is_new_url(job, first_party_urls, linkedin_urls)]
        jobs.extend(distinct_intel[: max(0, career_intel_cap)])
    elif linkedin_jobs:
        strategy = "linkedin_primary"
        jobs = list(linkedin_jobs)
        distinct_intel = [job for job in intel_jobs if _is_new_url(job, linkedin_urls)]
        jobs.extend(distinct_intel[: max(0, linkedin_intel_cap)])
    else:
        strategy = "fallback_intel"
        jobs = list(intel_jobs)

    return AggregationResult(jobs=jobs, strategy=strategy, source_counts=count_jobs_by_source(jobs))


def count_jobs_by_source(jobs: Sequence[JobCandidate]) -> dict[str, int]:
    counts = {source: 0 for source in JOB_SOURCES}
    for job in jobs:
        source = job.source if job.source in counts else "other"
        counts[source] += 1
    return counts


def job_url_key(job: JobCandidate) -> str | None:
    if not job.url:
        return None
    key = job.url.strip().lower()
    return key or None


def _url_keys(jobs: Sequence[JobCandidate]) -> set[str]:
    keys = (job_url_key(job) for job in jobs)
    return {key for key in keys if key}


def _is_new_url(job: JobCandidate, *known: set[str]) -> bool:
    key = job_url_key(job)
    return bool(key) and not any(key in urls for urls in known)
