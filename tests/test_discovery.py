from __future__ import annotations

import logging
from datetime import datetime, timezone

from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from jobintel.core.config import Settings
from jobintel.core.telemetry import setup_telemetry, shutdown_telemetry
from jobintel.schemas.candidates import JobCandidate
from jobintel.services.discovery import run_job_discovery, split_by_market, tag_market
from jobintel.services.trust import CompanyTrustContext, build_trust_context

NOW = datetime(2026, 4, 2, 8, 30, tzinfo=timezone.utc)


def test_run_job_discovery_prefers_career_jobs_and_merges_duplicates() -> None:
    result = run_job_discovery(
        trust=_trust(),
        career_jobs=[
            {
                "title": "Backend Engineer",
                "url": "https://globex.io/careers/backend",
                "location": "Tel Aviv, Israel",
                "description": "Own the order service.",
            },
            {"title": "Sales Lead", "url": "https://globex.io/careers/sales", "location": "London, UK"},
            {"title": "Placeholder", "url": "https://example.com/careers/1"},
        ],
        linkedin_jobs=[
            {
                "title": "Backend Engineer",
                "url": "https://globex.io/careers/backend/?utm_source=linkedin",
                "source": "linkedin",
            }
        ],
        intel_jobs=[
            {"title": "Data Analyst", "url": "https://jobs.lever.co/globex/data-analyst", "location": "Bangalore"},
            {"title": "Rumored role"},
        ],
        settings=Settings(),
        now=NOW,
    )

    assert result.strategy == "career_page_primary"
    assert result.input_counts == {"career": 2, "linkedin": 1, "intel": 1}
    assert result.dropped_counts == {"red_flag_host": 1, "missing_url": 1}
    assert result.pre_dedupe_count == 4
    assert len(result.jobs) == 3
    assert result.jobs_found is True
    assert result.degraded_confidence is False
    assert result.warnings == []

    backend = result.jobs[0]
    assert backend.source == "careers-site"
    assert backend.description == "Own the order service."
    assert backend.evidence_sources == ("career-page", "linkedin-feed")
    assert backend.discovered_at == NOW

    assert result.source_counts_pre_dedupe["linkedin"] == 1
    assert result.source_counts["careers-site"] == 2
    assert result.source_counts["intel-agent"] == 1
    assert result.source_counts["linkedin"] == 0
    assert result.preferred_country == "Israel"
    assert result.primary_market_count == 1
    assert result.secondary_market_count == 2
    assert result.first_party_count == 2
    assert result.intel_only_count == 1
    assert result.is_first_party_dominant is True


def test_run_job_discovery_falls_back_to_intel_jobs_with_warning(caplog) -> None:
    caplog.set_level(logging.INFO, logger="jobintel.services.discovery")
    intel = [{"title": f"Role {i}", "url": f"https://jobs.lever.co/globex/role-{i}"} for i in range(4)]

    result = run_job_discovery(trust=_trust(), intel_jobs=intel, settings=Settings(), now=NOW)

    assert result.strategy == "fallback_intel"
    assert len(result.jobs) <= 4
    assert all(job.source == "intel-agent" for job in result.jobs)
    assert result.degraded_confidence is True
    assert result.is_first_party_dominant is False
    assert result.warnings == ["fallback_to_intel_jobs"]
    assert any(
        record.levelno == logging.WARNING and "fell back to intel-only jobs" in record.getMessage()
        for record in caplog.records
    )
    assert any("strategy=fallback_intel" in record.getMessage() for record in caplog.records)


def test_run_job_discovery_with_no_jobs_is_not_degraded() -> None:
    result = run_job_discovery(trust=_trust(), settings=Settings(), now=NOW)

    assert result.strategy == "fallback_intel"
    assert result.jobs_found is False
    assert result.degraded_confidence is False
    assert result.warnings == []


def test_run_job_discovery_respects_configured_intel_cap() -> None:
    result = run_job_discovery(
        trust=_trust(),
        linkedin_jobs=[{"title": "Designer", "url": "https://www.linkedin.com/jobs/view/100"}],
        intel_jobs=[{"title": f"Role {i}", "url": f"https://jobs.lever.co/globex/role-{i}"} for i in range(5)],
        settings=Settings(linkedin_primary_intel_cap=2),
        now=NOW,
    )

    assert result.strategy == "linkedin_primary"
    assert len(result.jobs) == 3
    assert result.jobs[0].source == "linkedin"


def test_run_job_discovery_applies_caller_url_overrides_before_dedupe() -> None:
    settings = Settings(url_normalization_overrides_json='{"globex.io": {"strip_query_params": ["src"]}}')

    result = run_job_discovery(
        trust=_trust(),
        career_jobs=[
            {"title": "Backend Engineer", "url": "https://globex.io/jobs/1?src=a"},
            {"title": "Backend Engineer", "url": "https://globex.io/jobs/1?src=b"},
        ],
        settings=settings,
        now=NOW,
    )

    assert result.pre_dedupe_count == 2
    assert [job.url for job in result.jobs] == ["https://globex.io/jobs/1"]


def test_run_job_discovery_records_pipeline_spans() -> None:
    exporter = InMemorySpanExporter()
    runtime = setup_telemetry(
        Settings(otel_enabled=True),
        span_processor=SimpleSpanProcessor(exporter),
        set_global=False,
    )
    try:
        run_job_discovery(
            trust=_trust(),
            career_jobs=[{"title": "Backend Engineer", "url": "https://globex.io/careers/backend"}],
            settings=Settings(),
            now=NOW,
        )
    finally:
        shutdown_telemetry(runtime)

    spans = {span.name: span for span in exporter.get_finished_spans()}
    assert set(spans) == {
        "job_discovery.run",
        "job_discovery.normalize",
        "job_discovery.aggregate",
        "job_discovery.dedupe",
    }
    assert spans["job_discovery.run"].resource.attributes["service.namespace"] == "jobintel"
    assert spans["job_discovery.run"].attributes["job_discovery.company_domain"] == "globex.io"
    assert spans["job_discovery.run"].attributes["job_discovery.total"] == 1
    assert spans["job_discovery.run"].attributes["job_discovery.degraded_confidence"] is False
    assert spans["job_discovery.normalize"].attributes["job_discovery.career_count"] == 1
    assert spans["job_discovery.aggregate"].attributes["job_discovery.strategy"] == "career_page_primary"
    assert spans["job_discovery.dedupe"].parent.span_id == spans["job_discovery.run"].context.span_id


def test_tag_market_fills_location_parts_and_recomputes_flag() -> None:
    job = JobCandidate(title="Engineer", url="https://globex.io/j/1", location="Berlin")

    tagged = tag_market(job, "Germany")
    unknown = tag_market(JobCandidate(title="Engineer", url="https://globex.io/j/2"), None)

    assert tagged.city == "Berlin"
    assert tagged.country == "Germany"
    assert tagged.is_primary_market is True
    assert unknown.is_primary_market is None
    assert unknown.city is None


def test_split_by_market_treats_unknown_as_secondary() -> None:
    home = JobCandidate(title="A", url="https://globex.io/a", is_primary_market=True)
    abroad = JobCandidate(title="B", url="https://globex.io/b", is_primary_market=False)
    unknown = JobCandidate(title="C", url="https://globex.io/c")

    primary, secondary = split_by_market([home, abroad, unknown])

    assert primary == [home]
    assert secondary == [abroad, unknown]


def _trust() -> CompanyTrustContext:
    return build_trust_context(primary_domain="globex.io", hq_country="Israel", settings=Settings())
