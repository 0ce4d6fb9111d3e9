from __future__ import annotations

import pytest

from jobintel.core.config import Settings
from jobintel.services.trust import (
    CompanyTrustContext,
    TrustContextError,
    build_trust_context,
    determine_job_source,
    is_likely_real_job_url,
    normalize_primary_domain,
)


def test_build_trust_context_normalizes_domain_and_merges_configured_lists() -> None:
    trust = build_trust_context(
        primary_domain="https://www.Globex.io/about",
        hq_country=" Israel ",
        settings=Settings(extra_trusted_job_hosts="jobs.personio.de, .recruitee.com", extra_red_flag_fragments="staging"),
    )

    assert trust.primary_domain == "globex.io"
    assert trust.hq_country == "Israel"
    assert "jobs.personio.de" in trust.trusted_hosts
    assert "recruitee.com" in trust.trusted_hosts
    assert "greenhouse.io" in trust.trusted_hosts
    assert "staging" in trust.red_flag_fragments
    assert "placeholder" in trust.red_flag_fragments


def test_build_trust_context_rejects_unusable_primary_domain() -> None:
    with pytest.raises(TrustContextError, match="invalid primary domain"):
        build_trust_context(primary_domain="not a domain", settings=Settings())


def test_build_trust_context_allows_missing_primary_domain() -> None:
    trust = build_trust_context(primary_domain=None, settings=Settings())
    assert trust.primary_domain is None
    assert is_likely_real_job_url("https://boards.greenhouse.io/globex/jobs/1", trust) is True
    assert is_likely_real_job_url("https://globex.io/careers/1", trust) is False


def test_normalize_primary_domain_handles_bare_and_invalid_values() -> None:
    assert normalize_primary_domain("globex.io") == "globex.io"
    assert normalize_primary_domain("careers.globex.io") == "careers.globex.io"
    assert normalize_primary_domain("") is None
    assert normalize_primary_domain(None) is None


def test_is_likely_real_job_url_accepts_company_and_trusted_board_hosts() -> None:
    trust = _trust()
    assert is_likely_real_job_url("https://globex.io/careers/engineer", trust) is True
    assert is_likely_real_job_url("https://careers.globex.io/engineer", trust) is True
    assert is_likely_real_job_url("https://jobs.lever.co/globex/123", trust) is True
    assert is_likely_real_job_url("https://www.linkedin.com/jobs/view/123", trust) is True


def test_is_likely_real_job_url_rejects_red_flags_and_unknown_hosts() -> None:
    trust = _trust()
    assert is_likely_real_job_url("https://jobs.example.com/role", trust) is False
    assert is_likely_real_job_url("https://placeholder.greenhouse.io/role", trust) is False
    assert is_likely_real_job_url("https://randomjobs.net/globex", trust) is False
    assert is_likely_real_job_url("https://notglobex.io/careers", trust) is False
    assert is_likely_real_job_url(None, trust) is False


def test_determine_job_source_prefers_company_domain_then_linkedin() -> None:
    trust = _trust()
    assert determine_job_source("https://careers.globex.io/jobs/1", trust) == "careers-site"
    assert determine_job_source("https://www.linkedin.com/jobs/view/1", trust) == "linkedin"
    assert determine_job_source("https://lnkd.in/abc", trust) == "linkedin"
    assert determine_job_source("https://jobs.lever.co/globex/1", trust) == "other"
    assert determine_job_source("https://jobs.lever.co/globex/1", trust, default="intel-agent") == "intel-agent"
    assert determine_job_source(None, trust) == "other"


def _trust() -> CompanyTrustContext:
    return build_trust_context(primary_domain="globex.io", hq_country="United States", settings=Settings())
