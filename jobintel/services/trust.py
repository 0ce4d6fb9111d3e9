from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jobintel.core.config import Settings, get_settings, split_csv
from jobintel.core.reference_data import JOB_URL_RED_FLAGS, LINKEDIN_HOST_MARKERS, TRUSTED_JOB_HOSTS
from jobintel.core.urls import absolute_url, host_matches, is_valid_host, url_host


class JobIntelError(Exception):
    """Base jobintel error."""


class TrustContextError(JobIntelError):
    """Raised when a company trust context is built from an unusable primary domain."""


@dataclass(slots=True, frozen=True)
class CompanyTrustContext:
    primary_domain: str | None
    trusted_hosts: frozenset[str]
    red_flag_fragments: frozenset[str]
    hq_country: str | None = None


def build_trust_context(
    *,
    primary_domain: str | None,
    hq_country: str | None = None,
    settings: Settings | None = None,
) -> CompanyTrustContext:
    current = settings or get_settings()
    domain = normalize_primary_domain(primary_domain)
    if primary_domain and primary_domain.strip() and domain is None:
        raise TrustContextError(f"invalid primary domain: {primary_domain!r}")
    return CompanyTrustContext(
        primary_domain=domain,
        trusted_hosts=TRUSTED_JOB_HOSTS | split_csv(current.extra_trusted_job_hosts),
        red_flag_fragments=JOB_URL_RED_FLAGS | split_csv(current.extra_red_flag_fragments),
        hq_country=hq_country.strip() if isinstance(hq_country, str) and hq_country.strip() else None,
    )


def normalize_primary_domain(value: Any) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    host = url_host(absolute_url(value))
    if host is None:
        return None
    if host.startswith("www."):
        host = host[4:]
    return host if is_valid_host(host) else None


def is_suspicious_host(host: str, trust: CompanyTrustContext) -> bool:
    return any(fragment in host for fragment in trust.red_flag_fragments)


def is_company_host(host: str, trust: CompanyTrustContext) -> bool:
    return bool(trust.primary_domain) and host_matches(host, trust.primary_domain or "")


def is_likely_real_job_url(url: str | None, trust: CompanyTrustContext) -> bool:
    host = url_host(url)
    if host is None or is_suspicious_host(host, trust):
        return False
    if is_company_host(host, trust):
        return True
    return any(host_matches(host, allowed) for allowed in trust.trusted_hosts)


def determine_job_source(url: str | None, trust: CompanyTrustContext, *, default: str = "other") -> str:
    host = url_host(url)
    if host is None:
        return default
    if is_company_host(host, trust):
        return "careers-site"
    if any(marker in host for marker in LINKEDIN_HOST_MARKERS):
        return "linkedin"
    return default
