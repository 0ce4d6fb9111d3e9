from __future__ import annotations

import json
import re
from functools import lru_cache
from typing import Any, TypedDict
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse

TRACKING_KEYS = {"ref", "fbclid", "gclid"}
HOST_RE = re.compile(r"^(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*:(?!\d)", re.IGNORECASE)


class URLNormalizationOverride(TypedDict):
    strip_query_params: set[str]
    strip_query_prefixes: set[str]
    strip_www: bool
    force_https: bool


def parse_normalization_overrides(raw: str | None) -> dict[str, URLNormalizationOverride]:
    if not raw:
        return {}
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if not isinstance(decoded, dict):
        return {}

    parsed: dict[str, URLNormalizationOverride] = {}
    for raw_domain, raw_rules in decoded.items():
        if not isinstance(raw_domain, str):
            continue
        domain = raw_domain.strip().lower().lstrip(".")
        if not domain or not isinstance(raw_rules, dict):
            continue

        parsed[domain] = {
            "strip_query_params": _coerce_lower_str_set(raw_rules.get("strip_query_params")),
            "strip_query_prefixes": _coerce_lower_str_set(raw_rules.get("strip_query_prefixes")),
            "strip_www": bool(raw_rules.get("strip_www", False)),
            "force_https": bool(raw_rules.get("force_https", False)),
        }
    return parsed


@lru_cache(maxsize=8)
def cached_normalization_overrides(raw: str | None) -> dict[str, URLNormalizationOverride]:
    return parse_normalization_overrides(raw)


def absolute_url(raw_url: Any, *, base_url: str | None = None) -> str | None:
    """Resolve collector output into an absolute http(s) URL, or None."""
    if not isinstance(raw_url, str):
        return None
    candidate = raw_url.strip()
    if not candidate:
        return None
    if candidate.startswith("//"):
        candidate = f"https:{candidate}"
    elif candidate.startswith("/"):
        if not base_url:
            return None
        candidate = urljoin(base_url.strip(), candidate)
    elif not _SCHEME_RE.match(candidate):
        candidate = f"https://{candidate}"

    try:
        parsed = urlparse(candidate)
        hostname = parsed.hostname
    except ValueError:
        return None
    if parsed.scheme.lower() not in {"http", "https"}:
        return None
    if not is_valid_host(hostname):
        return None
    return candidate


def normalize_url(raw_url: str, *, overrides: dict[str, URLNormalizationOverride] | None = None) -> str:
    parsed = urlparse(raw_url.strip())

    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.lower()
    host = netloc
    port = ""
    if ":" in netloc:
        host, port = netloc.rsplit(":", maxsplit=1)
        if (scheme == "http" and port == "80") or (scheme == "https" and port == "443"):
            netloc = host
            port = ""

    override = _match_override(host, overrides or {})
    if override and override["strip_www"] and host.startswith("www."):
        host = host[4:]
        netloc = host if not port else f"{host}:{port}"
    if override and override["force_https"] and scheme == "http":
        scheme = "https"

    path = parsed.path or "/"
    if path != "/" and path.endswith("/"):
        path = path[:-1]

    filtered_query_pairs = [
        (key, value)
        for key, value in parse_qsl(parsed.query, keep_blank_values=True)
        if not _should_strip_query_param(key, override)
    ]
    filtered_query_pairs.sort(key=lambda pair: pair[0])
    query = urlencode(filtered_query_pairs, doseq=True)
    return urlunparse((scheme, netloc, path, "", query, ""))


def url_host(url: str | None) -> str | None:
    if not url:
        return None
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    normalized = host.strip().lower().rstrip(".")
    return normalized or None


def is_valid_host(host: str | None) -> bool:
    return bool(host and HOST_RE.match(host.lower()))


def host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith(f".{domain}")


def _coerce_lower_str_set(value: Any) -> set[str]:
    if not isinstance(value, list):
        return set()
    return {item.strip().lower() for item in value if isinstance(item, str) and item.strip()}


def _is_tracking_param(key: str) -> bool:
    return key.startswith("utm_") or key in TRACKING_KEYS


def _match_override(host: str, overrides: dict[str, URLNormalizationOverride]) -> URLNormalizationOverride | None:
    if not host or not overrides:
        return None
    labels = host.split(".")
    for index in range(len(labels)):
        candidate = ".".join(labels[index:])
        if candidate in overrides:
            return overrides[candidate]
    return None


def _should_strip_query_param(key: str, override: URLNormalizationOverride | None) -> bool:
    lowered = key.lower()
    if _is_tracking_param(lowered):
        return True
    if not override:
        return False
    if lowered in override["strip_query_params"]:
        return True
    return any(lowered.startswith(prefix) for prefix in override["strip_query_prefixes"])
