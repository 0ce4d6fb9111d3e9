"""Heuristic classification of free-text job locations.

Parses strings such as ``"Tel Aviv, Israel"``, ``"Remote - New York, NY"`` or
``"Bangalore"`` into a city and a country, and decides whether a job sits in a
company's primary market. Nothing here raises on odd input: anything that
cannot be classified comes back as ``None``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from jobintel.core.reference_data import CITY_COUNTRY, COUNTRY_ALIASES, UNITED_STATES, US_STATE_CODES

_WORK_MODEL = r"(?:fully\s+|100%\s+)?(?:remote|hybrid|on[\s-]?site|in[\s-]office)"
_WORK_MODEL_PREFIX_RE = re.compile(rf"^\s*{_WORK_MODEL}\b(?:\s*(?:first|only|friendly|ok))?\s*[-–—:|,/]*\s*", re.IGNORECASE)
_WORK_MODEL_SUFFIX_RE = re.compile(rf"\s*[(\[]\s*{_WORK_MODEL}[^)\]]*[)\]]\s*$", re.IGNORECASE)
_PART_SPLIT_RE = re.compile(r"\s*(?:[,/–—]|\s-\s)\s*")
# A bare hyphen only separates parts when nothing else does and the whole token is not a known city.
_BARE_HYPHEN_RE = re.compile(r"\s*-\s*")
_TITLE_SPLIT_RE = re.compile(r"[\s.-]+")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(slots=True, frozen=True)
class ParsedLocation:
    city: str | None
    country: str | None


def parse_location(value: Any) -> ParsedLocation:
    text = _strip_work_model(value)
    parts = _split_parts(text)
    if not parts:
        return ParsedLocation(city=None, country=None)
    if len(parts) == 1:
        return _classify_single(parts[0])

    last = parts[-1]
    head = ", ".join(parts[:-1])
    if len(last) == 2 and last.isalpha() and last.isupper():
        alias = COUNTRY_ALIASES.get(last.lower())
        if last in US_STATE_CODES or alias is None:
            return ParsedLocation(city=head, country=UNITED_STATES)
        return ParsedLocation(city=head, country=alias)

    alias = COUNTRY_ALIASES.get(last.lower())
    if alias is not None or len(last) > 2:
        return ParsedLocation(city=head, country=alias or _title_case(last))

    known = CITY_COUNTRY.get(parts[0].lower())
    if known is not None:
        return ParsedLocation(city=known[0], country=known[1])
    return ParsedLocation(city=parts[0], country=None)


def normalize_country(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = _WHITESPACE_RE.sub(" ", value).strip()
    if not text:
        return None
    alias = COUNTRY_ALIASES.get(text.lower())
    if alias is not None:
        return alias
    return _title_case(text) or None


def is_primary_market_match(job_country: Any, preferred_country: Any) -> bool:
    job = normalize_country(job_country)
    preferred = normalize_country(preferred_country)
    if job is None or preferred is None:
        return False
    return job.casefold() == preferred.casefold()


def classify_market(job_country: Any, preferred_country: Any) -> bool | None:
    """Tri-state market flag: ``None`` when either side is unknown."""
    if normalize_country(job_country) is None or normalize_country(preferred_country) is None:
        return None
    return is_primary_market_match(job_country, preferred_country)


def _split_parts(text: str) -> list[str]:
    parts = [part for part in (piece.strip(" ()[]") for piece in _PART_SPLIT_RE.split(text)) if part]
    if len(parts) == 1 and parts[0].lower() not in CITY_COUNTRY and parts[0].lower() not in COUNTRY_ALIASES:
        return [part for part in (piece.strip() for piece in _BARE_HYPHEN_RE.split(parts[0])) if part]
    return parts


def _classify_single(token: str) -> ParsedLocation:
    known = CITY_COUNTRY.get(token.lower())
    if known is not None:
        return ParsedLocation(city=known[0], country=known[1])
    alias = COUNTRY_ALIASES.get(token.lower())
    if alias is not None or len(token) > 3:
        return ParsedLocation(city=None, country=alias or _title_case(token))
    return ParsedLocation(city=token, country=None)


def _strip_work_model(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    text = _WHITESPACE_RE.sub(" ", value).strip()
    text = _WORK_MODEL_SUFFIX_RE.sub("", text)
    text = _WORK_MODEL_PREFIX_RE.sub("", text)
    return text.strip(" -–—:|,/()[]")


def _title_case(value: str) -> str:
    return " ".join(part[0].upper() + part[1:].lower() for part in _TITLE_SPLIT_RE.split(value) if part)
