from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def _aliases(name: str, *extra: str) -> AliasChoices:
    head, *rest = name.split("_")
    camel = head + "".join(part.capitalize() for part in rest)
    return AliasChoices(name, camel, *extra)


class RawJobDescriptor(BaseModel):
    """Loosely shaped collector output. Every field is optional and unchecked until normalization."""

    model_config = ConfigDict(extra="ignore")

    title: Any = None
    url: Any = Field(default=None, validation_alias=AliasChoices("url", "applicationUrl", "application_url"))
    source: Any = None
    location: Any = None
    city: Any = None
    country: Any = None
    description: Any = None
    industry: Any = None
    seniority_level: Any = Field(default=None, validation_alias=_aliases("seniority_level"))
    employment_type: Any = Field(default=None, validation_alias=_aliases("employment_type"))
    work_model: Any = Field(default=None, validation_alias=_aliases("work_model"))
    salary: Any = None
    salary_period: Any = Field(default=None, validation_alias=_aliases("salary_period"))
    currency: Any = None
    external_id: Any = Field(default=None, validation_alias=_aliases("external_id"))
    core_duties: Any = Field(default=None, validation_alias=_aliases("core_duties"))
    must_haves: Any = Field(default=None, validation_alias=_aliases("must_haves"))
    benefits: Any = None
    evidence_sources: Any = Field(
        default=None,
        validation_alias=_aliases("evidence_sources", "sourceEvidence", "source_evidence"),
    )
    overall_confidence: Any = Field(default=None, validation_alias=_aliases("overall_confidence", "confidence"))
    field_confidence: Any = Field(default=None, validation_alias=_aliases("field_confidence"))
    posted_at: Any = Field(default=None, validation_alias=_aliases("posted_at", "datePosted"))
    discovered_at: Any = Field(default=None, validation_alias=_aliases("discovered_at"))
    base_url: Any = Field(default=None, validation_alias=_aliases("base_url"))
