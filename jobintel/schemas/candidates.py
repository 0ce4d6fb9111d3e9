from datetime import datetime
from typing import Annotated, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

JobSource = Literal["careers-site", "ats-api", "linkedin", "linkedin-post", "intel-agent", "other"]
JOB_SOURCES: tuple[str, ...] = get_args(JobSource)

Confidence = Annotated[float, Field(ge=0.0, le=1.0)]


class JobCandidate(BaseModel):
    """A validated job posting. Built by the normalizer and replaced, never edited, by merges."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    url: str | None = None
    source: JobSource = "other"
    location: str | None = None
    city: str | None = None
    country: str | None = None
    is_primary_market: bool | None = None
    description: str | None = None
    industry: str | None = None
    seniority_level: str | None = None
    employment_type: str | None = None
    work_model: str | None = None
    salary: str | None = None
    salary_period: str | None = None
    currency: str | None = None
    external_id: str | None = None
    core_duties: tuple[str, ...] = ()
    must_haves: tuple[str, ...] = ()
    benefits: tuple[str, ...] = ()
    evidence_sources: tuple[str, ...] = ()
    overall_confidence: Confidence | None = None
    field_confidence: dict[str, Confidence] = Field(default_factory=dict)
    posted_at: datetime | None = None
    discovered_at: datetime | None = None
