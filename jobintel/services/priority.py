from __future__ import annotations

from jobintel.core.reference_data import JOB_SOURCE_PRIORITY


def source_rank(source: str | None) -> int:
    if not source:
        return 0
    return JOB_SOURCE_PRIORITY.get(source, 0)


def pick_preferred_source(current: str | None, incoming: str | None) -> str | None:
    """Keep ``current`` unless ``incoming`` ranks strictly higher."""
    if not incoming:
        return current or None
    if not current:
        return incoming
    return incoming if source_rank(incoming) > source_rank(current) else current
