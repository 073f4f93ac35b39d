"""Dashboard statistics over a loaded candidate list.

Pure functions: callers pass the result of ``RegistrySynchronizer.load_all``.
"""

from __future__ import annotations

from app.models.analytics import PipelineStats, StatusCounts
from app.models.candidate import Candidate
from app.models.enums import CandidateStatus


def count_by_status(candidates: list[Candidate]) -> StatusCounts:
    counts = StatusCounts()
    for candidate in candidates:
        field = candidate.status.value
        setattr(counts, field, getattr(counts, field) + 1)
    return counts


def compute_pipeline_stats(candidates: list[Candidate]) -> PipelineStats:
    """Return per-status counts, the rounded average score and hire rate.

    Both ratios are 0 for an empty list.
    """
    total = len(candidates)
    counts = count_by_status(candidates)
    if total == 0:
        return PipelineStats(counts=counts)

    average_score = round(sum(c.score for c in candidates) / total)
    hired = sum(1 for c in candidates if c.status == CandidateStatus.hired)
    hire_rate = round(hired / total * 100)

    return PipelineStats(
        total=total,
        counts=counts,
        average_score=average_score,
        hire_rate=hire_rate,
    )
