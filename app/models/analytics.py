"""Response models for dashboard analytics."""

from pydantic import BaseModel


class StatusCounts(BaseModel):
    """Number of candidates in each pipeline status."""
    screening: int = 0
    testing: int = 0
    interview: int = 0
    hired: int = 0
    rejected: int = 0


class PipelineStats(BaseModel):
    """Full response for GET /api/v1/analytics/pipeline."""
    total: int = 0
    counts: StatusCounts = StatusCounts()
    average_score: int = 0
    hire_rate: int = 0
