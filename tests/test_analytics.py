"""Unit tests for pipeline statistics and the analytics endpoint."""

from __future__ import annotations

from collections.abc import Callable

from fastapi.testclient import TestClient

from app.models.candidate import Candidate
from app.models.enums import CandidateStatus, can_transition, is_terminal
from app.services.analytics import compute_pipeline_stats, count_by_status


class TestComputePipelineStats:

    def test_empty(self) -> None:
        stats = compute_pipeline_stats([])
        assert stats.total == 0
        assert stats.average_score == 0
        assert stats.hire_rate == 0

    def test_counts_average_and_hire_rate(
        self, make_candidate: Callable[..., Candidate]
    ) -> None:
        candidates = [
            make_candidate(id="a", score=90, status=CandidateStatus.hired),
            make_candidate(id="b", score=60, status=CandidateStatus.rejected),
            make_candidate(id="c", score=31, status=CandidateStatus.screening),
        ]

        stats = compute_pipeline_stats(candidates)

        assert stats.total == 3
        assert stats.counts.hired == 1
        assert stats.counts.rejected == 1
        assert stats.counts.screening == 1
        assert stats.counts.testing == 0
        assert stats.average_score == 60
        assert stats.hire_rate == 33

    def test_count_by_status(self, make_candidate: Callable[..., Candidate]) -> None:
        counts = count_by_status([
            make_candidate(id="a", status=CandidateStatus.interview),
            make_candidate(id="b", status=CandidateStatus.interview),
        ])
        assert counts.interview == 2


class TestTransitions:

    def test_terminal_statuses(self) -> None:
        assert is_terminal(CandidateStatus.hired)
        assert is_terminal(CandidateStatus.rejected)
        assert not is_terminal(CandidateStatus.testing)

    def test_no_transition_out_of_terminal(self) -> None:
        assert not can_transition(CandidateStatus.hired, CandidateStatus.rejected)
        assert not can_transition(CandidateStatus.rejected, CandidateStatus.screening)

    def test_open_statuses_can_close(self) -> None:
        for status in (
            CandidateStatus.screening,
            CandidateStatus.testing,
            CandidateStatus.interview,
        ):
            assert can_transition(status, CandidateStatus.hired)
            assert can_transition(status, CandidateStatus.rejected)


class TestPipelineEndpoint:

    def test_pipeline_stats(
        self,
        test_client: TestClient,
        make_candidate: Callable[..., Candidate],
        seed: Callable[..., None],
    ) -> None:
        seed(
            make_candidate(id="a", score=80, status=CandidateStatus.hired),
            make_candidate(id="b", score=40),
        )

        response = test_client.get("/api/v1/analytics/pipeline")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["counts"]["hired"] == 1
        assert body["average_score"] == 60
        assert body["hire_rate"] == 50
