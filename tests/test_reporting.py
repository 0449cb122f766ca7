"""Tests for the reporting module (ReportGenerator and report dataclasses).

Covers:
- SearchRunReport construction from a SearchResult
- SessionReport defaults (session id, build id, timestamp)
- ReportGenerator: compute_summary, save (JSON I/O), to_dict
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest import mock

import numpy as np
import pytest

from src.platform.observation import Observation
from src.reporting.report import (
    ReportGenerator,
    SearchRunReport,
    SessionReport,
    _json_default,
)
from src.search.controller import SearchOutcome, SearchResult


# ── Helpers ──────────────────────────────────────────────────────────


def _make_result(
    outcome: SearchOutcome = SearchOutcome.SUCCEEDED,
    attempts: int = 37,
    strategy: str = "random-biased",
    stopped_at: int | None = None,
    budget: int = 200,
) -> SearchResult:
    """Create a ``SearchResult`` with sensible defaults."""
    succeeded = outcome is SearchOutcome.SUCCEEDED
    final_score = 10 if succeeded else 0
    return SearchResult(
        succeeded=succeeded,
        initial_score=0,
        final_score=final_score,
        attempts=attempts,
        strategy_used=strategy,
        outcome=outcome,
        budget=budget,
        stopped_at=stopped_at,
        final_observation=Observation(score=final_score, running=True, render_surface_valid=True),
    )


# ── SearchRunReport ──────────────────────────────────────────────────


class TestSearchRunReport:
    """Tests for the per-run record."""

    def test_from_result(self):
        run = SearchRunReport.from_result(3, _make_result(), duration_seconds=4.2)

        assert run.run_id == 3
        assert run.outcome == "succeeded"
        assert run.succeeded is True
        assert run.final_score == 10
        assert run.attempts == 37
        assert run.strategy_used == "random-biased"
        assert run.duration_seconds == 4.2
        assert run.final_state["score"] == 10
        assert run.final_state["running"] is True

    def test_stopped_at_carried(self):
        result = _make_result(SearchOutcome.EXHAUSTED, attempts=50, stopped_at=10, budget=50)
        run = SearchRunReport.from_result(1, result)
        assert run.outcome == "exhausted"
        assert run.stopped_at == 10
        assert run.duration_seconds is None


# ── SessionReport ────────────────────────────────────────────────────


class TestSessionReport:
    """Tests for session-level defaults."""

    def test_defaults(self):
        report = SessionReport()
        assert len(report.session_id) == 36
        assert report.game == "snake"
        assert report.runs == []
        assert report.summary == {}
        assert "T" in report.timestamp

    def test_build_id_from_ci(self):
        with mock.patch.dict(os.environ, {"CI_COMMIT_SHORT_SHA": "abc1234"}):
            assert SessionReport().build_id == "abc1234"

    def test_build_id_local(self):
        env = {k: v for k, v in os.environ.items() if k != "CI_COMMIT_SHORT_SHA"}
        with mock.patch.dict(os.environ, env, clear=True):
            assert SessionReport().build_id == "local"

    def test_unique_session_ids(self):
        assert SessionReport().session_id != SessionReport().session_id


# ── ReportGenerator ──────────────────────────────────────────────────


class TestReportGenerator:
    """Tests for summary statistics and persistence."""

    def test_add_result_numbers_runs(self, tmp_path: Path):
        gen = ReportGenerator(output_dir=tmp_path)
        first = gen.add_result(_make_result())
        second = gen.add_result(_make_result())
        assert (first.run_id, second.run_id) == (1, 2)
        assert len(gen.session.runs) == 2

    def test_empty_summary(self, tmp_path: Path):
        summary = ReportGenerator(output_dir=tmp_path).compute_summary()
        assert summary["total_runs"] == 0
        assert summary["success_rate"] == 0.0
        assert summary["median_attempts_to_goal"] is None
        assert summary["strategy_counts"] == {}

    def test_mixed_summary(self, tmp_path: Path):
        gen = ReportGenerator(output_dir=tmp_path)
        gen.add_result(_make_result(attempts=37, strategy="random-biased"), duration_seconds=4.0)
        gen.add_result(_make_result(attempts=5, strategy="spiral"), duration_seconds=1.0)
        gen.add_result(
            _make_result(SearchOutcome.EXHAUSTED, attempts=200, strategy="spiral", stopped_at=10),
            duration_seconds=19.0,
        )
        summary = gen.compute_summary()

        assert summary["total_runs"] == 3
        assert summary["succeeded"] == 2
        assert summary["exhausted"] == 1
        assert summary["environment_stopped"] == 0
        assert summary["success_rate"] == pytest.approx(0.667)
        assert summary["mean_attempts"] == pytest.approx(242 / 3)
        assert summary["median_attempts_to_goal"] == pytest.approx(21.0)
        assert summary["max_attempts_to_goal"] == 37
        assert summary["runs_with_stop"] == 1
        assert summary["strategy_counts"] == {"random-biased": 1, "spiral": 2}
        assert summary["mean_duration_seconds"] == pytest.approx(8.0)

    def test_no_successes(self, tmp_path: Path):
        gen = ReportGenerator(output_dir=tmp_path)
        gen.add_result(_make_result(SearchOutcome.ENVIRONMENT_STOPPED, attempts=10, stopped_at=10))
        summary = gen.compute_summary()
        assert summary["environment_stopped"] == 1
        assert summary["success_rate"] == 0.0
        assert summary["max_attempts_to_goal"] is None
        assert summary["mean_duration_seconds"] is None

    def test_summary_values_are_builtin_types(self, tmp_path: Path):
        gen = ReportGenerator(output_dir=tmp_path)
        gen.add_result(_make_result(), duration_seconds=1.5)
        summary = gen.compute_summary()
        assert type(summary["mean_attempts"]) is float
        assert type(summary["max_attempts_to_goal"]) is int

    def test_save_writes_json(self, tmp_path: Path):
        gen = ReportGenerator(output_dir=tmp_path / "reports", game_name="snake")
        gen.add_result(_make_result(), duration_seconds=2.0)
        path = gen.save()

        assert path.parent == tmp_path / "reports"
        assert path.name.startswith("snake_")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["game"] == "snake"
        assert data["runs"][0]["outcome"] == "succeeded"
        assert data["runs"][0]["final_state"]["score"] == 10
        assert data["summary"]["total_runs"] == 1

    def test_save_custom_filename(self, tmp_path: Path):
        gen = ReportGenerator(output_dir=tmp_path)
        assert gen.save("session.json") == tmp_path / "session.json"

    def test_to_dict_includes_summary(self, tmp_path: Path):
        gen = ReportGenerator(output_dir=tmp_path)
        gen.add_result(_make_result())
        d = gen.to_dict()
        assert d["summary"]["succeeded"] == 1
        assert d["runs"][0]["strategy_used"] == "random-biased"


class TestJsonDefault:
    """numpy values inside reports serialise cleanly."""

    def test_numpy_scalars_and_arrays(self):
        payload = {"a": np.int64(3), "b": np.float32(0.5), "c": np.arange(3)}
        assert json.loads(json.dumps(payload, default=_json_default)) == {
            "a": 3,
            "b": 0.5,
            "c": [0, 1, 2],
        }

    def test_unknown_type_raises(self):
        with pytest.raises(TypeError):
            json.dumps({"x": object()}, default=_json_default)
