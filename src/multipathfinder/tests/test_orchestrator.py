"""
--------------------------------------------------------------------------------
<multipathfinder project>
src/multipathfinder/tests/test_orchestrator.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from __future__ import annotations

import logging
import threading
import time

import numpy as np
import pytest

from multipathfinder.core.interfaces import PathSettings, PathSinks
from multipathfinder.core.orchestrator import run_paths
from multipathfinder.core.types import PathResult, PathStatus
from multipathfinder.io.writers import RecordingWriter
from multipathfinder.tests.fakes import (
    GaussianModel,
    RecordingRunner,
    always_fails,
    gaussian_runner,
    odd_paths_fail,
    raises_on_first,
    returns_none_on_first,
)

SETTINGS = PathSettings(num_draws=20)


def test_each_path_seeded_by_offset_plus_index() -> None:
    runner = RecordingRunner()
    run_paths(GaussianModel(), None, runner, random_seed=9, path=4, num_paths=5, settings=SETTINGS)
    assert sorted(call["path_id"] for call in runner.calls) == [4, 5, 6, 7, 8]
    assert {call["seed"] for call in runner.calls} == {9}


def test_settings_reach_every_runner_call() -> None:
    runner = RecordingRunner()
    settings = PathSettings(num_draws=7, num_elbo_draws=3, refresh=0, optimizer="opt")
    outcome = run_paths(GaussianModel(), None, runner, random_seed=1, path=0, num_paths=3, settings=settings)
    assert all(call["settings"] is settings for call in runner.calls)
    assert [res.num_draws for res in outcome.results] == [7, 7, 7]


def test_results_independent_of_worker_count() -> None:
    model = GaussianModel()
    serial = run_paths(
        model, None, gaussian_runner, random_seed=3, path=1, num_paths=6, settings=SETTINGS, num_workers=1
    )
    pooled = run_paths(
        model, None, gaussian_runner, random_seed=3, path=1, num_paths=6, settings=SETTINGS, num_workers=6
    )
    assert serial.num_successful == pooled.num_successful == 6
    for left, right in zip(serial.results, pooled.results):
        assert np.array_equal(left.samples, right.samples)
        assert np.array_equal(left.ratios, right.ratios)


def test_slot_holds_result_of_its_own_path() -> None:
    def slow_first(model, init, *, seed, path_id, settings, sinks):
        if path_id == 0:
            time.sleep(0.05)
        return PathResult(PathStatus.OK, ratios=[float(path_id)], samples=[[float(path_id)]], eval_count=1)

    outcome = run_paths(GaussianModel(), None, slow_first, random_seed=0, path=0, num_paths=4)
    assert [float(res.ratios[0]) for res in outcome.results] == [0.0, 1.0, 2.0, 3.0]


def test_failed_paths_are_excluded_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    outcome = run_paths(GaussianModel(), None, odd_paths_fail, random_seed=1, path=0, num_paths=5, settings=SETTINGS)
    assert outcome.failed_paths == [1, 3]
    assert outcome.success_mask.tolist() == [True, False, True, False, True]
    assert outcome.results[1] is None and outcome.results[3] is None
    assert len(outcome.successful()) == 3
    assert "Pathfinder iteration: 1 failed." in caplog.text
    assert "Pathfinder iteration: 3 failed." in caplog.text


def test_eval_count_includes_failed_paths() -> None:
    outcome = run_paths(GaussianModel(), None, odd_paths_fail, random_seed=1, path=0, num_paths=4, settings=SETTINGS)
    # successful paths: 20 draws + 10; failed paths report 7
    assert outcome.eval_count == 2 * 30 + 2 * 7


def test_raising_runner_counts_as_failure_without_stopping_siblings() -> None:
    outcome = run_paths(GaussianModel(), None, raises_on_first, random_seed=1, path=0, num_paths=3, settings=SETTINGS)
    assert outcome.failed_paths == [0]
    assert outcome.num_successful == 2


def test_runner_returning_none_counts_as_failure(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    outcome = run_paths(
        GaussianModel(), None, returns_none_on_first, random_seed=1, path=0, num_paths=3, settings=SETTINGS
    )
    assert outcome.failed_paths == [0]
    assert outcome.num_successful == 2
    assert outcome.eval_count == 2 * 30
    assert "returned NoneType instead of a PathResult" in caplog.text


def test_failure_does_not_cancel_in_flight_paths() -> None:
    finished = []
    lock = threading.Lock()

    def runner(model, init, *, seed, path_id, settings, sinks):
        if path_id == 0:
            return PathResult.failure()
        time.sleep(0.02)
        with lock:
            finished.append(path_id)
        return PathResult(PathStatus.OK, ratios=[0.0], samples=[[0.0]])

    outcome = run_paths(GaussianModel(), None, runner, random_seed=0, path=0, num_paths=4, num_workers=4)
    assert sorted(finished) == [1, 2, 3]
    assert outcome.num_successful == 3


def test_interrupt_aborts_the_run() -> None:
    def interrupt() -> None:
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        run_paths(
            GaussianModel(),
            None,
            gaussian_runner,
            random_seed=0,
            path=0,
            num_paths=3,
            settings=PathSettings(num_draws=5, interrupt=interrupt),
            num_workers=1,
        )


def test_all_paths_failing_yields_empty_success_set() -> None:
    outcome = run_paths(GaussianModel(), None, always_fails, random_seed=1, path=0, num_paths=3)
    assert outcome.num_successful == 0
    assert outcome.successful() == []
    assert outcome.eval_count == 15


def test_per_path_inits_and_sinks_are_forwarded() -> None:
    runner = RecordingRunner()
    inits = [{"mu": float(i)} for i in range(3)]
    sinks = [PathSinks() for _ in range(3)]
    run_paths(GaussianModel(), inits, runner, random_seed=0, path=10, num_paths=3, settings=SETTINGS, path_sinks=sinks)
    by_path = {call["path_id"]: call for call in runner.calls}
    for i in range(3):
        assert by_path[10 + i]["init"] == {"mu": float(i)}
        assert by_path[10 + i]["sinks"] is sinks[i]


class ClosingWriter(RecordingWriter):
    def close(self) -> None:
        self.message("closed")


def test_sinks_closed_after_their_path_even_on_failure() -> None:
    sinks = [PathSinks(parameter_writer=ClosingWriter()) for _ in range(3)]
    run_paths(
        GaussianModel(), None, raises_on_first, random_seed=0, path=0, num_paths=3, settings=SETTINGS, path_sinks=sinks
    )
    assert [s.parameter_writer.messages() for s in sinks] == [["closed"]] * 3


def test_single_init_context_is_shared() -> None:
    runner = RecordingRunner()
    run_paths(GaussianModel(), {"mu": 0.5}, runner, random_seed=0, path=0, num_paths=3, settings=SETTINGS)
    assert all(call["init"] == {"mu": 0.5} for call in runner.calls)


def test_usage_errors_raise_before_dispatch() -> None:
    runner = RecordingRunner()
    with pytest.raises(ValueError, match="num_paths"):
        run_paths(GaussianModel(), None, runner, random_seed=0, path=0, num_paths=0)
    with pytest.raises(ValueError, match="init contexts"):
        run_paths(GaussianModel(), [{}, {}], runner, random_seed=0, path=0, num_paths=3)
    assert runner.calls == []
