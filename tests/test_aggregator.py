from __future__ import annotations

import random

import pytest
from hypothesis import given, strategies as st

from bwload.metrics import TRANSPORT_FAILURE_STATUS, ErrorType, RequestOutcome, aggregate


def _outcome(request_id: int, status: int, transfer: float, size: int) -> RequestOutcome:
    return RequestOutcome(
        request_id=request_id,
        status_code=status,
        transfer_time_sec=transfer,
        bytes_received=size,
        wall_time_sec=transfer,
    )


def test_worked_example() -> None:
    outcomes = [
        _outcome(0, 200, 0.10, 100),
        _outcome(1, 500, 0.0, 0),
        _outcome(2, 200, 0.20, 200),
    ]
    stats = aggregate(outcomes, elapsed_sec=1.0)
    assert stats.total == 3
    assert stats.successful == 2
    assert stats.failed == 1
    assert stats.total_bytes == 300
    assert stats.avg_time == pytest.approx(0.15)
    assert stats.min_time == pytest.approx(0.10)
    assert stats.max_time == pytest.approx(0.20)
    assert stats.requests_per_sec == pytest.approx(2.0)
    assert stats.bytes_per_sec == pytest.approx(300.0)
    assert stats.mbps == pytest.approx(0.00229, abs=1e-5)


def test_no_latencies_leaves_extremes_undefined() -> None:
    failure = RequestOutcome(
        request_id=0,
        status_code=TRANSPORT_FAILURE_STATUS,
        transfer_time_sec=0.0,
        bytes_received=0,
        wall_time_sec=0.5,
        error_type=ErrorType.CONNECT,
    )
    stats = aggregate([failure, _outcome(1, 200, 0.0, 50)], elapsed_sec=2.0)
    assert stats.successful == 1
    assert stats.total_bytes == 50
    assert stats.avg_time == 0.0
    assert stats.min_time is None
    assert stats.max_time is None


def test_empty_run() -> None:
    stats = aggregate([], elapsed_sec=1.0)
    assert stats.total == 0
    assert stats.success_rate == 0.0
    assert stats.min_time is None


@pytest.mark.parametrize("elapsed", [0.0, -1.0])
def test_non_positive_elapsed_gives_zero_rates(elapsed: float) -> None:
    stats = aggregate([_outcome(0, 200, 0.1, 10)], elapsed_sec=elapsed)
    assert stats.requests_per_sec == 0.0
    assert stats.bytes_per_sec == 0.0
    assert stats.mbps == 0.0


outcome_strategy = st.builds(
    _outcome,
    request_id=st.integers(min_value=0, max_value=10_000),
    status=st.sampled_from([0, 200, 404, 500]),
    transfer=st.floats(min_value=0.0, max_value=5.0),
    size=st.integers(min_value=0, max_value=1_000_000),
)


@given(outcomes=st.lists(outcome_strategy, max_size=50), seed=st.integers())
def test_totals_are_order_independent(outcomes: list[RequestOutcome], seed: int) -> None:
    stats = aggregate(outcomes, elapsed_sec=3.0)
    assert stats.total == len(outcomes)
    assert stats.total_bytes == sum(o.bytes_received for o in outcomes if o.status_code == 200)
    shuffled = list(outcomes)
    random.Random(seed).shuffle(shuffled)
    other = aggregate(shuffled, elapsed_sec=3.0)
    assert (other.successful, other.failed, other.total_bytes) == (
        stats.successful,
        stats.failed,
        stats.total_bytes,
    )
    assert other.min_time == stats.min_time
    assert other.max_time == stats.max_time
    assert other.avg_time == pytest.approx(stats.avg_time)
