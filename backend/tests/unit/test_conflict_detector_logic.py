from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from app.monitoring.prometheus_metrics import REGISTRY
from app.services.conflict_detector import (
    ConflictDetector,
    Interval,
    Participants,
    conflict_scope,
    intervals_overlap,
)

NINE = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


def _interval(start_h: float, end_h: float) -> Interval:
    return Interval(start=NINE + timedelta(hours=start_h), end=NINE + timedelta(hours=end_h))


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        ((0, 1), (0, 1), True),  # identical
        ((0, 2), (0.5, 1), True),  # containment
        ((0, 1), (0.5, 1.5), True),  # partial
        ((0, 1), (1, 2), False),  # touching end -> start
        ((1, 2), (0, 1), False),  # touching start -> end
        ((0, 1), (2, 3), False),  # disjoint
    ],
)
def test_intervals_overlap_is_half_open(a, b, expected) -> None:
    assert intervals_overlap(_interval(*a), _interval(*b)) is expected
    assert intervals_overlap(_interval(*b), _interval(*a)) is expected


def test_naive_instants_are_treated_as_utc() -> None:
    naive = Interval(start=datetime(2030, 1, 7, 9, 30), end=datetime(2030, 1, 7, 10, 30))
    assert intervals_overlap(naive, _interval(0, 1))


def test_empty_interval_detection() -> None:
    assert _interval(1, 1).is_empty
    assert _interval(2, 1).is_empty
    assert not _interval(1, 2).is_empty


def test_conflict_scope_prefers_teacher_calendar() -> None:
    participants = Participants(teacher_id="T1", learner_id="L1")
    assert conflict_scope(SimpleNamespace(teacher_id="T1", learner_id="L9"), participants) == "teacher"
    assert conflict_scope(SimpleNamespace(teacher_id="T9", learner_id="L1"), participants) == "learner"


def test_find_conflict_queries_both_participants() -> None:
    repository = MagicMock()
    repository.find_overlapping.return_value = None
    detector = ConflictDetector(MagicMock(), repository)
    interval = _interval(0, 1)

    result = detector.find_conflict(Participants("T1", "L1"), interval, exclude_session_id="S1")

    assert result is None
    repository.find_overlapping.assert_called_once_with(
        interval.start,
        interval.end,
        teacher_id="T1",
        learner_id="L1",
        exclude_session_id="S1",
    )


def test_find_conflict_returns_existing_session_and_counts_it() -> None:
    existing = SimpleNamespace(id="S-existing", teacher_id="T2", learner_id="L1")
    repository = MagicMock()
    repository.find_overlapping.return_value = existing
    detector = ConflictDetector(MagicMock(), repository)
    before = REGISTRY.get_sample_value("skillswap_scheduling_conflicts_total", {"scope": "learner"}) or 0.0

    result = detector.find_conflict(Participants("T1", "L1"), _interval(0, 1))

    assert result is existing
    after = REGISTRY.get_sample_value("skillswap_scheduling_conflicts_total", {"scope": "learner"})
    assert after == before + 1
