from datetime import datetime, timedelta, timezone

from boxscore.services.freshness import is_fresh

NOW = datetime(2026, 10, 16, 12, 0, 0, tzinfo=timezone.utc)
WINDOW = timedelta(seconds=15)


def test_never_written_is_not_fresh() -> None:
    assert is_fresh(None, NOW, WINDOW) is False


def test_within_window_is_fresh() -> None:
    assert is_fresh(NOW - timedelta(seconds=3), NOW, WINDOW) is True
    assert is_fresh(NOW, NOW, WINDOW) is True


def test_window_edge_counts_as_fresh() -> None:
    assert is_fresh(NOW - WINDOW, NOW, WINDOW) is True


def test_older_than_window_is_stale() -> None:
    assert is_fresh(NOW - WINDOW - timedelta(microseconds=1), NOW, WINDOW) is False
    assert is_fresh(NOW - timedelta(hours=1), NOW, WINDOW) is False


def test_zero_window_only_accepts_same_instant() -> None:
    assert is_fresh(NOW, NOW, timedelta(0)) is True
    assert is_fresh(NOW - timedelta(milliseconds=1), NOW, timedelta(0)) is False
