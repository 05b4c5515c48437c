"""Tests for CancellationToken and MockClock."""

import threading
import time

import pytest

from splunkacs.engine import CancellationToken, MockClock


class TestCancellationToken:
    def test_fresh_token_is_not_cancelled(self) -> None:
        assert not CancellationToken().is_cancelled()

    def test_cancel_sets_flag(self) -> None:
        token = CancellationToken()
        token.cancel()

        assert token.is_cancelled()

    def test_wait_returns_immediately_when_cancelled(self) -> None:
        token = CancellationToken()
        token.cancel()

        start = time.monotonic()
        assert token.wait(30.0) is True
        assert time.monotonic() - start < 1.0

    def test_cancel_from_another_thread_wakes_wait(self) -> None:
        token = CancellationToken()
        timer = threading.Timer(0.05, token.cancel)
        timer.start()
        try:
            start = time.monotonic()
            assert token.wait(30.0) is True
            assert time.monotonic() - start < 5.0
        finally:
            timer.cancel()

    def test_uncancelled_wait_runs_full_timeout(self) -> None:
        assert CancellationToken().wait(0.01) is False

    def test_deadline_on_mock_clock(self) -> None:
        clock = MockClock(start=100.0)
        token = CancellationToken(deadline_seconds=30.0, clock=clock)

        clock.advance(29.0)
        assert not token.is_cancelled()
        assert token.remaining() == pytest.approx(1.0)

        clock.advance(1.0)
        assert token.is_cancelled()
        assert token.remaining() == 0.0

    def test_no_deadline_has_no_remaining(self) -> None:
        assert CancellationToken().remaining() is None

    def test_negative_deadline_rejected(self) -> None:
        with pytest.raises(ValueError, match="deadline_seconds must be >= 0"):
            CancellationToken(deadline_seconds=-1.0)


class TestMockClock:
    def test_advance(self) -> None:
        clock = MockClock(start=1.0)
        clock.advance(0.5)

        assert clock.monotonic() == 1.5

    def test_negative_advance_rejected(self) -> None:
        with pytest.raises(ValueError, match="negative"):
            MockClock().advance(-1.0)
