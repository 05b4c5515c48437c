# src/splunkacs/engine/poller.py
"""Reconciliation poller: wait for an eventually consistent write to show up.

After a create or update, ACS may keep serving the old state (or a 404)
for minutes. poll() re-fetches the resource until a convergence predicate
accepts it, the attempt budget runs out, a fatal fetch error occurs, or the
caller cancels.

Built on tenacity with a fixed wait:
- stop_after_attempt(max_attempts) bounds the number of fetches
- retry_if_result(CONTINUE) retries only predicate rejections
- the sleep function is the cancellation signal's interruptible wait

Guarantees:
- at most max_attempts fetches
- a sleep only happens between two fetches, never after the last one or
  after a CONVERGED / FATAL verdict
- the signal is checked before each fetch and before each sleep
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from tenacity import RetryCallState, Retrying, retry_if_result, stop_after_attempt, wait_fixed

from splunkacs.contracts import (
    Cancelled,
    Converged,
    Exhausted,
    Fatal,
    FetchKind,
    FetchOutcome,
    PollOutcome,
    PollPhase,
    Verdict,
)
from splunkacs.engine.cancellation import CancellationSignal, CancellationToken
from splunkacs.engine.predicates import ConvergencePredicate, mismatched_fields

if TYPE_CHECKING:
    from splunkacs.core.config import RetryBudgetSettings

logger = structlog.get_logger(__name__)

S = TypeVar("S")


@dataclass(frozen=True, slots=True)
class RetryBudget:
    """How many fetches a poll may make and how long to wait between them.

    max_attempts is the TOTAL number of fetches, not the number of retries.
    So max_attempts=3 means: fetch, wait, fetch, wait, fetch.
    """

    max_attempts: int
    interval_seconds: float

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")

    @classmethod
    def from_settings(cls, settings: RetryBudgetSettings) -> RetryBudget:
        return cls(max_attempts=settings.max_attempts, interval_seconds=settings.interval_seconds)


class _PollCancelled(Exception):
    """Internal control flow: the signal fired before a fetch or sleep."""


@dataclass(slots=True)
class _Observation:
    """Per-poll bookkeeping. Created fresh for every poll() call."""

    attempts: int = 0
    last_state: Any = None
    last_outcome: FetchOutcome[Any] | None = None


def poll(
    fetch: Callable[[], FetchOutcome[S]],
    predicate: ConvergencePredicate,
    budget: RetryBudget,
    *,
    cancel: CancellationSignal | None = None,
    identity: str = "",
    phase: PollPhase = PollPhase.CREATE,
) -> PollOutcome[S]:
    """Poll ``fetch`` until ``predicate`` accepts a result.

    Args:
        fetch: Zero-argument callable bound to one resource, returning a
            classified FetchOutcome. Exceptions it raises are not caught.
        predicate: Decides CONVERGED / CONTINUE / FATAL per fetch.
        budget: Attempt limit and fixed interval.
        cancel: Cancellation signal; a fresh, never-cancelled token if None.
        identity: Resource name, for diagnostics and error context.
        phase: Which write is being waited on, for diagnostics.

    Returns:
        Converged, Exhausted, Fatal or Cancelled.
    """
    signal: CancellationSignal = cancel if cancel is not None else CancellationToken()
    seen = _Observation()
    log = logger.bind(resource=identity, phase=str(phase), predicate=predicate.name)

    def attempt() -> Verdict:
        if signal.is_cancelled():
            raise _PollCancelled()
        seen.attempts += 1
        outcome = fetch()
        seen.last_outcome = outcome
        if outcome.kind is FetchKind.FOUND:
            seen.last_state = outcome.state
        verdict = predicate.evaluate(outcome)
        log.debug(
            "Propagation attempt",
            attempt=seen.attempts,
            max_attempts=budget.max_attempts,
            fetch=str(outcome.kind),
            status_code=outcome.status_code,
            verdict=str(verdict),
        )
        return verdict

    def sleep(seconds: float) -> None:
        if signal.wait(seconds):
            raise _PollCancelled()

    def before_sleep(retry_state: RetryCallState) -> None:
        log.info(
            "Waiting for resource to become eventually consistent",
            attempt=retry_state.attempt_number,
            max_attempts=budget.max_attempts,
            interval_seconds=budget.interval_seconds,
        )

    retrying = Retrying(
        stop=stop_after_attempt(budget.max_attempts),
        wait=wait_fixed(budget.interval_seconds),
        retry=retry_if_result(lambda verdict: verdict is Verdict.CONTINUE),
        sleep=sleep,
        before_sleep=before_sleep,
        # Budget exhausted on a CONTINUE: hand the verdict back instead of RetryError
        retry_error_callback=lambda retry_state: Verdict.CONTINUE,
    )

    try:
        verdict = retrying(attempt)
    except _PollCancelled:
        log.warning("Propagation wait cancelled", attempts=seen.attempts)
        return Cancelled(attempts=seen.attempts, identity=identity, phase=phase, last_state=seen.last_state)

    if verdict is Verdict.CONVERGED:
        log.info("Resource converged", attempts=seen.attempts)
        return Converged(state=seen.last_state, attempts=seen.attempts)

    if verdict is Verdict.FATAL:
        # FATAL is only ever returned for an error outcome
        assert seen.last_outcome is not None and seen.last_outcome.error is not None
        log.error(
            "Unexpected error while waiting for propagation",
            attempts=seen.attempts,
            status_code=seen.last_outcome.status_code,
            error=str(seen.last_outcome.error),
        )
        return Fatal(error=seen.last_outcome.error, identity=identity, phase=phase, attempts=seen.attempts)

    expected = getattr(predicate, "expected", None)
    mismatch = (
        mismatched_fields(expected, predicate.project(seen.last_state))
        if expected is not None and seen.last_state is not None
        else []
    )
    log.error(
        "Resource did not converge within budget",
        attempts=seen.attempts,
        last_state=repr(seen.last_state),
        mismatched_fields=mismatch,
    )
    return Exhausted(attempts=seen.attempts, identity=identity, phase=phase, last_state=seen.last_state)
