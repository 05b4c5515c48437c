"""Fetch and poll outcome variants.

FetchOutcome is what one fetch of remote state looks like once classified.
PollOutcome is the terminal result of a whole reconciliation poll:

    Converged(state)  - a predicate accepted an observation
    Exhausted(n)      - max_attempts fetches, none accepted
    Fatal(error)      - a fetch error the predicate does not tolerate
    Cancelled(n)      - the caller's cancellation signal fired

Poll outcomes are plain frozen dataclasses so callers can match on them:

    match outcome:
        case Converged(state=state):
            ...
        case Exhausted(attempts=n):
            ...

or call unwrap() to get the state or a typed PropagationError.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from splunkacs.contracts.enums import FetchKind, PollPhase
from splunkacs.contracts.errors import (
    PropagationCancelledError,
    PropagationExhaustedError,
    PropagationFatalError,
)

S = TypeVar("S")

NOT_FOUND_STATUS = 404


@dataclass(frozen=True, slots=True)
class FetchOutcome(Generic[S]):
    """One classified fetch.

    Invariants:
        kind == FOUND  -> state is not None, error is None
        otherwise      -> error is not None
    """

    kind: FetchKind
    state: S | None = None
    error: BaseException | None = None
    status_code: int | None = None

    def __post_init__(self) -> None:
        if self.kind is FetchKind.FOUND:
            if self.state is None:
                raise ValueError("FOUND outcome requires a state")
            if self.error is not None:
                raise ValueError("FOUND outcome cannot carry an error")
        elif self.error is None:
            raise ValueError(f"{self.kind} outcome requires an error")

    @classmethod
    def found(cls, state: S) -> FetchOutcome[S]:
        return cls(kind=FetchKind.FOUND, state=state)

    @classmethod
    def not_found(cls, error: BaseException) -> FetchOutcome[S]:
        return cls(kind=FetchKind.NOT_FOUND, error=error, status_code=NOT_FOUND_STATUS)


def classify_fetch(
    state: S | None,
    status_code: int | None,
    error: BaseException | None,
    *,
    retryable_status_codes: Collection[int] = (),
) -> FetchOutcome[S]:
    """Turn a client's (state, status, error) triple into a FetchOutcome.

    - no error                          -> FOUND
    - status 404                        -> NOT_FOUND
    - status in retryable_status_codes  -> TRANSIENT_ERROR
    - anything else                     -> FATAL_ERROR

    A triple with neither state nor error is a client bug, not a remote
    condition, and raises ValueError.
    """
    if error is None:
        if state is None:
            raise ValueError("fetch returned neither state nor error")
        return FetchOutcome(kind=FetchKind.FOUND, state=state, status_code=status_code)
    if status_code == NOT_FOUND_STATUS:
        return FetchOutcome(kind=FetchKind.NOT_FOUND, error=error, status_code=status_code)
    if status_code is not None and status_code in retryable_status_codes:
        return FetchOutcome(kind=FetchKind.TRANSIENT_ERROR, error=error, status_code=status_code)
    return FetchOutcome(kind=FetchKind.FATAL_ERROR, error=error, status_code=status_code)


# =============================================================================
# Poll outcomes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Converged(Generic[S]):
    state: S
    attempts: int

    def unwrap(self) -> S:
        return self.state


@dataclass(frozen=True, slots=True)
class Exhausted:
    """Budget consumed. last_state is the last Found observation, if any."""

    attempts: int
    identity: str
    phase: PollPhase
    last_state: Any = None

    def unwrap(self) -> Any:
        raise PropagationExhaustedError(
            identity=self.identity,
            phase=self.phase,
            attempts=self.attempts,
            last_state=self.last_state,
        )


@dataclass(frozen=True, slots=True)
class Fatal:
    """A fetch error the predicate refused to retry. error is the original."""

    error: BaseException
    identity: str
    phase: PollPhase
    attempts: int

    def unwrap(self) -> Any:
        raise PropagationFatalError(
            self.error,
            identity=self.identity,
            phase=self.phase,
            attempts=self.attempts,
        ) from self.error


@dataclass(frozen=True, slots=True)
class Cancelled:
    attempts: int
    identity: str
    phase: PollPhase
    last_state: Any = None

    def unwrap(self) -> Any:
        raise PropagationCancelledError(
            identity=self.identity,
            phase=self.phase,
            attempts=self.attempts,
            last_state=self.last_state,
        )


PollOutcome = Converged[S] | Exhausted | Fatal | Cancelled
