"""Test doubles for the reconciliation poller.

ScriptedFetch replays a list of FetchOutcomes and counts calls.
RecordingSignal is a CancellationSignal that never sleeps: it records
every requested wait so tests can count sleeps exactly.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from splunkacs.contracts import AcsApiError, FetchKind, FetchOutcome, HecToken, HecTokenSpec, Index, IndexSpec


def found(state: Any) -> FetchOutcome[Any]:
    return FetchOutcome.found(state)


def not_found() -> FetchOutcome[Any]:
    return FetchOutcome.not_found(AcsApiError(404, "object not found"))


def fatal(status_code: int = 500, message: str = "internal error") -> FetchOutcome[Any]:
    return FetchOutcome(kind=FetchKind.FATAL_ERROR, error=AcsApiError(status_code, message), status_code=status_code)


def transient(status_code: int = 503) -> FetchOutcome[Any]:
    return FetchOutcome(kind=FetchKind.TRANSIENT_ERROR, error=AcsApiError(status_code, "unavailable"), status_code=status_code)


class ScriptedFetch:
    """Returns outcomes in order; the last one repeats once the script runs out.

    on_call, if given, runs after each fetch with the 1-based call number.
    """

    def __init__(self, outcomes: Sequence[FetchOutcome[Any]], *, on_call: Callable[[int], None] | None = None) -> None:
        if not outcomes:
            raise ValueError("ScriptedFetch needs at least one outcome")
        self._outcomes = list(outcomes)
        self._on_call = on_call
        self.calls = 0

    def __call__(self) -> FetchOutcome[Any]:
        outcome = self._outcomes[min(self.calls, len(self._outcomes) - 1)]
        self.calls += 1
        if self._on_call is not None:
            self._on_call(self.calls)
        return outcome


class RecordingSignal:
    """CancellationSignal double that records waits instead of sleeping.

    cancel_during_wait: cancel while performing the Nth wait (1-based),
    simulating a Ctrl-C that arrives mid-sleep.
    """

    def __init__(self, *, cancel_during_wait: int | None = None) -> None:
        self.waits: list[float] = []
        self.cancelled = False
        self._cancel_during_wait = cancel_during_wait

    def cancel(self) -> None:
        self.cancelled = True

    def is_cancelled(self) -> bool:
        return self.cancelled

    def wait(self, seconds: float) -> bool:
        if self.cancelled:
            return True
        self.waits.append(seconds)
        if self._cancel_during_wait is not None and len(self.waits) >= self._cancel_during_wait:
            self.cancelled = True
        return self.cancelled


def hec_spec(**overrides: Any) -> HecTokenSpec:
    values: dict[str, Any] = {
        "name": "web",
        "default_index": "main",
        "allowed_indexes": ("main",),
        "use_ack": False,
    }
    values.update(overrides)
    return HecTokenSpec(**values)


def hec_token(token: str = "11111111-2222-3333-4444-555555555555", **overrides: Any) -> HecToken:
    return HecToken(spec=hec_spec(**overrides), token=token)


def index(total_event_count: str = "0", **overrides: Any) -> Index:
    values: dict[str, Any] = {"name": "web_logs", "searchable_days": 30, "max_data_size_mb": 0}
    values.update(overrides)
    return Index(spec=IndexSpec(**values), total_event_count=total_event_count)


def hec_wire(token: str = "11111111-2222-3333-4444-555555555555", **spec_overrides: Any) -> dict[str, Any]:
    """ACS JSON envelope for a HEC token GET."""
    return {"http-event-collector": {"spec": hec_spec(**spec_overrides).to_wire(), "token": token}}


def index_wire(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "name": "web_logs",
        "datatype": "event",
        "searchableDays": 30,
        "maxDataSizeMB": 0,
        "totalEventCount": "0",
        "totalRawSizeMB": "0",
    }
    body.update(overrides)
    return body


NOT_FOUND_BODY = {"code": "404-object-not-found", "message": "object not found"}
