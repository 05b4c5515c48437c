"""Shared plumbing for resource handlers.

A handler issues a write through AcsClient and then hands control to the
reconciliation poller. This base class builds the cancellation signal
from configuration and turns non-converged outcomes into
ResourceOperationError with a host-facing summary.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog

from splunkacs.client import AcsClient, ApiResponse
from splunkacs.contracts import FetchOutcome, PollPhase, PropagationError, ResourceOperationError
from splunkacs.core.config import PropagationSettings, RetryBudgetSettings
from splunkacs.engine import CancellationSignal, CancellationToken, ConvergencePredicate, RetryBudget, poll

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ResourceHandler:
    """Base for resource and data source handlers."""

    def __init__(self, client: AcsClient, propagation: PropagationSettings | None = None) -> None:
        self.client = client
        self.propagation = propagation if propagation is not None else PropagationSettings()

    def _cancellation(self, cancel: CancellationSignal | None) -> CancellationSignal:
        if cancel is not None:
            return cancel
        return CancellationToken(deadline_seconds=self.propagation.deadline_seconds)

    def _fetcher(self, get: Callable[[str], ApiResponse[T]], name: str) -> Callable[[], FetchOutcome[T]]:
        """Bind a GET to one resource name and classify its result."""
        retryable = self.propagation.retryable_status_codes

        def fetch() -> FetchOutcome[T]:
            return get(name).classify(retryable_status_codes=retryable)

        return fetch

    def _wait(
        self,
        fetch: Callable[[], FetchOutcome[T]],
        predicate: ConvergencePredicate,
        budget: RetryBudgetSettings,
        *,
        identity: str,
        phase: PollPhase,
        cancel: CancellationSignal | None,
        summary: str,
    ) -> T:
        outcome = poll(
            fetch,
            predicate,
            RetryBudget.from_settings(budget),
            cancel=self._cancellation(cancel),
            identity=identity,
            phase=phase,
        )
        try:
            state: T = outcome.unwrap()
        except PropagationError as e:
            raise ResourceOperationError(summary, str(e)) from e
        return state


def unwrap_or_raise(response: ApiResponse[T], summary: str) -> T:
    """Return the response value or raise ResourceOperationError chained to the API error."""
    if response.error is not None:
        logger.error(summary, status_code=response.status_code, error=response.error.message)
        raise ResourceOperationError(summary, str(response.error)) from response.error
    return response.unwrap()
