"""Convergence engine: predicates, poller and cancellation.

Example:
    from splunkacs.engine import ExistenceOnly, RetryBudget, poll

    outcome = poll(
        fetch=lambda: client.get_hec_token("my-token").classify(),
        predicate=ExistenceOnly(),
        budget=RetryBudget(max_attempts=20, interval_seconds=10.0),
        identity="my-token",
    )
    token = outcome.unwrap()
"""

from splunkacs.engine.cancellation import CancellationSignal, CancellationToken
from splunkacs.engine.clock import DEFAULT_CLOCK, Clock, MockClock, SystemClock
from splunkacs.engine.poller import RetryBudget, poll
from splunkacs.engine.predicates import (
    CombinedExistenceEquality,
    ConvergencePredicate,
    ExistenceOnly,
    FieldEquality,
    mismatched_fields,
)

__all__ = [
    "DEFAULT_CLOCK",
    "CancellationSignal",
    "CancellationToken",
    "Clock",
    "CombinedExistenceEquality",
    "ConvergencePredicate",
    "ExistenceOnly",
    "FieldEquality",
    "MockClock",
    "RetryBudget",
    "SystemClock",
    "mismatched_fields",
    "poll",
]
