"""Status codes, verdicts, and kinds shared across subsystem boundaries."""

from enum import StrEnum


class FetchKind(StrEnum):
    """Classification of a single fetch of remote state.

    Derived from the (state, status_code, error) triple returned by the
    ACS client. See splunkacs.contracts.outcomes.classify_fetch().
    """

    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"
    FATAL_ERROR = "fatal_error"


class Verdict(StrEnum):
    """Decision a convergence predicate makes about one fetch."""

    CONVERGED = "converged"
    CONTINUE = "continue"
    FATAL = "fatal"


class PollPhase(StrEnum):
    """Which mutating operation a poll is waiting on.

    Included in every propagation failure so the caller can tell a
    create-wait from an update-wait.
    """

    CREATE = "create"
    UPDATE = "update"


class IndexDataType(StrEnum):
    """Kinds of data a Splunk index can hold."""

    EVENT = "event"
    METRIC = "metric"
