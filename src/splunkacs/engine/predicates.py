"""Convergence predicates: when to stop polling, and with what verdict.

A predicate looks at one classified fetch and answers CONVERGED, CONTINUE
or FATAL. The three variants differ only in how they treat "not found" and
whether they compare fields:

=========================  ===========  ==================  ===========
Predicate                  NOT_FOUND    FOUND               FATAL_ERROR
=========================  ===========  ==================  ===========
ExistenceOnly              CONTINUE     CONVERGED           FATAL
FieldEquality              FATAL        compare fields      FATAL
CombinedExistenceEquality  CONTINUE     compare if expected FATAL
=========================  ===========  ==================  ===========

TRANSIENT_ERROR (statuses an operator marked retryable) is CONTINUE for
every variant.

FieldEquality has no not-found carve-out: HEC token update waits assume
the token cannot disappear mid-update. Index update waits use
CombinedExistenceEquality and keep polling through a 404. Both behaviours
are kept as separate, named predicates so call sites choose explicitly.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Protocol

from splunkacs.contracts import FetchKind, FetchOutcome, Verdict


class Projectable(Protocol):
    """A spec that knows which of its fields take part in comparison."""

    def projection(self) -> dict[str, Any]: ...

    def matches(self, other: Any) -> bool: ...


def _default_project(state: Any) -> Projectable:
    spec: Projectable = attrgetter("spec")(state)
    return spec


@dataclass(frozen=True, slots=True)
class ExistenceOnly:
    """Converge as soon as the resource is visible at all.

    Used after creating a HEC token.
    """

    name: str = field(default="existence_only", init=False)

    def evaluate(self, outcome: FetchOutcome[Any]) -> Verdict:
        if outcome.kind is FetchKind.FOUND:
            return Verdict.CONVERGED
        if outcome.kind in (FetchKind.NOT_FOUND, FetchKind.TRANSIENT_ERROR):
            return Verdict.CONTINUE
        return Verdict.FATAL


@dataclass(frozen=True, slots=True)
class FieldEquality:
    """Converge once the fetched spec matches ``expected``.

    Used after updating a HEC token. Any fetch error, including 404, is
    fatal.

    Attributes:
        expected: The spec the caller just wrote.
        project: Extracts the comparable spec from a fetched state.
            Defaults to ``state.spec``.
    """

    expected: Projectable
    project: Callable[[Any], Projectable] = _default_project
    name: str = field(default="field_equality", init=False)

    def evaluate(self, outcome: FetchOutcome[Any]) -> Verdict:
        if outcome.kind is FetchKind.FOUND:
            return Verdict.CONVERGED if self.expected.matches(self.project(outcome.state)) else Verdict.CONTINUE
        if outcome.kind is FetchKind.TRANSIENT_ERROR:
            return Verdict.CONTINUE
        return Verdict.FATAL


@dataclass(frozen=True, slots=True)
class CombinedExistenceEquality:
    """Wait for existence, then (if ``expected`` is given) for field equality.

    Used after creating an index (expected=None) and after updating one.
    """

    expected: Projectable | None = None
    project: Callable[[Any], Projectable] = _default_project
    name: str = field(default="combined_existence_equality", init=False)

    def evaluate(self, outcome: FetchOutcome[Any]) -> Verdict:
        if outcome.kind is FetchKind.FOUND:
            if self.expected is None:
                return Verdict.CONVERGED
            return Verdict.CONVERGED if self.expected.matches(self.project(outcome.state)) else Verdict.CONTINUE
        if outcome.kind in (FetchKind.NOT_FOUND, FetchKind.TRANSIENT_ERROR):
            return Verdict.CONTINUE
        return Verdict.FATAL


ConvergencePredicate = ExistenceOnly | FieldEquality | CombinedExistenceEquality


def mismatched_fields(expected: Projectable, actual: Projectable) -> list[str]:
    """Names of projected fields that differ, for diagnostics."""
    want = expected.projection()
    got = actual.projection()
    return sorted(key for key in want.keys() | got.keys() if want.get(key) != got.get(key))
