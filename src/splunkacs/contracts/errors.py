"""Exception hierarchy for splunkacs.

Two families:
- API / configuration errors raised at the ACS boundary.
- Propagation errors raised when a convergence poll ends in anything other
  than Converged. These are produced by PollOutcome.unwrap() and carry the
  resource identity, the phase (create or update) and the attempt count so
  a failure message can say exactly what never converged.
"""

from __future__ import annotations

from typing import Any

from splunkacs.contracts.enums import PollPhase


class SplunkAcsError(Exception):
    """Base class for every error raised by splunkacs."""


# =============================================================================
# Boundary errors
# =============================================================================


class AcsApiError(SplunkAcsError):
    """An ACS request failed.

    Attributes:
        status_code: HTTP status, or None when the request never got a
            response (DNS failure, timeout, connection reset).
        message: Server-supplied message when available, otherwise a
            description of the transport failure.
        body: Decoded response body, if any.
    """

    def __init__(self, status_code: int | None, message: str, *, body: Any = None) -> None:
        self.status_code = status_code
        self.message = message
        self.body = body
        prefix = f"HTTP {status_code}" if status_code is not None else "transport error"
        super().__init__(f"{prefix}: {message}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ProviderConfigurationError(SplunkAcsError):
    """Provider credentials are missing or empty.

    Collects every missing attribute so the user fixes them in one pass.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "Cannot create the Splunk Admin Config API client, missing or empty: "
            + ", ".join(self.missing)
            + ". Set them in the configuration or via SPLUNK_DEPLOYMENT_NAME / SPLUNK_AUTH_TOKEN."
        )


class ResourceOperationError(SplunkAcsError):
    """A resource handler failed.

    summary is the short host-facing headline ("Unexpected error while
    creating HEC Token"). detail is the underlying message. The cause is
    always chained with ``raise ... from``.
    """

    def __init__(self, summary: str, detail: str) -> None:
        self.summary = summary
        self.detail = detail
        super().__init__(f"{summary}: {detail}")


# =============================================================================
# Propagation errors
# =============================================================================


class PropagationError(SplunkAcsError):
    """Base for non-converged poll outcomes."""

    def __init__(self, message: str, *, identity: str, phase: PollPhase, attempts: int) -> None:
        self.identity = identity
        self.phase = phase
        self.attempts = attempts
        super().__init__(message)


class PropagationExhaustedError(PropagationError):
    """Budget consumed without the remote state converging."""

    def __init__(self, *, identity: str, phase: PollPhase, attempts: int, last_state: Any = None) -> None:
        self.last_state = last_state
        super().__init__(
            f"{identity!r} did not converge after {attempts} attempts ({phase} wait)",
            identity=identity,
            phase=phase,
            attempts=attempts,
        )


class PropagationFatalError(PropagationError):
    """A fetch failed in a way the active predicate does not tolerate.

    The originating error is kept unchanged on ``error`` and is also the
    ``__cause__`` when raised through PollOutcome.unwrap().
    """

    def __init__(self, error: BaseException, *, identity: str, phase: PollPhase, attempts: int) -> None:
        self.error = error
        super().__init__(
            f"unexpected error while waiting for {identity!r} ({phase} wait, attempt {attempts}): {error}",
            identity=identity,
            phase=phase,
            attempts=attempts,
        )


class PropagationCancelledError(PropagationError):
    """The caller's cancellation signal or deadline fired mid-poll."""

    def __init__(self, *, identity: str, phase: PollPhase, attempts: int, last_state: Any = None) -> None:
        self.last_state = last_state
        super().__init__(
            f"wait for {identity!r} cancelled after {attempts} attempts ({phase} wait)",
            identity=identity,
            phase=phase,
            attempts=attempts,
        )
