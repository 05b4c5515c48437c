"""Shared contracts: models, outcome variants, enums and errors.

This package is a leaf: it imports nothing from the engine, client or
resource layers.
"""

from splunkacs.contracts.enums import FetchKind, IndexDataType, PollPhase, Verdict
from splunkacs.contracts.errors import (
    AcsApiError,
    PropagationCancelledError,
    PropagationError,
    PropagationExhaustedError,
    PropagationFatalError,
    ProviderConfigurationError,
    ResourceOperationError,
    SplunkAcsError,
)
from splunkacs.contracts.models import (
    HecToken,
    HecTokenSpec,
    Index,
    IndexSpec,
    StackStatus,
    normalize_indexes,
)
from splunkacs.contracts.outcomes import (
    Cancelled,
    Converged,
    Exhausted,
    Fatal,
    FetchOutcome,
    PollOutcome,
    classify_fetch,
)

__all__ = [
    "AcsApiError",
    "Cancelled",
    "Converged",
    "Exhausted",
    "Fatal",
    "FetchKind",
    "FetchOutcome",
    "HecToken",
    "HecTokenSpec",
    "Index",
    "IndexDataType",
    "IndexSpec",
    "PollOutcome",
    "PollPhase",
    "PropagationCancelledError",
    "PropagationError",
    "PropagationExhaustedError",
    "PropagationFatalError",
    "ProviderConfigurationError",
    "ResourceOperationError",
    "SplunkAcsError",
    "StackStatus",
    "Verdict",
    "classify_fetch",
    "normalize_indexes",
]
