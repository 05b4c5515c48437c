"""HTTP client for the Splunk Admin Config Service (ACS) v2 API.

Every method returns an ApiResponse triple (value, status_code, error)
rather than raising, because callers treat a 404 very differently
depending on context: a read fails, a create-wait keeps polling. Use
ApiResponse.unwrap() where any error should propagate, and
ApiResponse.classify() to feed a reconciliation poll.

Bearer tokens are never logged. httpx's own loggers are held at WARNING
by configure_logging().
"""

from __future__ import annotations

from collections.abc import Callable, Collection
from dataclasses import dataclass
from json import JSONDecodeError
from typing import Any, Generic, TypeVar
from urllib.parse import quote

import httpx
import structlog

from splunkacs.contracts import (
    AcsApiError,
    FetchOutcome,
    HecToken,
    HecTokenSpec,
    Index,
    IndexSpec,
    StackStatus,
    classify_fetch,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

HEC_TOKENS_PATH = "inputs/http-event-collectors"
INDEXES_PATH = "indexes"
STATUS_PATH = "status"


@dataclass(frozen=True, slots=True)
class ApiResponse(Generic[T]):
    """Result of one ACS call.

    Exactly one of value / error is set. status_code is None only when the
    request never received a response.
    """

    value: T | None
    status_code: int | None
    error: AcsApiError | None = None

    def unwrap(self) -> T:
        """Return the value or raise the error."""
        if self.error is not None:
            raise self.error
        assert self.value is not None
        return self.value

    def classify(self, *, retryable_status_codes: Collection[int] = ()) -> FetchOutcome[T]:
        return classify_fetch(
            self.value,
            self.status_code,
            self.error,
            retryable_status_codes=retryable_status_codes,
        )


def stack_url(api_base_url: str, deployment_name: str) -> str:
    return f"{api_base_url.rstrip('/')}/{quote(deployment_name, safe='')}/adminconfig/v2/"


class AcsClient:
    """Thin, synchronous ACS client.

    Example:
        with AcsClient("my-stack", token) as client:
            response = client.get_index("main")
            index = response.unwrap()
    """

    def __init__(
        self,
        deployment_name: str,
        token: str,
        *,
        api_base_url: str = "https://admin.splunk.com",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            deployment_name: URL prefix of the Splunk Cloud stack
            token: JWT authentication token
            api_base_url: ACS host
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.deployment_name = deployment_name
        self.url = stack_url(api_base_url, deployment_name)
        self._client = httpx.Client(
            base_url=self.url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> AcsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # HEC tokens
    # ------------------------------------------------------------------

    def get_hec_token(self, name: str) -> ApiResponse[HecToken]:
        return self._call("GET", f"{HEC_TOKENS_PATH}/{_segment(name)}", decode=HecToken.from_wire)

    def create_hec_token(self, spec: HecTokenSpec) -> ApiResponse[HecTokenSpec]:
        # The create response echoes the spec but not the token value
        return self._call(
            "POST",
            HEC_TOKENS_PATH,
            json=spec.to_wire(),
            decode=lambda body: HecTokenSpec.from_wire(body["http-event-collector"]["spec"]),
        )

    def update_hec_token(self, spec: HecTokenSpec) -> ApiResponse[dict[str, Any]]:
        # ACS acknowledges with 202 and an inconsistent body; callers must
        # poll for the result instead of trusting it
        return self._call("PUT", f"{HEC_TOKENS_PATH}/{_segment(spec.name)}", json=spec.to_wire(), decode=_raw)

    def delete_hec_token(self, name: str) -> ApiResponse[dict[str, Any]]:
        return self._call("DELETE", f"{HEC_TOKENS_PATH}/{_segment(name)}", decode=_raw)

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    def get_index(self, name: str) -> ApiResponse[Index]:
        return self._call("GET", f"{INDEXES_PATH}/{_segment(name)}", decode=Index.from_wire)

    def create_index(self, spec: IndexSpec) -> ApiResponse[Index]:
        return self._call("POST", INDEXES_PATH, json=spec.to_create_wire(), decode=Index.from_wire)

    def update_index(self, spec: IndexSpec) -> ApiResponse[dict[str, Any]]:
        # Like HEC token updates, the 202 body is not reliable; poll instead
        return self._call(
            "PATCH",
            f"{INDEXES_PATH}/{_segment(spec.name)}",
            json=spec.to_update_wire(),
            decode=_raw,
        )

    def delete_index(self, name: str) -> ApiResponse[dict[str, Any]]:
        return self._call("DELETE", f"{INDEXES_PATH}/{_segment(name)}", decode=_raw)

    # ------------------------------------------------------------------
    # Stack
    # ------------------------------------------------------------------

    def get_stack_status(self) -> ApiResponse[StackStatus]:
        return self._call(
            "GET",
            STATUS_PATH,
            decode=lambda body: StackStatus.from_wire(body, stack_url=self.url),
        )

    # ------------------------------------------------------------------

    def _call(
        self,
        method: str,
        path: str,
        *,
        decode: Callable[[Any], T],
        json: dict[str, Any] | None = None,
    ) -> ApiResponse[T]:
        try:
            response = self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("ACS request failed", method=method, path=path, error=str(e))
            return ApiResponse(None, None, AcsApiError(None, f"{type(e).__name__}: {e}"))

        status = response.status_code
        body = _json_body(response)

        if not response.is_success:
            message = _error_message(body) or response.reason_phrase or "request failed"
            logger.debug("ACS request returned error status", method=method, path=path, status_code=status)
            return ApiResponse(None, status, AcsApiError(status, message, body=body))

        try:
            value = decode(body if body is not None else {})
        except (KeyError, TypeError, ValueError) as e:
            return ApiResponse(
                None,
                status,
                AcsApiError(status, f"malformed {method} {path} response: {type(e).__name__}: {e}", body=body),
            )
        return ApiResponse(value, status, None)


def _segment(name: str) -> str:
    return quote(name, safe="")


def _raw(body: Any) -> dict[str, Any]:
    return body if isinstance(body, dict) else {}


def _json_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except JSONDecodeError:
        return None


def _error_message(body: Any) -> str | None:
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None
