"""Tests for HecTokenResource and the HEC token data source."""

import httpx
import pytest
import respx

from splunkacs.client import AcsClient
from splunkacs.contracts import (
    AcsApiError,
    PollPhase,
    PropagationExhaustedError,
    PropagationFatalError,
    ResourceOperationError,
)
from splunkacs.core.config import PropagationSettings
from splunkacs.resources import HecTokenDataSource, HecTokenResource
from tests.helpers import NOT_FOUND_BODY, RecordingSignal, hec_spec, hec_wire


@pytest.fixture
def resource(client: AcsClient, fast_propagation: PropagationSettings) -> HecTokenResource:
    return HecTokenResource(client, fast_propagation)


class TestCreate:
    @respx.mock
    def test_waits_until_token_is_visible(self, resource: HecTokenResource, base_url: str) -> None:
        spec = hec_spec()
        respx.post(f"{base_url}/inputs/http-event-collectors").mock(
            return_value=httpx.Response(202, json={"http-event-collector": {"spec": spec.to_wire()}})
        )
        get = respx.get(f"{base_url}/inputs/http-event-collectors/web").mock(
            side_effect=[
                httpx.Response(404, json=NOT_FOUND_BODY),
                httpx.Response(404, json=NOT_FOUND_BODY),
                httpx.Response(200, json=hec_wire(token="new-token")),
            ]
        )

        token = resource.create(spec, cancel=RecordingSignal())

        assert token.token == "new-token"
        assert token.id == "web"
        assert get.call_count == 3

    @respx.mock
    def test_create_failure_is_not_polled(self, resource: HecTokenResource, base_url: str) -> None:
        # No GET route: respx fails the test on any unmocked request
        respx.post(f"{base_url}/inputs/http-event-collectors").mock(
            return_value=httpx.Response(409, json={"message": "token already exists"})
        )

        with pytest.raises(ResourceOperationError, match="Unexpected error while creating HEC Token") as exc_info:
            resource.create(hec_spec())

        assert isinstance(exc_info.value.__cause__, AcsApiError)
        assert exc_info.value.__cause__.status_code == 409

    @respx.mock
    def test_never_visible_exhausts_budget(self, resource: HecTokenResource, base_url: str) -> None:
        spec = hec_spec()
        respx.post(f"{base_url}/inputs/http-event-collectors").mock(
            return_value=httpx.Response(202, json={"http-event-collector": {"spec": spec.to_wire()}})
        )
        get = respx.get(f"{base_url}/inputs/http-event-collectors/web").mock(
            return_value=httpx.Response(404, json=NOT_FOUND_BODY)
        )

        with pytest.raises(ResourceOperationError, match="waiting for HEC Token") as exc_info:
            resource.create(spec)

        cause = exc_info.value.__cause__
        assert isinstance(cause, PropagationExhaustedError)
        assert cause.attempts == 3
        assert cause.phase is PollPhase.CREATE
        assert get.call_count == 3


class TestUpdate:
    @respx.mock
    def test_waits_for_fields_to_match(self, resource: HecTokenResource, base_url: str) -> None:
        spec = hec_spec(use_ack=False, default_host="new-host")
        put = respx.put(f"{base_url}/inputs/http-event-collectors/web").mock(return_value=httpx.Response(202, json={}))
        get = respx.get(f"{base_url}/inputs/http-event-collectors/web").mock(
            side_effect=[
                httpx.Response(200, json=hec_wire(use_ack=True, default_host="old-host")),
                httpx.Response(200, json=hec_wire(use_ack=False, default_host="new-host")),
            ]
        )

        token = resource.update(spec)

        assert token.spec.matches(spec)
        assert put.called
        assert get.call_count == 2

    @respx.mock
    def test_not_found_during_update_wait_is_fatal(self, resource: HecTokenResource, base_url: str) -> None:
        respx.put(f"{base_url}/inputs/http-event-collectors/web").mock(return_value=httpx.Response(202, json={}))
        get = respx.get(f"{base_url}/inputs/http-event-collectors/web").mock(
            return_value=httpx.Response(404, json=NOT_FOUND_BODY)
        )

        with pytest.raises(ResourceOperationError, match="HEC Token update to propagate") as exc_info:
            resource.update(hec_spec())

        cause = exc_info.value.__cause__
        assert isinstance(cause, PropagationFatalError)
        assert cause.phase is PollPhase.UPDATE
        assert isinstance(cause.error, AcsApiError)
        assert cause.error.is_not_found
        assert get.call_count == 1

    @respx.mock
    def test_stale_state_exhausts_and_keeps_last_seen(self, resource: HecTokenResource, base_url: str) -> None:
        respx.put(f"{base_url}/inputs/http-event-collectors/web").mock(return_value=httpx.Response(202, json={}))
        respx.get(f"{base_url}/inputs/http-event-collectors/web").mock(
            return_value=httpx.Response(200, json=hec_wire(disabled=True))
        )

        with pytest.raises(ResourceOperationError) as exc_info:
            resource.update(hec_spec(disabled=False))

        cause = exc_info.value.__cause__
        assert isinstance(cause, PropagationExhaustedError)
        assert cause.last_state.spec.disabled is True


class TestReadDeleteImport:
    @respx.mock
    def test_read_missing_token_fails(self, resource: HecTokenResource, base_url: str) -> None:
        respx.get(f"{base_url}/inputs/http-event-collectors/gone").mock(return_value=httpx.Response(404, json=NOT_FOUND_BODY))

        with pytest.raises(ResourceOperationError, match="Failed to read HEC token"):
            resource.read("gone")

    @respx.mock
    def test_import_reads_by_name(self, resource: HecTokenResource, base_url: str) -> None:
        respx.get(f"{base_url}/inputs/http-event-collectors/web").mock(return_value=httpx.Response(200, json=hec_wire()))

        assert resource.import_state("web").id == "web"

    @respx.mock
    def test_delete(self, resource: HecTokenResource, base_url: str) -> None:
        route = respx.delete(f"{base_url}/inputs/http-event-collectors/web").mock(return_value=httpx.Response(202))

        resource.delete("web")

        assert route.called

    @respx.mock
    def test_data_source_read(self, client: AcsClient, base_url: str) -> None:
        respx.get(f"{base_url}/inputs/http-event-collectors/web").mock(
            return_value=httpx.Response(200, json=hec_wire(token="tok"))
        )

        assert HecTokenDataSource(client).read("web").to_state()["token"] == "tok"
