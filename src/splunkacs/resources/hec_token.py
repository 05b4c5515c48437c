"""HTTP Event Collector token resource."""

from __future__ import annotations

import structlog

from splunkacs.contracts import HecToken, HecTokenSpec, PollPhase
from splunkacs.engine import CancellationSignal, ExistenceOnly, FieldEquality
from splunkacs.resources.base import ResourceHandler, unwrap_or_raise

logger = structlog.get_logger(__name__)


class HecTokenResource(ResourceHandler):
    """Create / read / update / delete / import for HEC tokens.

    The resource id is the token name. Renaming a token means replacing it.
    """

    def create(self, spec: HecTokenSpec, *, cancel: CancellationSignal | None = None) -> HecToken:
        created = unwrap_or_raise(self.client.create_hec_token(spec), "Unexpected error while creating HEC Token")
        logger.info("Created HEC token, waiting for it to become available", resource=created.name)

        # A new token only has to exist; its spec is whatever ACS applied
        return self._wait(
            self._fetcher(self.client.get_hec_token, created.name),
            ExistenceOnly(),
            self.propagation.hec_token_create,
            identity=created.name,
            phase=PollPhase.CREATE,
            cancel=cancel,
            summary="Unexpected error while waiting for HEC Token",
        )

    def read(self, name: str) -> HecToken:
        return unwrap_or_raise(self.client.get_hec_token(name), "Failed to read HEC token")

    def update(self, spec: HecTokenSpec, *, cancel: CancellationSignal | None = None) -> HecToken:
        unwrap_or_raise(self.client.update_hec_token(spec), "Unexpected error while updating HEC Token")
        logger.info("Updated HEC token, waiting for the change to propagate", resource=spec.name)

        # No not-found carve-out: the token existed before the update
        return self._wait(
            self._fetcher(self.client.get_hec_token, spec.name),
            FieldEquality(expected=spec),
            self.propagation.hec_token_update,
            identity=spec.name,
            phase=PollPhase.UPDATE,
            cancel=cancel,
            summary="Encountered an error while waiting for HEC Token update to propagate",
        )

    def delete(self, name: str) -> None:
        unwrap_or_raise(self.client.delete_hec_token(name), "Unexpected error while deleting HEC Token")
        logger.info("Deleted HEC token", resource=name)

    def import_state(self, name: str) -> HecToken:
        """Adopt an existing token by name."""
        return self.read(name)
