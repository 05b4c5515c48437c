"""Index resource."""

from __future__ import annotations

import structlog

from splunkacs.contracts import Index, IndexSpec, PollPhase
from splunkacs.engine import CancellationSignal, CombinedExistenceEquality
from splunkacs.resources.base import ResourceHandler, unwrap_or_raise

logger = structlog.get_logger(__name__)


class IndexResource(ResourceHandler):
    """Create / read / update / delete / import for indexes.

    name and data_type are fixed at creation; only searchable_days and
    max_data_size_mb can be updated in place.
    """

    def create(self, spec: IndexSpec, *, cancel: CancellationSignal | None = None) -> Index:
        created = unwrap_or_raise(self.client.create_index(spec), "Unexpected error while creating Index")
        logger.info("Created index, waiting for it to become available", resource=created.id)

        return self._wait(
            self._fetcher(self.client.get_index, created.id),
            CombinedExistenceEquality(expected=None),
            self.propagation.index_create,
            identity=created.id,
            phase=PollPhase.CREATE,
            cancel=cancel,
            summary="Unexpected error while waiting for Index",
        )

    def read(self, name: str) -> Index:
        return unwrap_or_raise(self.client.get_index(name), "Failed to read Index")

    def update(self, spec: IndexSpec, *, cancel: CancellationSignal | None = None) -> Index:
        unwrap_or_raise(self.client.update_index(spec), "Unexpected error while updating Index")
        logger.info(
            "Updated index, waiting for the change to propagate",
            resource=spec.name,
            searchable_days=spec.searchable_days,
            max_data_size_mb=spec.max_data_size_mb,
        )

        # Keeps polling through a 404, unlike the HEC token update wait
        return self._wait(
            self._fetcher(self.client.get_index, spec.name),
            CombinedExistenceEquality(expected=spec),
            self.propagation.index_update,
            identity=spec.name,
            phase=PollPhase.UPDATE,
            cancel=cancel,
            summary="Unexpected error while waiting for Index",
        )

    def delete(self, name: str) -> None:
        unwrap_or_raise(self.client.delete_index(name), "Unexpected error while deleting Index")
        logger.info("Deleted index", resource=name)

    def import_state(self, name: str) -> Index:
        return self.read(name)
