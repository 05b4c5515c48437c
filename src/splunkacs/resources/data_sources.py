"""Read-only data sources."""

from __future__ import annotations

from splunkacs.contracts import HecToken, Index, StackStatus
from splunkacs.resources.base import ResourceHandler, unwrap_or_raise


class HecTokenDataSource(ResourceHandler):
    def read(self, name: str) -> HecToken:
        return unwrap_or_raise(self.client.get_hec_token(name), "Failed to get HEC token")


class IndexDataSource(ResourceHandler):
    def read(self, name: str) -> Index:
        return unwrap_or_raise(self.client.get_index(name), "Failed to get Index")


class StackStatusDataSource(ResourceHandler):
    """Type and version of the stack; its id is the client's stack URL."""

    def read(self) -> StackStatus:
        return unwrap_or_raise(
            self.client.get_stack_status(),
            "Failed to get Stack Status during data source read",
        )
