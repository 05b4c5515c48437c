"""Resource and data source handlers."""

from splunkacs.resources.base import ResourceHandler
from splunkacs.resources.data_sources import HecTokenDataSource, IndexDataSource, StackStatusDataSource
from splunkacs.resources.hec_token import HecTokenResource
from splunkacs.resources.index import IndexResource

__all__ = [
    "HecTokenDataSource",
    "HecTokenResource",
    "IndexDataSource",
    "IndexResource",
    "ResourceHandler",
    "StackStatusDataSource",
]
