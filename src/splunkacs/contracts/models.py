"""Typed resource models for the Admin Config Service.

Each resource is split in two:
- a *spec* holding the fields a caller controls (and that convergence
  predicates compare), and
- the full *remote state* returned by the API, which adds server-computed
  fields such as the secret token value or usage counters.

Server-computed fields are never compared. They are only passed through
once a poll has converged.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from splunkacs.contracts.enums import IndexDataType


@dataclass(frozen=True, slots=True)
class HecTokenSpec:
    """Caller-controlled fields of an HTTP Event Collector token.

    allowed_indexes keeps the order the caller (or the API) supplied, but
    comparison treats it as an unordered set. See projection().
    """

    name: str
    default_index: str
    allowed_indexes: tuple[str, ...] = ()
    default_host: str = ""
    default_source: str = ""
    default_sourcetype: str = ""
    disabled: bool = False
    use_ack: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("HEC token name must not be empty")
        # Accept any iterable from callers but store an immutable tuple
        object.__setattr__(self, "allowed_indexes", tuple(self.allowed_indexes))

    def projection(self) -> dict[str, Any]:
        """Return the fields that must match for an update to have converged."""
        return {
            "allowed_indexes": frozenset(self.allowed_indexes),
            "default_host": self.default_host,
            "default_index": self.default_index,
            "default_source": self.default_source,
            "default_sourcetype": self.default_sourcetype,
            "disabled": self.disabled,
            "name": self.name,
            "use_ack": self.use_ack,
        }

    def matches(self, other: HecTokenSpec) -> bool:
        return self.projection() == other.projection()

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase body ACS expects."""
        return {
            "allowedIndexes": list(self.allowed_indexes),
            "defaultHost": self.default_host,
            "defaultIndex": self.default_index,
            "defaultSource": self.default_source,
            "defaultSourcetype": self.default_sourcetype,
            "disabled": self.disabled,
            "name": self.name,
            "useACK": self.use_ack,
        }

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> HecTokenSpec:
        # ACS omits empty optional fields, so everything except name is .get()
        return cls(
            name=data["name"],
            default_index=data.get("defaultIndex", ""),
            allowed_indexes=tuple(data.get("allowedIndexes") or ()),
            default_host=data.get("defaultHost", ""),
            default_source=data.get("defaultSource", ""),
            default_sourcetype=data.get("defaultSourcetype", ""),
            disabled=bool(data.get("disabled", False)),
            use_ack=bool(data.get("useACK", False)),
        )


@dataclass(frozen=True, slots=True)
class HecToken:
    """Remote state of a HEC token, including its secret value."""

    spec: HecTokenSpec
    token: str = field(default="", repr=False)

    @property
    def id(self) -> str:
        return self.spec.name

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> HecToken:
        """Decode the ``http-event-collector`` envelope."""
        item = data["http-event-collector"]
        return cls(spec=HecTokenSpec.from_wire(item["spec"]), token=item.get("token", ""))

    def to_state(self) -> dict[str, Any]:
        """Flatten into the host-facing state mapping."""
        spec = self.spec
        return {
            "id": self.id,
            "name": spec.name,
            "allowed_indexes": list(spec.allowed_indexes),
            "default_host": spec.default_host,
            "default_index": spec.default_index,
            "default_source": spec.default_source,
            "default_sourcetype": spec.default_sourcetype,
            "disabled": spec.disabled,
            "use_ack": spec.use_ack,
            "token": self.token,
        }


@dataclass(frozen=True, slots=True)
class IndexSpec:
    """Caller-controlled fields of a Splunk index."""

    name: str
    data_type: IndexDataType = IndexDataType.EVENT
    searchable_days: int = 0
    max_data_size_mb: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("index name must not be empty")
        # Raises ValueError for anything other than event/metric
        object.__setattr__(self, "data_type", IndexDataType(self.data_type))
        if self.searchable_days < 0:
            raise ValueError(f"searchable_days must be >= 0, got {self.searchable_days}")
        if self.max_data_size_mb < 0:
            raise ValueError(f"max_data_size_mb must be >= 0, got {self.max_data_size_mb}")

    def projection(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "data_type": self.data_type,
            "searchable_days": self.searchable_days,
            "max_data_size_mb": self.max_data_size_mb,
        }

    def matches(self, other: IndexSpec) -> bool:
        return self.projection() == other.projection()

    def to_create_wire(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "datatype": str(self.data_type),
            "searchableDays": self.searchable_days,
            "maxDataSizeMB": self.max_data_size_mb,
        }

    def to_update_wire(self) -> dict[str, Any]:
        # name and datatype are immutable once the index exists
        return {
            "searchableDays": self.searchable_days,
            "maxDataSizeMB": self.max_data_size_mb,
        }


@dataclass(frozen=True, slots=True)
class Index:
    """Remote state of an index, including usage counters."""

    spec: IndexSpec
    total_event_count: str = "0"
    total_raw_size_mb: str = "0"

    @property
    def id(self) -> str:
        return self.spec.name

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Index:
        spec = IndexSpec(
            name=data["name"],
            data_type=IndexDataType(data.get("datatype", IndexDataType.EVENT)),
            searchable_days=int(data.get("searchableDays", 0)),
            max_data_size_mb=int(data.get("maxDataSizeMB", 0)),
        )
        return cls(
            spec=spec,
            total_event_count=str(data.get("totalEventCount", "0")),
            total_raw_size_mb=str(data.get("totalRawSizeMB", "0")),
        )

    def to_state(self) -> dict[str, Any]:
        spec = self.spec
        return {
            "id": self.id,
            "name": spec.name,
            "data_type": str(spec.data_type),
            "searchable_days": spec.searchable_days,
            "max_data_size_mb": spec.max_data_size_mb,
            "total_event_count": self.total_event_count,
            "total_raw_size_mb": self.total_raw_size_mb,
        }


@dataclass(frozen=True, slots=True)
class StackStatus:
    """Type and version of the Splunk Cloud stack behind a deployment."""

    id: str
    stack_type: str
    version: str

    @classmethod
    def from_wire(cls, data: dict[str, Any], *, stack_url: str) -> StackStatus:
        infrastructure = data["infrastructure"]
        return cls(
            id=stack_url,
            stack_type=infrastructure.get("stackType", ""),
            version=infrastructure.get("stackVersion", ""),
        )

    def to_state(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.stack_type, "version": self.version}


def normalize_indexes(indexes: Iterable[str] | None) -> tuple[str, ...]:
    """Drop duplicates while keeping first-seen order."""
    if indexes is None:
        return ()
    return tuple(dict.fromkeys(indexes))
