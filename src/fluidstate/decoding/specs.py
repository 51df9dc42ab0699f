"""Event specification primitives and registry typing.

Defines lightweight dataclasses to describe how to decode events:
- `TopicFieldSpec` / `DataFieldSpec`: typed sources for indexed topics / data fields
- `EventSpec`: one event rule (topic0, name, fields)
- `EventRegistry`: mapping from topic0 → EventSpec
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

# Indexed reference types are stored as their keccak hash in the topic.
_DYNAMIC_PREFIXES = ("string", "bytes", "(")


def is_hashed_topic_type(abi_type: str) -> bool:
    """True if an indexed value of this type is replaced by its hash."""
    if abi_type.endswith("]"):
        return True
    return abi_type.startswith(_DYNAMIC_PREFIXES) and not (
        abi_type.startswith("bytes") and abi_type[5:].isdigit()
    )


@dataclass(frozen=True)
class TopicFieldSpec:
    """Describe one indexed topic field (by topic index and ABI type)."""

    name: str
    index: int
    type: str  # e.g., "address", "uint256", "int24", "bytes32"

    @property
    def hashed(self) -> bool:
        return is_hashed_topic_type(self.type)


@dataclass(frozen=True)
class DataFieldSpec:
    """Describe one non-indexed field of the data section, in ABI order."""

    name: str
    type: str  # canonical ABI type, tuples expanded


@dataclass(frozen=True)
class EventSpec:
    """One event decoding rule."""

    topic0: str
    name: str
    topic_fields: list[TopicFieldSpec]
    data_fields: list[DataFieldSpec]

    def __post_init__(self) -> None:
        indices = [tf.index for tf in self.topic_fields]
        if sorted(indices) != list(range(1, len(indices) + 1)):
            raise ValueError(f"{self.name}: topic field indices must be 1..{len(indices)}")
        if len(indices) > 3:
            raise ValueError(f"{self.name}: at most 3 indexed fields are allowed")

    @property
    def data_types(self) -> list[str]:
        return [df.type for df in self.data_fields]


# The full registry keyed by topic0 (lowercased 0x-hex).
EventRegistry = dict[str, EventSpec]


def get_event_specs_topic0s(event_specs: Iterable[EventSpec]) -> list[str]:
    return [event_spec.topic0 for event_spec in event_specs]


def get_event_registry_topic0s(registry: EventRegistry) -> list[str]:
    return get_event_specs_topic0s(registry.values())
