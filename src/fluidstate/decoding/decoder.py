"""Shared ABI decoding for call results and logs.

Every decode goes through `decode_abi`, so a layout only has to be declared
once (as canonical ABI type strings) to be usable for both contract call
results and event logs. Decoding is a pure transform: failures are raised as
`DecodeError` and never logged here.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from eth_abi import decode
from eth_abi.exceptions import ABITypeError, DecodingError, ParseError

from fluidstate.core.models import EventLog
from fluidstate.decoding.specs import EventRegistry, EventSpec
from fluidstate.decoding.utils import to_raw_bytes
from fluidstate.errors import DecodeError

T = TypeVar("T")

_MISSING: Any = object()


# ---------- shared entry point ----------


def decode_abi(types: Sequence[str], data: bytes) -> tuple[Any, ...]:
    """Decode `data` against canonical ABI `types` or raise DecodeError."""
    try:
        return tuple(decode(list(types), data))
    except (DecodingError, ParseError, ABITypeError, ValueError, TypeError) as e:
        raise DecodeError(f"cannot decode {len(data)} bytes as ({','.join(types)}): {e}") from e


# ---------- call results ----------


@dataclass(frozen=True, slots=True)
class MultiResult:
    """One entry of a multicall response."""

    success: bool
    return_data: bytes


BytesLike = bytes | str


def decode_result(
    result: MultiResult | BytesLike,
    types: Sequence[str],
    parse: Callable[[tuple[Any, ...]], T],
    default: T = _MISSING,
) -> T:
    """Decode a raw call result and hand the decoded tuple to `parse`.

    A failed `MultiResult` returns `default` when one is given.
    """
    if isinstance(result, MultiResult):
        if not result.success:
            if default is not _MISSING:
                return default
            raise DecodeError("cannot decode the result of a reverted call")
        raw = result.return_data
    else:
        raw = to_raw_bytes(result)
    decoded = decode_abi(types, raw)
    try:
        return parse(decoded)
    except (ValueError, TypeError, IndexError, OverflowError) as e:
        raise DecodeError(f"decoded values do not fit the expected shape: {e}") from e


# ---------- logs ----------


@dataclass(slots=True)
class ParsedEvent:
    """Decoded event: values keyed by ABI field name."""

    name: str
    address: str
    block_number: int
    log_index: int
    values: dict[str, Any]


def _get_spec(topics: Sequence[str], registry: EventRegistry) -> EventSpec | None:
    if not topics:
        return None
    return registry.get(topics[0].lower())


def decode_log(log: EventLog, registry: EventRegistry) -> ParsedEvent | None:
    """Decode one raw log.

    Returns None when the topic0 is not in `registry`; raises DecodeError when
    the topic0 is known but the topics or data do not match its layout.
    """
    spec = _get_spec(log.topics, registry)
    if spec is None:
        return None

    if len(log.topics) != len(spec.topic_fields) + 1:
        raise DecodeError(
            f"{spec.name}: expected {len(spec.topic_fields) + 1} topics, got {len(log.topics)}"
        )

    values: dict[str, Any] = {}
    for tf in spec.topic_fields:
        topic = log.topics[tf.index]
        if tf.hashed:
            values[tf.name] = topic.lower()
        else:
            (values[tf.name],) = decode_abi([tf.type], to_raw_bytes(topic))

    try:
        data = log.data_bytes()
    except ValueError as e:
        raise DecodeError(f"{spec.name}: data is not valid hex") from e
    decoded = decode_abi(spec.data_types, data)
    for df, v in zip(spec.data_fields, decoded):
        values[df.name] = v

    return ParsedEvent(
        name=spec.name,
        address=log.address,
        block_number=log.block_number,
        log_index=log.log_index,
        values=values,
    )
