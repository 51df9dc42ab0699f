"""ABI JSON models, bundled ABI files and call encoding.

Functions and events are validated with pydantic, then rendered into the
canonical type strings eth_abi and keccak selectors expect. Nested structs
(`tuple`, `tuple[]`) are expanded recursively from their `components`.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector
from eth_utils.abi import event_signature_to_log_topic
from pydantic import BaseModel


class AbiParam(BaseModel):
    name: str = ""
    type: str
    internalType: str | None = None
    indexed: bool = False
    components: list[AbiParam] | None = None


AbiParam.model_rebuild()


class AbiEvent(BaseModel):
    anonymous: bool = False
    inputs: Sequence[AbiParam]
    name: str
    type: Literal["event"]


class AbiFunction(BaseModel):
    inputs: Sequence[AbiParam]
    outputs: Sequence[AbiParam] = ()
    name: str
    stateMutability: str = "view"
    type: Literal["function"]


def canonical_type(param: AbiParam) -> str:
    """Render a parameter as a canonical ABI type, expanding tuples."""
    if not param.type.startswith("tuple"):
        return param.type
    inner = ",".join(canonical_type(c) for c in param.components or ())
    return f"({inner}){param.type[len('tuple'):]}"


def canonical_types(params: Iterable[AbiParam]) -> list[str]:
    return [canonical_type(p) for p in params]


def get_event_signature(event: AbiEvent) -> str:
    return f"{event.name}({','.join(canonical_types(event.inputs))})"


def get_event_topic0(event: AbiEvent) -> str:
    return "0x" + event_signature_to_log_topic(get_event_signature(event)).hex()


def get_function_signature(fn: AbiFunction) -> str:
    return f"{fn.name}({','.join(canonical_types(fn.inputs))})"


def get_function_selector(fn: AbiFunction) -> bytes:
    return function_signature_to_4byte_selector(get_function_signature(fn))


def encode_function_call(fn: AbiFunction, args: Sequence[Any] = ()) -> bytes:
    """Return `selector ++ abi.encode(args)` for a function call."""
    if len(args) != len(fn.inputs):
        raise ValueError(f"{fn.name} expects {len(fn.inputs)} arguments, got {len(args)}")
    return get_function_selector(fn) + encode(canonical_types(fn.inputs), list(args))


# ---- ABI loading ----

AbiJson = Iterable[dict[str, Any]]
AbiSpec = AbiJson | Path


def _load_abi(abi: AbiSpec) -> AbiJson:
    if isinstance(abi, Path):
        return json.loads(abi.read_text())
    return abi


def get_events_from_abi(abi: AbiSpec) -> dict[str, AbiEvent]:
    abi = _load_abi(abi)
    return {entry["name"]: AbiEvent.model_validate(entry) for entry in abi if entry["type"] == "event"}


def get_functions_from_abi(abi: AbiSpec) -> dict[str, AbiFunction]:
    abi = _load_abi(abi)
    return {entry["name"]: AbiFunction.model_validate(entry) for entry in abi if entry["type"] == "function"}


@cache
def load_bundled_abi(name: str) -> tuple[dict[str, Any], ...]:
    """Load `fluidstate/abi/<name>.abi.json` shipped with the package."""
    text = resources.files("fluidstate.abi").joinpath(f"{name}.abi.json").read_text()
    return tuple(json.loads(text))


def bundled_function(abi_name: str, fn_name: str) -> AbiFunction:
    return get_functions_from_abi(load_bundled_abi(abi_name))[fn_name]
