"""ABI-driven decoding for call results and event logs.

This package provides:
- ABI JSON models, canonical type rendering and call encoding
- A single shared decode entry point (`decode_abi`) used for both call
  results (`decode_result`) and logs (`decode_log`)
- Event registries built from the bundled ABIs
- The closed `FluidEvent` variant type subscribers route on
"""

from fluidstate.decoding.abi import AbiEvent, AbiFunction, AbiParam, encode_function_call
from fluidstate.decoding.decoder import MultiResult, ParsedEvent, decode_abi, decode_log, decode_result
from fluidstate.decoding.events import FluidEvent, LogDexDeployed, LogOperate, UnknownEvent, to_fluid_event
from fluidstate.decoding.registries import (
    add_event_spec,
    add_many,
    make_dex_factory_registry,
    make_event_registry_from_abi,
    make_liquidity_registry,
)
from fluidstate.decoding.specs import DataFieldSpec, EventRegistry, EventSpec, TopicFieldSpec

__all__ = [
    "AbiEvent",
    "AbiFunction",
    "AbiParam",
    "encode_function_call",
    "MultiResult",
    "ParsedEvent",
    "decode_abi",
    "decode_log",
    "decode_result",
    "FluidEvent",
    "LogDexDeployed",
    "LogOperate",
    "UnknownEvent",
    "to_fluid_event",
    "add_event_spec",
    "add_many",
    "make_dex_factory_registry",
    "make_event_registry_from_abi",
    "make_liquidity_registry",
    "DataFieldSpec",
    "EventRegistry",
    "EventSpec",
    "TopicFieldSpec",
]
