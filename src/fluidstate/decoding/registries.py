"""Event registries built from ABI JSON.

This module exposes:
- `make_event_registry_from_abi(abi)` → EventRegistry for every event in an ABI
- `add_event_spec(registry, spec)` / `add_many(registry, specs)`
- Ready registries for the Fluid liquidity layer and the dex factory

Registries are plain dicts and compose with `{**a, **b}`.

Example
-------
>>> from fluidstate.decoding.registries import make_liquidity_registry
>>> reg = make_liquidity_registry()
"""

from __future__ import annotations

from collections.abc import Iterable

from fluidstate.decoding.abi import (
    AbiEvent,
    AbiSpec,
    canonical_type,
    get_event_topic0,
    get_events_from_abi,
    load_bundled_abi,
)
from fluidstate.decoding.specs import DataFieldSpec, EventRegistry, EventSpec, TopicFieldSpec


def add_event_spec(registry: EventRegistry, spec: EventSpec) -> None:
    """Insert one spec into the registry keyed by lowercased topic0."""
    registry[spec.topic0.lower()] = spec


def add_many(registry: EventRegistry, specs: Iterable[EventSpec]) -> None:
    """Insert many specs into the registry."""
    for s in specs:
        add_event_spec(registry, s)


def get_event_spec(event: AbiEvent) -> EventSpec:
    indexed = [p for p in event.inputs if p.indexed]
    non_indexed = [p for p in event.inputs if not p.indexed]
    return EventSpec(
        topic0=get_event_topic0(event),
        name=event.name,
        topic_fields=[TopicFieldSpec(p.name, i + 1, canonical_type(p)) for i, p in enumerate(indexed)],
        data_fields=[DataFieldSpec(p.name, canonical_type(p)) for p in non_indexed],
    )


def make_event_registry_from_events(events: Iterable[AbiEvent]) -> EventRegistry:
    reg: EventRegistry = {}
    add_many(reg, (get_event_spec(e) for e in events if not e.anonymous))
    return reg


def make_event_registry_from_abi(abi: AbiSpec) -> EventRegistry:
    return make_event_registry_from_events(get_events_from_abi(abi).values())


# -------------------------
# Fluid registries
# -------------------------

def make_liquidity_registry() -> EventRegistry:
    """Return registry for liquidity-layer events (LogOperate)."""
    return make_event_registry_from_abi(load_bundled_abi("liquidity_user_module"))


def make_dex_factory_registry() -> EventRegistry:
    """Return registry for dex factory events (LogDexDeployed)."""
    return make_event_registry_from_abi(load_bundled_abi("dex_factory"))
