"""Typed event variants.

A decoded log is turned into exactly one member of the closed `FluidEvent`
union. Subscribers `match` on it and end with `assert_never`, so a new event
kind shows up in type checking at every routing site.
"""

from __future__ import annotations

from dataclasses import dataclass

from eth_utils import to_checksum_address

from fluidstate.decoding.decoder import ParsedEvent


@dataclass(frozen=True, slots=True)
class LogOperate:
    """Liquidity-layer operate notification."""

    user: str
    token: str
    supply_amount: int
    borrow_amount: int
    withdraw_to: str
    borrow_to: str
    total_amounts: int
    exchange_prices_and_config: int


@dataclass(frozen=True, slots=True)
class LogDexDeployed:
    """Factory notification for a newly deployed dex pool."""

    dex: str
    dex_id: int


@dataclass(frozen=True, slots=True)
class UnknownEvent:
    """A decodable event without a typed variant."""

    name: str


FluidEvent = LogOperate | LogDexDeployed | UnknownEvent


def to_fluid_event(parsed: ParsedEvent) -> FluidEvent:
    v = parsed.values
    match parsed.name:
        case "LogOperate":
            return LogOperate(
                user=to_checksum_address(v["user"]),
                token=to_checksum_address(v["token"]),
                supply_amount=v["supplyAmount"],
                borrow_amount=v["borrowAmount"],
                withdraw_to=to_checksum_address(v["withdrawTo"]),
                borrow_to=to_checksum_address(v["borrowTo"]),
                total_amounts=v["totalAmounts"],
                exchange_prices_and_config=v["exchangePricesAndConfig"],
            )
        case "LogDexDeployed":
            return LogDexDeployed(dex=to_checksum_address(v["dex"]), dex_id=v["dexId"])
        case _:
            return UnknownEvent(name=parsed.name)
