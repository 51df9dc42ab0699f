import pytest

from fluidstate.core.models import (
    CollateralReserves,
    DebtReserves,
    EventLog,
    Pool,
    PoolReserves,
    PoolWithReserves,
)
from fluidstate.core.uint import Uint256

from .fakes import POOL, WETH, WSTETH


def test_reserves_are_uint256():
    c = CollateralReserves(1, 2, 3, 4)
    assert all(isinstance(v, Uint256) for v in (c.token0_real_reserves, c.token1_imaginary_reserves))
    with pytest.raises(OverflowError):
        DebtReserves(-1, 0, 0, 0, 0, 0)


def test_pool_reserves_defaults_missing_sides():
    s = PoolReserves(collateral_reserves=None, debt_reserves=None, fee=0)  # type: ignore[arg-type]
    assert s.collateral_reserves == CollateralReserves.empty()
    assert s.debt_reserves == DebtReserves.empty()


def test_pool_reserves_is_frozen_value():
    a = PoolReserves(CollateralReserves(1, 2, 3, 4), DebtReserves(1, 2, 3, 4, 5, 6), 100)
    b = PoolReserves(CollateralReserves(1, 2, 3, 4), DebtReserves(1, 2, 3, 4, 5, 6), 100)
    assert a == b
    with pytest.raises(AttributeError):
        a.fee = Uint256(1)  # type: ignore[misc]


def test_pool_with_reserves_projection():
    row = PoolWithReserves(
        pool=POOL,
        token0=WSTETH,
        token1=WETH,
        fee=100,
        collateral_reserves=CollateralReserves(1, 2, 3, 4),
        debt_reserves=DebtReserves(5, 6, 7, 8, 9, 10),
    )
    assert row.pool != POOL and row.pool.lower() == POOL  # checksummed
    assert row.to_pool() == Pool(POOL, WSTETH, WETH, 100)
    assert row.to_snapshot() == PoolReserves(
        CollateralReserves(1, 2, 3, 4), DebtReserves(5, 6, 7, 8, 9, 10), 100
    )


def test_event_log_data_bytes():
    log = EventLog(address="0x0", topics=(), data_hex="0x0102", block_number=1, tx_hash="0x", log_index=0)
    assert log.data_bytes() == b"\x01\x02"
    assert EventLog("0x0", (), "0x", 1, "0x", 0).data_bytes() == b""
