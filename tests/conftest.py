from unittest.mock import AsyncMock

import pytest

from fluidstate.clients.multicall import MultiWrapper
from fluidstate.core.config import CommonAddresses

from .fakes import RESOLVER, FakeChain


@pytest.fixture
def mock_rpc():
    rpc = AsyncMock()
    rpc.get_logs = AsyncMock(return_value=[])
    rpc.latest_block = AsyncMock(return_value=100)
    rpc.call = AsyncMock(return_value=b"")
    rpc.aclose = AsyncMock()
    return rpc


@pytest.fixture
def common_addresses() -> CommonAddresses:
    return CommonAddresses(resolver=RESOLVER)


@pytest.fixture
def fake_chain() -> FakeChain:
    return FakeChain(head=21_091_850)


@pytest.fixture
def multi_wrapper(fake_chain: FakeChain) -> MultiWrapper:
    return MultiWrapper(fake_chain, default_batch_size=10)
