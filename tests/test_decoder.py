import pytest
from eth_abi import encode

from fluidstate.core.models import EventLog
from fluidstate.decoding.decoder import MultiResult, decode_abi, decode_log, decode_result
from fluidstate.decoding.registries import make_liquidity_registry
from fluidstate.decoding.specs import DataFieldSpec, EventRegistry, EventSpec, TopicFieldSpec
from fluidstate.errors import DecodeError

from .fakes import LOG_OPERATE_T0, POOL, WETH, make_operate_log


@pytest.fixture
def sample_registry() -> EventRegistry:
    spec = EventSpec(
        topic0="0x123",
        name="TestEvent",
        topic_fields=[TopicFieldSpec("user", 1, "address")],
        data_fields=[DataFieldSpec("amount", "uint256")],
    )
    registry = EventRegistry()
    registry[spec.topic0] = spec
    return registry


def _log(topics: list[str], data_hex: str) -> EventLog:
    return EventLog(
        address="0xd8da6bf26964af9d7eed9e03e53415d37aa96045",
        topics=tuple(topics),
        data_hex=data_hex,
        block_number=1,
        tx_hash="0xtx",
        log_index=0,
    )


def test_decode_log_success(sample_registry: EventRegistry) -> None:
    topics = ["0x123", "0x" + "0" * 24 + "1234567890123456789012345678901234567890"]
    data = "0x0000000000000000000000000000000000000000000000000000000000000064"  # 100

    parsed = decode_log(_log(topics, data), sample_registry)

    assert parsed is not None
    assert parsed.name == "TestEvent"
    assert parsed.values["user"] == "0x1234567890123456789012345678901234567890"
    assert parsed.values["amount"] == 100


def test_decode_log_unknown_topic(sample_registry: EventRegistry) -> None:
    assert decode_log(_log(["0x999"], "0x"), sample_registry) is None


def test_decode_log_no_topics(sample_registry: EventRegistry) -> None:
    assert decode_log(_log([], "0x"), sample_registry) is None


def test_decode_log_wrong_topic_count(sample_registry: EventRegistry) -> None:
    with pytest.raises(DecodeError, match="expected 2 topics"):
        decode_log(_log(["0x123"], "0x" + "00" * 32), sample_registry)


def test_decode_log_short_data(sample_registry: EventRegistry) -> None:
    topics = ["0x123", "0x" + "0" * 64]
    with pytest.raises(DecodeError):
        decode_log(_log(topics, "0x1234"), sample_registry)


def test_decode_log_bad_hex(sample_registry: EventRegistry) -> None:
    topics = ["0x123", "0x" + "0" * 64]
    with pytest.raises(DecodeError):
        decode_log(_log(topics, "0xzz"), sample_registry)


def test_decode_log_operate() -> None:
    parsed = decode_log(make_operate_log(POOL, 21091850), make_liquidity_registry())

    assert parsed is not None
    assert parsed.name == "LogOperate"
    assert parsed.values["user"].lower() == POOL
    assert parsed.values["token"].lower() == WETH
    assert parsed.values["supplyAmount"] == 10**18
    assert parsed.values["borrowAmount"] == -(5 * 10**17)
    assert parsed.values["totalAmounts"] == 123456789
    assert LOG_OPERATE_T0 in make_liquidity_registry()


def test_decode_abi_wraps_errors() -> None:
    with pytest.raises(DecodeError):
        decode_abi(["uint256"], b"\x01")


def test_decode_result_bytes_and_hex() -> None:
    raw = encode(["uint256", "address"], [7, WETH])

    def parse(decoded):
        return decoded[0]

    assert decode_result(raw, ["uint256", "address"], parse) == 7
    assert decode_result("0x" + raw.hex(), ["uint256", "address"], parse) == 7
    assert decode_result(MultiResult(True, raw), ["uint256", "address"], parse) == 7


def test_decode_result_failed_call() -> None:
    failed = MultiResult(success=False, return_data=b"")

    assert decode_result(failed, ["uint256"], lambda d: d[0], default=None) is None
    with pytest.raises(DecodeError, match="reverted"):
        decode_result(failed, ["uint256"], lambda d: d[0])


def test_decode_result_parse_error_is_decode_error() -> None:
    raw = encode(["uint256"], [1])

    def parse(decoded):
        a, b = decoded  # one value only
        return a

    with pytest.raises(DecodeError, match="expected shape"):
        decode_result(raw, ["uint256"], parse)
