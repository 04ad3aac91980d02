"""
Tests for payloads and the transaction builder.
"""
import pytest

from injoy_sdk.account_address import AccountAddress
from injoy_sdk.bcs import Serializer, encode
from injoy_sdk.exceptions import ClockError, EnvelopeError
from injoy_sdk.transactions import (
    DEFAULT_EXPIRATION_SECS,
    EntryFunction,
    ModuleId,
    TransactionBuilder,
    TransactionPayload,
    build_transaction,
)
from injoy_sdk.type_tag import TypeTag
from tests.test_helpers import TEST_CHAIN_ID, TEST_GAS_PRICE, TEST_MAX_GAS, TEST_NOW

SENDER = AccountAddress.from_str("0xA1")


def fixed_clock():
    return float(TEST_NOW)


def build(payload, **overrides):
    params = dict(
        chain_id=TEST_CHAIN_ID,
        sender=SENDER,
        sequence_number=0,
        max_gas_amount=TEST_MAX_GAS,
        gas_unit_price=TEST_GAS_PRICE,
        clock=fixed_clock,
    )
    params.update(overrides)
    return build_transaction(payload, **params)


def test_register_envelope_fields(register_entry):
    raw_txn = build(register_entry)

    assert raw_txn.sender == SENDER
    assert raw_txn.sequence_number == 0
    assert raw_txn.chain_id == TEST_CHAIN_ID
    assert raw_txn.max_gas_amount == TEST_MAX_GAS
    assert raw_txn.gas_unit_price == TEST_GAS_PRICE
    assert raw_txn.expiration_timestamp_secs == TEST_NOW + 300

    entry = raw_txn.payload.value
    assert str(entry.module) == "0x1::managed_coin"
    assert entry.function == "register"
    assert len(entry.ty_args) == 1
    assert str(entry.ty_args[0]) == "0x" + "0" * 62 + "a1::injoy_coin::InJoyCoin"
    assert entry.args == ()


def test_expiration_is_fixed_at_build_time(register_entry):
    ticks = iter([100.0, 5000.0])
    raw_txn = build(register_entry, clock=lambda: next(ticks))
    assert raw_txn.expiration_timestamp_secs == 100 + DEFAULT_EXPIRATION_SECS


@pytest.mark.parametrize("field", ["max_gas_amount", "gas_unit_price"])
@pytest.mark.parametrize("value", [0, -1])
def test_non_positive_gas_rejected(register_entry, field, value):
    with pytest.raises(ValueError, match=field):
        build(register_entry, **{field: value})


def test_clock_failure_raises_clock_error(register_entry):
    def broken_clock():
        raise OSError("clock unavailable")

    with pytest.raises(ClockError, match="clock unavailable"):
        build(register_entry, clock=broken_clock)


def test_builder_requires_all_fields(register_entry):
    builder = TransactionBuilder(register_entry, TEST_CHAIN_ID, clock=fixed_clock).sender(SENDER)
    with pytest.raises(EnvelopeError, match="sequence_number, max_gas_amount, gas_unit_price"):
        builder.build()


def test_builder_chain_id_must_fit_u8(register_entry):
    with pytest.raises(ValueError):
        TransactionBuilder(register_entry, 256)


def test_builder_is_deterministic_with_fixed_clock(register_entry):
    assert encode(build(register_entry)) == encode(build(register_entry))


def test_explicit_expiration(register_entry):
    raw_txn = (
        TransactionBuilder(register_entry, TEST_CHAIN_ID, clock=fixed_clock)
        .sender(SENDER)
        .sequence_number(7)
        .max_gas_amount(1)
        .gas_unit_price(1)
        .expiration_timestamp_secs(TEST_NOW + 60)
        .build()
    )
    assert raw_txn.expiration_timestamp_secs == TEST_NOW + 60
    assert raw_txn.sequence_number == 7


@pytest.mark.parametrize("expiration", [TEST_NOW, TEST_NOW - 1, 42])
def test_explicit_expiration_must_be_in_the_future(register_entry, expiration):
    builder = (
        TransactionBuilder(register_entry, TEST_CHAIN_ID, clock=fixed_clock)
        .sender(SENDER)
        .sequence_number(0)
        .max_gas_amount(1)
        .gas_unit_price(1)
        .expiration_timestamp_secs(expiration)
    )
    with pytest.raises(EnvelopeError, match="not after the current time"):
        builder.build()


def test_entry_function_natural_form(register_entry):
    entry = EntryFunction.natural("0x1::managed_coin", "register", ["0xA1::injoy_coin::InJoyCoin"])
    assert entry == register_entry


def test_entry_function_rejects_bad_identifier():
    with pytest.raises(ValueError):
        EntryFunction(ModuleId(AccountAddress.ONE, "managed_coin"), "re-gister")
    with pytest.raises(ValueError):
        ModuleId.from_str("0x1")


def test_payload_serialization(register_entry):
    ser = Serializer()
    TransactionPayload(register_entry).serialize(ser)
    expected = (
        b"\x02"                                   # entry function variant
        + b"\x00" * 31 + b"\x01"                  # module address
        + b"\x0cmanaged_coin"
        + b"\x08register"
        + b"\x01"                                 # one type argument
        + b"\x07" + b"\x00" * 31 + b"\xa1"        # struct tag
        + b"\x0ainjoy_coin"
        + b"\x09InJoyCoin"
        + b"\x00"                                 # no nested type args
        + b"\x00"                                 # no value args
    )
    assert ser.output() == expected


def test_raw_transaction_serialization_layout(register_entry):
    raw_txn = build(register_entry)
    data = encode(raw_txn)
    payload = encode(raw_txn.payload)

    assert data[:32] == SENDER.address
    assert data[32:40] == (0).to_bytes(8, "little")
    assert data[40:40 + len(payload)] == payload
    tail = data[40 + len(payload):]
    assert tail == (
        TEST_MAX_GAS.to_bytes(8, "little")
        + TEST_GAS_PRICE.to_bytes(8, "little")
        + (TEST_NOW + 300).to_bytes(8, "little")
        + bytes([TEST_CHAIN_ID])
    )


def test_payload_is_immutable(register_entry):
    with pytest.raises(Exception):
        register_entry.function = "other"
    assert isinstance(register_entry.ty_args, tuple)
