"""
Tests for type tag parsing.
"""
import pytest

from injoy_sdk.account_address import AccountAddress
from injoy_sdk.bcs import Serializer
from injoy_sdk.type_tag import StructTag, TypeTag


def test_parse_primitives():
    assert TypeTag.from_str("u64") == TypeTag(TypeTag.U64)
    assert TypeTag.from_str(" bool ") == TypeTag(TypeTag.BOOL)
    assert TypeTag.from_str("address") == TypeTag(TypeTag.ADDRESS)


def test_parse_vector():
    tag = TypeTag.from_str("vector<vector<u8>>")
    assert tag.variant == TypeTag.VECTOR
    assert tag.value == TypeTag(TypeTag.VECTOR, TypeTag(TypeTag.U8))
    assert str(tag) == "vector<vector<u8>>"


def test_parse_coin_struct():
    tag = TypeTag.from_str("0xA1::injoy_coin::InJoyCoin")
    assert tag.variant == TypeTag.STRUCT
    assert tag.value == StructTag(AccountAddress.from_str("0xA1"), "injoy_coin", "InJoyCoin")


def test_parse_nested_generics():
    tag = TypeTag.from_str("0x1::coin::CoinStore<0x1::pair::Pair<u8, 0x1::aptos_coin::AptosCoin>>")
    store = tag.value
    assert store.name == "CoinStore"
    assert len(store.type_args) == 1
    pair = store.type_args[0].value
    assert pair.name == "Pair"
    assert [str(t) for t in pair.type_args] == ["u8", "0x1::aptos_coin::AptosCoin"]


@pytest.mark.parametrize("bad", [
    "",
    "u7",
    "0x1::coin",
    "0x1::coin::CoinStore<",
    "0x1::coin::CoinStore<u8,>",
    "0x1::1coin::Coin",
    "vector<u8",
    "0xZZ::coin::Coin",
])
def test_invalid_type_strings(bad):
    with pytest.raises(ValueError):
        TypeTag.from_str(bad)


def test_struct_serialization():
    ser = Serializer()
    TypeTag.from_str("0x1::aptos_coin::AptosCoin").serialize(ser)
    expected = (
        b"\x07"
        + b"\x00" * 31 + b"\x01"
        + b"\x0aaptos_coin"
        + b"\x09AptosCoin"
        + b"\x00"
    )
    assert ser.output() == expected
