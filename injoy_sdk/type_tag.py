"""
Move type tags and their string parser.

Type arguments of an entry function are given as strings such as
``0x1::aptos_coin::AptosCoin`` or ``vector<u8>`` and converted here to the
tagged form that is serialized into a transaction.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .account_address import AccountAddress
from .bcs import Serializer

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(name: str) -> str:
    """
    Check that ``name`` is a valid Move identifier.

    Raises:
        ValueError: If the identifier is empty or contains invalid characters
    """
    if not IDENTIFIER_RE.match(name):
        raise ValueError(f"Invalid Move identifier: {name!r}")
    return name


@dataclass(frozen=True)
class StructTag:
    """A fully-qualified struct type, e.g. ``0x1::coin::CoinStore<T>``"""
    address: AccountAddress
    module: str
    name: str
    type_args: Tuple["TypeTag", ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        base = f"{self.address}::{self.module}::{self.name}"
        if self.type_args:
            return base + "<" + ", ".join(str(t) for t in self.type_args) + ">"
        return base

    def serialize(self, serializer: Serializer) -> None:
        self.address.serialize(serializer)
        serializer.str(self.module)
        serializer.str(self.name)
        serializer.sequence(list(self.type_args), Serializer.struct)


@dataclass(frozen=True)
class TypeTag:
    """
    Tagged Move type.

    ``value`` holds the element type for vectors and the struct for structs;
    it is None for primitives.
    """
    BOOL = 0
    U8 = 1
    U64 = 2
    U128 = 3
    ADDRESS = 4
    SIGNER = 5
    VECTOR = 6
    STRUCT = 7
    U16 = 8
    U32 = 9
    U256 = 10

    variant: int
    value: Optional[Union[StructTag, "TypeTag"]] = None

    @staticmethod
    def from_str(type_tag: str) -> "TypeTag":
        """
        Parse a type string.

        Args:
            type_tag: e.g. ``"u64"``, ``"vector<u8>"``, ``"0xA1::injoy_coin::InJoyCoin"``

        Returns:
            Parsed TypeTag

        Raises:
            ValueError: If the string is not a valid Move type
        """
        return _parse(type_tag.strip())

    def __str__(self) -> str:
        if self.variant == TypeTag.VECTOR:
            return f"vector<{self.value}>"
        if self.variant == TypeTag.STRUCT:
            return str(self.value)
        return _PRIMITIVE_NAMES[self.variant]

    def serialize(self, serializer: Serializer) -> None:
        serializer.uleb128(self.variant)
        if self.value is not None:
            self.value.serialize(serializer)


_PRIMITIVES = {
    "bool": TypeTag.BOOL,
    "u8": TypeTag.U8,
    "u16": TypeTag.U16,
    "u32": TypeTag.U32,
    "u64": TypeTag.U64,
    "u128": TypeTag.U128,
    "u256": TypeTag.U256,
    "address": TypeTag.ADDRESS,
    "signer": TypeTag.SIGNER,
}
_PRIMITIVE_NAMES = {v: k for k, v in _PRIMITIVES.items()}


def _split_type_args(args: str) -> List[str]:
    # Split on commas that are not nested inside angle brackets
    parts = []
    depth = 0
    current = []
    for ch in args:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
            if depth < 0:
                raise ValueError(f"Unbalanced '>' in type arguments: {args!r}")
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    if depth != 0:
        raise ValueError(f"Unbalanced '<' in type arguments: {args!r}")
    parts.append("".join(current).strip())
    if any(not p for p in parts):
        raise ValueError(f"Empty type argument in {args!r}")
    return parts


def _parse(type_tag: str) -> TypeTag:
    if not type_tag:
        raise ValueError("Empty type tag")

    if type_tag in _PRIMITIVES:
        return TypeTag(_PRIMITIVES[type_tag])

    if type_tag.startswith("vector<"):
        if not type_tag.endswith(">"):
            raise ValueError(f"Invalid vector type: {type_tag!r}")
        return TypeTag(TypeTag.VECTOR, _parse(type_tag[len("vector<"):-1].strip()))

    generics_start = type_tag.find("<")
    if generics_start == -1:
        head, type_args = type_tag, ()
    else:
        if not type_tag.endswith(">"):
            raise ValueError(f"Invalid generic struct type: {type_tag!r}")
        head = type_tag[:generics_start]
        type_args = tuple(_parse(arg) for arg in _split_type_args(type_tag[generics_start + 1:-1]))

    parts = head.strip().split("::")
    if len(parts) != 3:
        raise ValueError(f"Struct type must be <address>::<module>::<name>, got {type_tag!r}")
    address, module, name = parts
    return TypeTag(
        TypeTag.STRUCT,
        StructTag(
            AccountAddress.from_str(address),
            validate_identifier(module),
            validate_identifier(name),
            type_args
        )
    )
