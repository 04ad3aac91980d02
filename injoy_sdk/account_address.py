"""
32-byte account addresses.
"""
import hashlib
from dataclasses import dataclass
from typing import ClassVar

from .bcs import Serializer

ADDRESS_LENGTH = 32

# Authentication key scheme byte for single Ed25519 keys
ED25519_SCHEME = b"\x00"


@dataclass(frozen=True)
class AccountAddress:
    """
    An on-chain account address.

    Attributes:
        address: Raw 32 address bytes
    """
    address: bytes

    ONE: ClassVar["AccountAddress"]

    def __post_init__(self):
        if len(self.address) != ADDRESS_LENGTH:
            raise ValueError(f"Expected address of length {ADDRESS_LENGTH}, got {len(self.address)}")

    @staticmethod
    def from_str(address: str) -> "AccountAddress":
        """
        Parse a hex address, with or without 0x prefix.

        Short forms such as ``0x1`` or ``0xA1`` are left-padded with zeros.

        Raises:
            ValueError: If the string is not valid hex or too long
        """
        addr = address.strip()
        if addr.startswith(("0x", "0X")):
            addr = addr[2:]
        if not addr or len(addr) > ADDRESS_LENGTH * 2:
            raise ValueError(f"Invalid address length: {address!r}")
        try:
            return AccountAddress(bytes.fromhex(addr.rjust(ADDRESS_LENGTH * 2, "0")))
        except ValueError as e:
            raise ValueError(f"Invalid hex address {address!r}: {e}") from e

    @staticmethod
    def from_ed25519_public_key(public_key: bytes) -> "AccountAddress":
        """Derive the address of a single Ed25519 key account: sha3_256(pubkey || 0x00)"""
        hasher = hashlib.sha3_256()
        hasher.update(public_key + ED25519_SCHEME)
        return AccountAddress(hasher.digest())

    def is_special(self) -> bool:
        """Addresses 0x0 through 0xf are rendered in short form"""
        return all(b == 0 for b in self.address[:-1]) and self.address[-1] < 0x10

    def to_hex_literal(self) -> str:
        return "0x" + self.address.hex()

    def __str__(self) -> str:
        if self.is_special():
            return f"0x{self.address[-1]:x}"
        return self.to_hex_literal()

    def __repr__(self) -> str:
        return f"AccountAddress({self})"

    def serialize(self, serializer: Serializer) -> None:
        serializer.fixed_bytes(self.address)


AccountAddress.ONE = AccountAddress.from_str("0x1")
