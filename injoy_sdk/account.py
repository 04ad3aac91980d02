"""
Local account identity: an address, an Ed25519 signing key and a sequence number.

The private key never leaves this module. Callers only get signatures
through ``LocalAccount.sign`` and the raw public key.
"""
import logging
from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .account_address import AccountAddress
from .bcs import MAX_U64
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# Prefix used by the CLI profile for legacy-format private keys
ED25519_PRIV_PREFIX = "ed25519-priv-"


def _parse_private_key(private_key: str) -> Ed25519PrivateKey:
    """
    Parse hex key material into an Ed25519 private key.

    Raises:
        ConfigError: If the key is not 32 bytes of valid hex
    """
    key_hex = private_key.strip()
    if key_hex.startswith(ED25519_PRIV_PREFIX):
        key_hex = key_hex[len(ED25519_PRIV_PREFIX):]
    if key_hex.startswith(("0x", "0X")):
        key_hex = key_hex[2:]
    try:
        key_bytes = bytes.fromhex(key_hex)
    except ValueError as e:
        # Do not echo key material into the error
        raise ConfigError("Private key is not valid hex") from e
    if len(key_bytes) != 32:
        raise ConfigError(f"Private key must be 32 bytes, got {len(key_bytes)}")
    return Ed25519PrivateKey.from_private_bytes(key_bytes)


def verify_signature(public_key: bytes, message: bytes, signature: bytes) -> bool:
    """
    Verify an Ed25519 signature.

    Args:
        public_key: Raw 32-byte public key
        message: Signed message
        signature: Raw 64-byte signature

    Returns:
        True if the signature is valid, False otherwise
    """
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(signature, message)
        return True
    except (InvalidSignature, ValueError):
        return False


class LocalAccount:
    """
    An account whose key is held by this process.

    The sequence number must match the on-chain value at submission time and
    is only advanced once a submitted transaction has been committed.
    """

    def __init__(
        self,
        address: Union[AccountAddress, str],
        private_key: Union[Ed25519PrivateKey, str],
        sequence_number: int = 0
    ):
        """
        Initialize the account

        Args:
            address: Account address (may differ from the key's derived address after rotation)
            private_key: Ed25519 private key or its hex encoding
            sequence_number: Current on-chain sequence number

        Raises:
            ConfigError: If the address or key material is malformed
        """
        if isinstance(address, str):
            try:
                address = AccountAddress.from_str(address)
            except ValueError as e:
                raise ConfigError(f"Invalid account address: {e}") from e
        if isinstance(private_key, str):
            private_key = _parse_private_key(private_key)
        if sequence_number < 0 or sequence_number > MAX_U64:
            raise ConfigError(f"Sequence number out of range: {sequence_number}")

        self._address = address
        self._key = private_key
        self._public_key = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        self._sequence_number = sequence_number

    @classmethod
    def from_private_key_hex(
        cls,
        private_key: str,
        address: Optional[Union[AccountAddress, str]] = None,
        sequence_number: int = 0
    ) -> "LocalAccount":
        """
        Create an account from hex key material.

        If no address is given it is derived from the public key.
        """
        key = _parse_private_key(private_key)
        if address is None:
            public_key = key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
            address = AccountAddress.from_ed25519_public_key(public_key)
        return cls(address, key, sequence_number)

    @classmethod
    def generate(cls) -> "LocalAccount":
        """Create a fresh account with a random key"""
        key = Ed25519PrivateKey.generate()
        public_key = key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        account = cls(AccountAddress.from_ed25519_public_key(public_key), key)
        logger.debug(f"Generated new account {account.address()}")
        return account

    def address(self) -> AccountAddress:
        return self._address

    def public_key(self) -> bytes:
        return self._public_key

    def sequence_number(self) -> int:
        return self._sequence_number

    def increment_sequence_number(self) -> int:
        """
        Advance the local sequence number by one.

        Returns:
            The new sequence number
        """
        if self._sequence_number >= MAX_U64:
            raise OverflowError("Sequence number exhausted")
        self._sequence_number += 1
        return self._sequence_number

    def sign(self, data: bytes) -> bytes:
        """
        Sign arbitrary bytes with the account key.

        Returns:
            64-byte Ed25519 signature
        """
        return self._key.sign(data)

    def __repr__(self) -> str:
        return (
            f"LocalAccount(address={self._address}, "
            f"public_key=0x{self._public_key.hex()}, "
            f"sequence_number={self._sequence_number})"
        )
