"""
Transaction signing.
"""
import hashlib
import logging
from dataclasses import dataclass

from .account import LocalAccount, verify_signature
from .bcs import Serializer, encode
from .exceptions import EnvelopeError
from .transactions import RawTransaction

logger = logging.getLogger(__name__)

RAW_TRANSACTION_SALT = b"APTOS::RawTransaction"
TRANSACTION_SALT = b"APTOS::Transaction"

# Variant index of a user transaction inside the Transaction enum
USER_TRANSACTION_VARIANT = 0


def _prehash(salt: bytes) -> bytes:
    return hashlib.sha3_256(salt).digest()


def signing_message(raw_txn: RawTransaction) -> bytes:
    """Bytes that are actually signed: domain-separation prefix followed by the BCS envelope"""
    return _prehash(RAW_TRANSACTION_SALT) + encode(raw_txn)


@dataclass(frozen=True)
class Ed25519Authenticator:
    """Single-key Ed25519 transaction authenticator"""
    VARIANT = 0

    public_key: bytes
    signature: bytes

    def serialize(self, serializer: Serializer) -> None:
        serializer.uleb128(self.VARIANT)
        serializer.to_bytes(self.public_key)
        serializer.to_bytes(self.signature)


@dataclass(frozen=True)
class SignedTransaction:
    """A RawTransaction with its authenticator"""
    transaction: RawTransaction
    authenticator: Ed25519Authenticator

    def bytes(self) -> bytes:
        """BCS body accepted by the node's submit endpoint"""
        return encode(self)

    def verify(self) -> bool:
        return verify_signature(
            self.authenticator.public_key,
            signing_message(self.transaction),
            self.authenticator.signature
        )

    def hash(self) -> str:
        """Transaction hash as the node will report it"""
        hasher = hashlib.sha3_256()
        hasher.update(_prehash(TRANSACTION_SALT))
        hasher.update(bytes([USER_TRANSACTION_VARIANT]))
        hasher.update(self.bytes())
        return "0x" + hasher.hexdigest()

    def serialize(self, serializer: Serializer) -> None:
        self.transaction.serialize(serializer)
        self.authenticator.serialize(serializer)


def sign_transaction(raw_txn: RawTransaction, account: LocalAccount) -> SignedTransaction:
    """
    Sign an envelope with the account's key.

    Args:
        raw_txn: Fully built envelope
        account: Account whose address is the envelope's sender

    Returns:
        SignedTransaction

    Raises:
        EnvelopeError: If the envelope is incomplete or belongs to another sender
    """
    if not isinstance(raw_txn, RawTransaction):
        raise EnvelopeError(f"Expected RawTransaction, got {type(raw_txn).__name__}")

    missing = raw_txn.missing_fields()
    if missing:
        raise EnvelopeError(f"Cannot sign incomplete transaction, missing fields: {', '.join(missing)}")

    if raw_txn.sender != account.address():
        raise EnvelopeError(
            f"Transaction sender {raw_txn.sender} does not match signing account {account.address()}"
        )

    try:
        message = signing_message(raw_txn)
    except (ValueError, TypeError, AttributeError) as e:
        raise EnvelopeError(f"Failed to serialize transaction: {str(e)}") from e

    signed = SignedTransaction(raw_txn, Ed25519Authenticator(account.public_key(), account.sign(message)))
    logger.debug(f"Signed transaction {signed.hash()} for {account.address()}")
    return signed
