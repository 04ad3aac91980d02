"""
Entry-function payloads and unsigned transaction envelopes.

Building a transaction is pure data assembly: nothing here touches the
network, so a transaction is reproducible given the same inputs and clock.
"""
import logging
import time
from dataclasses import dataclass, field, fields
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .account_address import AccountAddress
from .bcs import MAX_U8, MAX_U64, Serializer
from .exceptions import ClockError, EnvelopeError
from .type_tag import TypeTag, validate_identifier

logger = logging.getLogger(__name__)

# Transactions expire this many seconds after they are built
DEFAULT_EXPIRATION_SECS = 300


@dataclass(frozen=True)
class ModuleId:
    """Module identifier: owner address plus module name"""
    address: AccountAddress
    name: str

    def __post_init__(self):
        validate_identifier(self.name)

    @staticmethod
    def from_str(module_id: str) -> "ModuleId":
        parts = module_id.split("::")
        if len(parts) != 2:
            raise ValueError(f"Module id must be <address>::<name>, got {module_id!r}")
        return ModuleId(AccountAddress.from_str(parts[0]), parts[1])

    def __str__(self) -> str:
        return f"{self.address}::{self.name}"

    def serialize(self, serializer: Serializer) -> None:
        self.address.serialize(serializer)
        serializer.str(self.name)


@dataclass(frozen=True)
class EntryFunction:
    """
    A call to an on-chain entry function.

    Attributes:
        module: Module that defines the function
        function: Function name
        ty_args: Type arguments, in order
        args: BCS-encoded value arguments, in order
    """
    module: ModuleId
    function: str
    ty_args: Tuple[TypeTag, ...] = field(default_factory=tuple)
    args: Tuple[bytes, ...] = field(default_factory=tuple)

    def __post_init__(self):
        validate_identifier(self.function)
        # Accept lists from callers but store tuples so the payload stays immutable
        object.__setattr__(self, "ty_args", tuple(self.ty_args))
        object.__setattr__(self, "args", tuple(self.args))

    @classmethod
    def natural(
        cls,
        module: str,
        function: str,
        ty_args: Sequence[Union[TypeTag, str]] = (),
        args: Sequence[bytes] = ()
    ) -> "EntryFunction":
        """
        Build an entry function from string forms.

        Example:
            EntryFunction.natural("0x1::managed_coin", "register", ["0xA1::injoy_coin::InJoyCoin"])
        """
        tags = [t if isinstance(t, TypeTag) else TypeTag.from_str(t) for t in ty_args]
        return cls(ModuleId.from_str(module), function, tuple(tags), tuple(args))

    def __str__(self) -> str:
        generics = ""
        if self.ty_args:
            generics = "<" + ", ".join(str(t) for t in self.ty_args) + ">"
        return f"{self.module}::{self.function}{generics}({len(self.args)} args)"

    def serialize(self, serializer: Serializer) -> None:
        self.module.serialize(serializer)
        serializer.str(self.function)
        serializer.sequence(list(self.ty_args), Serializer.struct)
        serializer.sequence(list(self.args), Serializer.to_bytes)


@dataclass(frozen=True)
class TransactionPayload:
    """Payload enum; only the entry-function variant is supported"""
    ENTRY_FUNCTION = 2

    value: EntryFunction

    @property
    def variant(self) -> int:
        return TransactionPayload.ENTRY_FUNCTION

    def serialize(self, serializer: Serializer) -> None:
        serializer.uleb128(self.variant)
        self.value.serialize(serializer)


@dataclass(frozen=True)
class RawTransaction:
    """Unsigned transaction envelope"""
    sender: AccountAddress
    sequence_number: int
    payload: TransactionPayload
    max_gas_amount: int
    gas_unit_price: int
    expiration_timestamp_secs: int
    chain_id: int

    def missing_fields(self) -> List[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is None]

    def serialize(self, serializer: Serializer) -> None:
        self.sender.serialize(serializer)
        serializer.u64(self.sequence_number)
        self.payload.serialize(serializer)
        serializer.u64(self.max_gas_amount)
        serializer.u64(self.gas_unit_price)
        serializer.u64(self.expiration_timestamp_secs)
        serializer.u8(self.chain_id)


def _now_secs(clock: Callable[[], float]) -> int:
    try:
        return int(clock())
    except Exception as e:
        raise ClockError(f"System clock unavailable: {e}") from e


def _require_positive(name: str, value: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    if value > MAX_U64:
        raise ValueError(f"{name} does not fit in u64: {value}")
    return value


class TransactionBuilder:
    """
    Assemble a RawTransaction step by step.

    Example:
        raw_txn = (
            TransactionBuilder(payload, chain_id=4)
            .sender(address)
            .sequence_number(0)
            .max_gas_amount(10_000)
            .gas_unit_price(100)
            .build()
        )
    """

    def __init__(
        self,
        payload: Union[TransactionPayload, EntryFunction],
        chain_id: int,
        expiration_secs: int = DEFAULT_EXPIRATION_SECS,
        clock: Callable[[], float] = time.time
    ):
        """
        Args:
            payload: Entry function (or payload wrapping one) to call
            chain_id: Target chain identifier
            expiration_secs: Seconds from build time until the transaction expires
            clock: Wall clock returning seconds since epoch
        """
        if isinstance(payload, EntryFunction):
            payload = TransactionPayload(payload)
        if not 0 <= chain_id <= MAX_U8:
            raise ValueError(f"chain_id must fit in u8, got {chain_id}")
        self._payload = payload
        self._chain_id = chain_id
        self._expiration_secs = expiration_secs
        self._clock = clock
        self._sender: Optional[AccountAddress] = None
        self._sequence_number: Optional[int] = None
        self._max_gas_amount: Optional[int] = None
        self._gas_unit_price: Optional[int] = None
        self._expiration_timestamp_secs: Optional[int] = None

    def sender(self, sender: AccountAddress) -> "TransactionBuilder":
        self._sender = sender
        return self

    def sequence_number(self, sequence_number: int) -> "TransactionBuilder":
        if sequence_number < 0 or sequence_number > MAX_U64:
            raise ValueError(f"sequence_number out of range: {sequence_number}")
        self._sequence_number = sequence_number
        return self

    def max_gas_amount(self, max_gas_amount: int) -> "TransactionBuilder":
        self._max_gas_amount = _require_positive("max_gas_amount", max_gas_amount)
        return self

    def gas_unit_price(self, gas_unit_price: int) -> "TransactionBuilder":
        self._gas_unit_price = _require_positive("gas_unit_price", gas_unit_price)
        return self

    def expiration_timestamp_secs(self, expiration_timestamp_secs: int) -> "TransactionBuilder":
        """Pin an absolute expiration instead of computing it at build time"""
        self._expiration_timestamp_secs = expiration_timestamp_secs
        return self

    def build(self) -> RawTransaction:
        """
        Produce the unsigned envelope.

        Returns:
            RawTransaction with every field set

        Raises:
            EnvelopeError: If sender, sequence number or gas parameters are unset,
                or a pinned expiration is not in the future
            ClockError: If the clock cannot be read
        """
        missing = [
            name for name, value in (
                ("sender", self._sender),
                ("sequence_number", self._sequence_number),
                ("max_gas_amount", self._max_gas_amount),
                ("gas_unit_price", self._gas_unit_price),
            ) if value is None
        ]
        if missing:
            raise EnvelopeError(f"Cannot build transaction, missing fields: {', '.join(missing)}")

        now = _now_secs(self._clock)
        expiration = self._expiration_timestamp_secs
        if expiration is None:
            expiration = now + self._expiration_secs
        elif expiration <= now:
            raise EnvelopeError(f"Expiration {expiration} is not after the current time {now}")

        raw_txn = RawTransaction(
            sender=self._sender,
            sequence_number=self._sequence_number,
            payload=self._payload,
            max_gas_amount=self._max_gas_amount,
            gas_unit_price=self._gas_unit_price,
            expiration_timestamp_secs=expiration,
            chain_id=self._chain_id,
        )
        logger.debug(
            f"Built transaction {raw_txn.payload.value} sender={raw_txn.sender} "
            f"seq={raw_txn.sequence_number} expires={expiration}"
        )
        return raw_txn


def build_transaction(
    payload: Union[TransactionPayload, EntryFunction],
    chain_id: int,
    sender: AccountAddress,
    sequence_number: int,
    max_gas_amount: int,
    gas_unit_price: int,
    expiration_secs: int = DEFAULT_EXPIRATION_SECS,
    clock: Callable[[], float] = time.time
) -> RawTransaction:
    """
    Build an unsigned transaction in one call.

    Raises:
        ValueError: If max_gas_amount or gas_unit_price is not positive
        ClockError: If the clock cannot be read
    """
    return (
        TransactionBuilder(payload, chain_id, expiration_secs=expiration_secs, clock=clock)
        .sender(sender)
        .sequence_number(sequence_number)
        .max_gas_amount(max_gas_amount)
        .gas_unit_price(gas_unit_price)
        .build()
    )
