"""
Binary Canonical Serialization (BCS) encoder.

Only the subset needed to sign and submit entry-function transactions is
implemented: u8 and u64 integers, ULEB128 lengths, byte strings,
UTF-8 strings, sequences and nested structs.
"""
from typing import Callable, List, Protocol, TypeVar

MAX_U8 = 2**8 - 1
MAX_U32 = 2**32 - 1
MAX_U64 = 2**64 - 1

T = TypeVar('T')


class Serializable(Protocol):
    """Protocol for values that know how to write themselves as BCS"""

    def serialize(self, serializer: "Serializer") -> None:
        ...


class Serializer:
    """Accumulates BCS-encoded bytes"""

    def __init__(self):
        self._output = bytearray()

    def output(self) -> bytes:
        return bytes(self._output)

    def u8(self, value: int) -> None:
        self._write_int(value, 1, MAX_U8)

    def u64(self, value: int) -> None:
        self._write_int(value, 8, MAX_U64)

    def uleb128(self, value: int) -> None:
        if value < 0 or value > MAX_U32:
            raise ValueError(f"Cannot encode {value} as ULEB128 length")
        while value >= 0x80:
            self._output.append((value & 0x7F) | 0x80)
            value >>= 7
        self._output.append(value & 0x7F)

    def fixed_bytes(self, value: bytes) -> None:
        self._output.extend(value)

    def to_bytes(self, value: bytes) -> None:
        self.uleb128(len(value))
        self._output.extend(value)

    def str(self, value: str) -> None:
        self.to_bytes(value.encode("utf-8"))

    def struct(self, value: Serializable) -> None:
        value.serialize(self)

    def sequence(self, values: List[T], encoder: Callable[["Serializer", T], None]) -> None:
        self.uleb128(len(values))
        for value in values:
            encoder(self, value)

    def _write_int(self, value: int, length: int, max_value: int) -> None:
        if value < 0 or value > max_value:
            raise ValueError(f"{value} does not fit in {length * 8} unsigned bits")
        self._output.extend(value.to_bytes(length, "little"))


def encode(value: Serializable) -> bytes:
    """
    Serialize a single value to BCS bytes.

    Args:
        value: Any object implementing ``serialize(serializer)``

    Returns:
        Encoded bytes
    """
    ser = Serializer()
    ser.struct(value)
    return ser.output()

