"""Byte-level packing and unpacking utilities.

This module provides the primitive writes and reads of the binary format.
All multi-byte values are little-endian with no padding or alignment.
"""

from __future__ import annotations

import struct

from ..exceptions import UnexpectedEof

_FLOAT_FORMATS = {4: "<f", 8: "<d"}


class BytePacker:
    """Appends little-endian primitives to a byte buffer.

    Example:
        >>> packer = BytePacker()
        >>> packer.write_uint(7, 4)
        >>> packer.write_string("hi")
        >>> packer.to_bytes()
        b'\\x07\\x00\\x00\\x00\\x02\\x00\\x00\\x00hi'
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write_bool(self, value: bool) -> None:
        """Write a boolean as a single 0/1 byte."""
        self._buffer.append(1 if value else 0)

    def write_uint(self, value: int, num_bytes: int) -> None:
        """Write an unsigned integer of the given width.

        Raises:
            OverflowError: If value is negative or doesn't fit in num_bytes
        """
        self._buffer.extend(value.to_bytes(num_bytes, "little", signed=False))

    def write_int(self, value: int, num_bytes: int) -> None:
        """Write a two's complement signed integer of the given width.

        Raises:
            OverflowError: If value doesn't fit in num_bytes
        """
        self._buffer.extend(value.to_bytes(num_bytes, "little", signed=True))

    def write_float(self, value: float, num_bytes: int) -> None:
        """Write an IEEE-754 float (4 or 8 bytes).

        Raises:
            OverflowError: If value is finite but out of range for f32
        """
        self._buffer.extend(struct.pack(_FLOAT_FORMATS[num_bytes], value))

    def write_u32(self, value: int) -> None:
        """Write a u32 length or count prefix."""
        self.write_uint(value, 4)

    def write_string(self, value: str) -> None:
        """Write a u32 byte length followed by UTF-8 bytes."""
        encoded = value.encode("utf-8")
        self.write_u32(len(encoded))
        self._buffer.extend(encoded)

    def __len__(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)


class ByteUnpacker:
    """Forward-only cursor over a byte buffer.

    Every read raises UnexpectedEof when the buffer holds fewer bytes than
    requested; the position is not advanced in that case.

    Example:
        >>> unpacker = ByteUnpacker(data)
        >>> count = unpacker.read_u32()
        >>> flag = unpacker.read_bool()
    """

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = memoryview(bytes(data))
        self._position = offset

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read raw bytes.

        Raises:
            UnexpectedEof: If not enough bytes are available
        """
        end = self._position + num_bytes
        if end > len(self._data):
            raise UnexpectedEof(
                f"need {num_bytes} bytes at offset {self._position}, "
                f"have {self.bytes_remaining()}"
            )
        chunk = self._data[self._position:end].tobytes()
        self._position = end
        return chunk

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_bool(self) -> int:
        """Read a boolean byte, returning the raw value (0, 1, or anything else)."""
        return self.read_byte()

    def read_uint(self, num_bytes: int) -> int:
        return int.from_bytes(self.read_bytes(num_bytes), "little", signed=False)

    def read_int(self, num_bytes: int) -> int:
        return int.from_bytes(self.read_bytes(num_bytes), "little", signed=True)

    def read_float(self, num_bytes: int) -> float:
        return struct.unpack(_FLOAT_FORMATS[num_bytes], self.read_bytes(num_bytes))[0]

    def read_u32(self) -> int:
        return self.read_uint(4)

    def read_string_bytes(self) -> bytes:
        """Read a u32 length prefix and that many raw bytes (not yet UTF-8 decoded)."""
        length = self.read_u32()
        return self.read_bytes(length)

    def bytes_remaining(self) -> int:
        return len(self._data) - self._position

    def position(self) -> int:
        """Return the current read position in bytes."""
        return self._position


def shortest_f32(raw_bytes: bytes) -> float:
    """Return the shortest decimal float that packs to the same 32-bit pattern.

    Example:
        >>> shortest_f32(struct.pack("<f", 0.1))
        0.1
    """
    value = struct.unpack("<f", raw_bytes)[0]
    if value != value or value in (float("inf"), float("-inf")):
        return value
    for digits in range(1, 10):
        candidate = float(f"{value:.{digits}g}")
        try:
            if struct.pack("<f", candidate) == raw_bytes:
                return candidate
        except OverflowError:
            continue
    return value
