"""Little-endian primitives for reading and writing GGML files."""

from __future__ import annotations

import struct
from typing import BinaryIO

_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")
_F32 = struct.Struct("<f")


def read_bytes(reader: BinaryIO, length: int) -> bytes:
    """Read exactly ``length`` bytes, raising EOFError if the stream ends early."""
    if length < 0:
        raise ValueError(f"cannot read a negative number of bytes: {length}")
    data = reader.read(length)
    if data is None or len(data) != length:
        got = 0 if data is None else len(data)
        raise EOFError(f"expected {length} bytes, got {got}")
    return bytes(data)


def read_i32(reader: BinaryIO) -> int:
    """Read a little-endian signed 32-bit integer."""
    return _I32.unpack(read_bytes(reader, _I32.size))[0]


def read_u32(reader: BinaryIO) -> int:
    """Read a little-endian unsigned 32-bit integer."""
    return _U32.unpack(read_bytes(reader, _U32.size))[0]


def read_f32(reader: BinaryIO) -> float:
    """Read a little-endian 32-bit float."""
    return _F32.unpack(read_bytes(reader, _F32.size))[0]


def read_bool(reader: BinaryIO) -> bool:
    """Read a boolean stored as a signed 32-bit integer (0 or 1)."""
    value = read_i32(reader)
    if value == 0:
        return False
    if value == 1:
        return True
    raise ValueError(f"Invalid i32 value for bool: '{value}'")


def write_i32(writer: BinaryIO, value: int) -> None:
    """Write a little-endian signed 32-bit integer."""
    writer.write(_I32.pack(value))


def write_u32(writer: BinaryIO, value: int) -> None:
    """Write a little-endian unsigned 32-bit integer."""
    writer.write(_U32.pack(value))


def write_f32(writer: BinaryIO, value: float) -> None:
    """Write a little-endian 32-bit float."""
    writer.write(_F32.pack(value))


def write_bool(writer: BinaryIO, value: bool) -> None:
    """Write a boolean as a signed 32-bit integer (0 or 1)."""
    write_i32(writer, 1 if value else 0)


def has_data_left(reader: BinaryIO) -> bool:
    """Return whether at least one more byte can be read, without consuming it."""
    peek = getattr(reader, "peek", None)
    if peek is not None:
        return bool(peek(1))
    position = reader.tell()
    chunk = reader.read(1)
    reader.seek(position)
    return bool(chunk)