"""Minimal Parquet reader and writer for flat tables of required columns.

Files hold one row group with one uncompressed PLAIN data page per column.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

MAGIC = b"PAR1"

# Thrift compact protocol type ids.
_I32, _I64, _BINARY, _LIST, _STRUCT = 5, 6, 8, 9, 12

# Parquet physical types and converted types.
_INT64, _DOUBLE, _BYTE_ARRAY = 2, 5, 6
_UTF8, _UINT_64 = 0, 14


class ParquetFormatError(ValueError):
    """Raised when a file is not a Parquet file this module can read."""


class ColumnType(Enum):
    """Logical type of a column: (physical type, converted type, struct format)."""

    STRING = (_BYTE_ARRAY, _UTF8, "")
    DOUBLE = (_DOUBLE, None, "d")
    INT64 = (_INT64, None, "q")
    UINT64 = (_INT64, _UINT_64, "Q")


@dataclass
class Column:
    """A named column of values of one type."""

    name: str
    type: ColumnType
    values: list[Any] = field(default_factory=list)


def _varint(number: int) -> bytes:
    out = bytearray()
    while number > 0x7F:
        out.append(number & 0x7F | 0x80)
        number >>= 7
    out.append(number)
    return bytes(out)


def _int(number: int) -> bytes:
    return _varint((number << 1) ^ (number >> 63))


def _struct(*fields: tuple[int, int, Any]) -> bytes:
    """Encode a Thrift compact struct from (field id, type, value) triples."""
    out = bytearray()
    last = 0
    for field_id, ttype, value in fields:
        if value is None:
            continue
        out.append((field_id - last) << 4 | ttype)
        last = field_id
        if ttype in (_I32, _I64):
            out += _int(value)
        elif ttype == _BINARY:
            out += _varint(len(value)) + value
        elif ttype == _LIST:
            elem_type, items = value
            size = len(items)
            out += bytes([size << 4 | elem_type]) if size < 15 else bytes([0xF0 | elem_type]) + _varint(size)
            out += b"".join(items)
        else:
            out += value
    return bytes(out) + b"\x00"


def _encode(column: Column) -> bytes:
    try:
        if column.type is ColumnType.STRING:
            return b"".join(
                struct.pack("<I", len(data)) + data
                for data in (value.encode("utf-8") for value in column.values)
            )
        return struct.pack(f"<{len(column.values)}{column.type.value[2]}", *column.values)
    except (struct.error, AttributeError, TypeError) as exc:
        raise ValueError(f"column {column.name!r}: invalid value: {exc}") from None


def write_table(path: str | Path, columns: Iterable[Column]) -> None:
    """Write columns of equal length to ``path`` as a Parquet file."""
    columns = list(columns)
    num_rows = len(columns[0].values) if columns else 0
    if len({c.name for c in columns}) != len(columns):
        raise ValueError("duplicate column names")
    for column in columns:
        if len(column.values) != num_rows:
            raise ValueError(f"column {column.name!r} has {len(column.values)} values, expected {num_rows}")

    out = bytearray(MAGIC)
    chunks, schema, total = [], [_struct((4, _BINARY, b"schema"), (5, _I32, len(columns)))], 0
    for column in columns:
        physical, converted, _ = column.type.value
        name = column.name.encode("utf-8")
        payload = _encode(column)
        page = _struct(
            (1, _I32, 0), (2, _I32, len(payload)), (3, _I32, len(payload)),
            (5, _STRUCT, _struct((1, _I32, num_rows), (2, _I32, 0), (3, _I32, 3), (4, _I32, 3))),
        )
        offset, size = len(out), len(page) + len(payload)
        out += page + payload
        total += size
        meta = _struct(
            (1, _I32, physical), (2, _LIST, (_I32, [_int(0)])),
            (3, _LIST, (_BINARY, [_varint(len(name)) + name])), (4, _I32, 0),
            (5, _I64, num_rows), (6, _I64, size), (7, _I64, size), (9, _I64, offset),
        )
        chunks.append(_struct((2, _I64, offset), (3, _STRUCT, meta)))
        schema.append(_struct((1, _I32, physical), (3, _I32, 0), (4, _BINARY, name), (6, _I32, converted)))

    row_group = _struct((1, _LIST, (_STRUCT, chunks)), (2, _I64, total), (3, _I64, num_rows))
    footer = _struct(
        (1, _I32, 1), (2, _LIST, (_STRUCT, schema)), (3, _I64, num_rows),
        (4, _LIST, (_STRUCT, [row_group])), (6, _BINARY, b"csv2pq"),
    )
    out += footer + len(footer).to_bytes(4, "little") + MAGIC
    Path(path).write_bytes(bytes(out))


class _Reader:
    """Reader of the Thrift compact values this module writes."""

    def __init__(self, data: bytes, pos: int) -> None:
        self.data, self.pos = data, pos

    def take(self, count: int) -> bytes:
        if count < 0 or self.pos + count > len(self.data):
            raise ParquetFormatError("unexpected end of data")
        self.pos += count
        return self.data[self.pos - count:self.pos]

    def varint(self) -> int:
        result = shift = 0
        while True:
            byte = self.take(1)[0]
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7

    def value(self, ttype: int) -> Any:
        if ttype in (_I32, _I64):
            raw = self.varint()
            return (raw >> 1) ^ -(raw & 1)
        if ttype == _BINARY:
            return self.take(self.varint())
        if ttype == _LIST:
            header = self.take(1)[0]
            size = self.varint() if header >> 4 == 15 else header >> 4
            return [self.value(header & 0x0F) for _ in range(size)]
        if ttype == _STRUCT:
            fields, last = {}, 0
            while header := self.take(1)[0]:
                last += header >> 4
                if not header >> 4:
                    raise ParquetFormatError("long field ids are not supported")
                fields[last] = self.value(header & 0x0F)
            return fields
        raise ParquetFormatError(f"unsupported thrift type {ttype}")


def _decode(ctype: ColumnType, body: bytes, count: int) -> list[Any]:
    if ctype is not ColumnType.STRING:
        return list(struct.unpack_from(f"<{count}{ctype.value[2]}", body))
    reader = _Reader(body, 0)
    return [reader.take(struct.unpack("<I", reader.take(4))[0]).decode("utf-8") for _ in range(count)]


def _read(data: bytes) -> list[Column]:
    if len(data) < 12 or data[:4] != MAGIC or data[-4:] != MAGIC:
        raise ParquetFormatError("not a Parquet file")
    start = len(data) - 8 - int.from_bytes(data[-8:-4], "little")
    if start < 4:
        raise ParquetFormatError("footer length out of range")
    meta = _Reader(data, start).value(_STRUCT)

    types = {(t.value[0], t.value[1]): t for t in ColumnType}
    columns = []
    for element in meta[2][1:]:
        if element.get(3, 0) != 0:
            raise ParquetFormatError("only required columns are supported")
        ctype = types.get((element[1], element.get(6))) or types.get((element[1], None))
        if ctype is None:
            raise ParquetFormatError(f"unsupported physical type {element[1]}")
        columns.append(Column(element[4].decode("utf-8"), ctype, []))

    for row_group in meta.get(4, []):
        if len(row_group[1]) != len(columns):
            raise ParquetFormatError("row group does not match the schema")
        for column, chunk in zip(columns, row_group[1]):
            info = chunk[3]
            if info.get(4, 0) != 0 or 11 in info:
                raise ParquetFormatError("compressed or dictionary pages are not supported")
            reader = _Reader(data, info[9])
            while len(column.values) < info[5] + sum(0 for _ in ()):
                header = reader.value(_STRUCT)
                if header[1] != 0 or header[5][2] != 0 or header[5][1] <= 0:
                    raise ParquetFormatError("unsupported data page")
                column.values.extend(_decode(column.type, reader.take(header[3]), header[5][1]))

    for column in columns:
        if len(column.values) != meta[3]:
            raise ParquetFormatError(f"column {column.name!r} has the wrong row count")
    return columns


def read_table(path: str | Path) -> list[Column]:
    """Read a Parquet file written by :func:`write_table` into columns."""
    data = Path(path).read_bytes()
    try:
        return _read(data)
    except (KeyError, IndexError, TypeError, AttributeError, struct.error, UnicodeDecodeError) as exc:
        raise ParquetFormatError(f"malformed Parquet file: {exc}") from exc