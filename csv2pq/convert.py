"""Conversion of quote CSV files into Parquet tables."""

from __future__ import annotations

import csv
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from csv2pq.parquet import Column, ColumnType, write_table

_UNSIGNED = re.compile(r"\+?[0-9]+")


class ConversionError(ValueError):
    """Raised when an input file cannot be turned into records."""


@dataclass(frozen=True)
class ProcessedRecord:
    """One quote row with its date and time merged into one string."""

    datetime_str: str
    open: float
    high: float
    low: float
    close: float
    vol: int


def _field(row: Mapping[str, str | None], name: str) -> str:
    value = row.get(f"<{name}>")
    if value is None:
        raise ConversionError(f"missing field `<{name}>`")
    return value


def _float(row: Mapping[str, str | None], name: str) -> float:
    text = _field(row, name)
    try:
        if not text or re.search(r"[\s_]", text):
            raise ValueError
        return float(text)
    except ValueError:
        raise ConversionError(f"field `<{name}>`: invalid float literal {text!r}") from None


def parse_record(row: Mapping[str, str | None]) -> ProcessedRecord:
    """Turn one CSV row, keyed by header name, into a processed record."""
    stamp = f"{_field(row, 'DATE')} {_field(row, 'TIME')}"
    prices = [_float(row, name) for name in ("OPEN", "HIGH", "LOW", "CLOSE")]
    vol_text = _field(row, "VOL")
    if not _UNSIGNED.fullmatch(vol_text) or int(vol_text) >= 2**64:
        raise ConversionError(f"field `<VOL>`: invalid unsigned integer {vol_text!r}")
    try:
        moment = datetime.strptime(stamp, "%Y%m%d %H%M%S")
    except ValueError as exc:
        raise ConversionError(f"Failed to parse datetime: {exc}") from None
    return ProcessedRecord(moment.isoformat(sep=" "), *prices, int(vol_text))


def read_records(input_path: str | Path) -> list[ProcessedRecord]:
    """Read every record of a CSV file with a header row."""
    with open(input_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        records = []
        try:
            for row in reader:
                if None in row or None in row.values():
                    raise ConversionError("record length differs from the header")
                records.append(parse_record(row))
        except (ConversionError, csv.Error, UnicodeDecodeError) as exc:
            raise ConversionError(f"{input_path}, line {reader.line_num}: {exc}") from None
    return records


def records_to_columns(records: list[ProcessedRecord]) -> list[Column]:
    """Lay records out as the table's columns."""
    return [
        Column("datetime_str", ColumnType.STRING, [r.datetime_str for r in records]),
        Column("open", ColumnType.DOUBLE, [r.open for r in records]),
        Column("high", ColumnType.DOUBLE, [r.high for r in records]),
        Column("low", ColumnType.DOUBLE, [r.low for r in records]),
        Column("close", ColumnType.DOUBLE, [r.close for r in records]),
        Column("vol", ColumnType.UINT64, [r.vol for r in records]),
    ]


def convert_file(input_path: str | Path, output_path: str | Path) -> None:
    """Convert one CSV file into a Parquet file."""
    write_table(output_path, records_to_columns(read_records(input_path)))