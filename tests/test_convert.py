import pytest

from csv2pq.convert import (
    ConversionError,
    ProcessedRecord,
    convert_file,
    parse_record,
    read_records,
    records_to_columns,
)
from csv2pq.parquet import ColumnType, read_table

HEADER = "<TICKER>,<PER>,<DATE>,<TIME>,<OPEN>,<HIGH>,<LOW>,<CLOSE>,<VOL>"
LINES = [
    "ABC,1,20240102,093000,100.5,101,99.75,100,1200",
    "ABC,1,20240102,093100,100,102.5,99.5,102,3400",
    "ABC,1,20240103,000000,102,103,101,101.25,0",
]


def _write(tmp_path, lines, name="quotes.txt", header=HEADER):
    path = tmp_path / name
    path.write_text("\n".join([header, *lines]) + "\n", encoding="utf-8")
    return path


def _row(**overrides):
    row = {
        "<DATE>": "20240102",
        "<TIME>": "093000",
        "<OPEN>": "100.5",
        "<HIGH>": "101",
        "<LOW>": "99.75",
        "<CLOSE>": "100",
        "<VOL>": "1200",
    }
    row.update(overrides)
    return row


def test_parse_record():
    assert parse_record(_row()) == ProcessedRecord(
        "2024-01-02 09:30:00", 100.5, 101.0, 99.75, 100.0, 1200
    )


def test_parse_record_ignores_extra_fields():
    plain = parse_record(_row())
    assert parse_record({**_row(), "<TICKER>": "ABC"}) == plain


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("<DATE>", "20241302"),
        ("<DATE>", "2024-01-02"),
        ("<TIME>", "250000"),
        ("<VOL>", "-5"),
        ("<VOL>", "1.5"),
        ("<VOL>", ""),
        ("<VOL>", str(2**64)),
        ("<OPEN>", "abc"),
        ("<OPEN>", ""),
        ("<CLOSE>", " 1"),
    ],
)
def test_parse_record_rejects_bad_values(key, value):
    with pytest.raises(ConversionError):
        parse_record(_row(**{key: value}))


def test_parse_record_missing_field():
    row = _row()
    del row["<VOL>"]
    with pytest.raises(ConversionError, match="<VOL>"):
        parse_record(row)


def test_read_records_keeps_order(tmp_path):
    path = _write(tmp_path, LINES)
    records = read_records(path)
    assert len(records) == len(LINES)
    assert records[0] == parse_record(_row())
    assert [r.vol for r in records] == [1200, 3400, 0]
    assert records == sorted(records, key=lambda r: r.datetime_str)


def test_read_records_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("", encoding="utf-8")
    assert read_records(path) == []


def test_read_records_header_only(tmp_path):
    path = _write(tmp_path, [])
    assert read_records(path) == []


def test_read_records_wrong_field_count(tmp_path):
    path = _write(tmp_path, [LINES[0], "ABC,1,20240102,093100,100"])
    with pytest.raises(ConversionError, match="line 3"):
        read_records(path)


def test_read_records_bad_date_reports_line(tmp_path):
    path = _write(tmp_path, [LINES[0], LINES[1].replace("20240102", "20240199")])
    with pytest.raises(ConversionError, match="Failed to parse datetime"):
        read_records(path)


def test_read_records_invalid_utf8(tmp_path):
    path = tmp_path / "broken.txt"
    path.write_bytes(HEADER.encode() + b"\n" + LINES[0].encode() + b"\xff\xfe\n")
    with pytest.raises(ConversionError):
        read_records(path)


def test_records_to_columns(tmp_path):
    records = read_records(_write(tmp_path, LINES))
    columns = records_to_columns(records)
    assert [c.name for c in columns] == ["datetime_str", "open", "high", "low", "close", "vol"]
    assert [c.type for c in columns] == [
        ColumnType.STRING,
        ColumnType.DOUBLE,
        ColumnType.DOUBLE,
        ColumnType.DOUBLE,
        ColumnType.DOUBLE,
        ColumnType.UINT64,
    ]
    assert columns[0].values == [r.datetime_str for r in records]
    assert columns[5].values == [r.vol for r in records]
    assert all(len(c.values) == len(records) for c in columns)


def test_convert_file_round_trip(tmp_path):
    source = _write(tmp_path, LINES)
    target = tmp_path / "quotes.parquet"
    convert_file(source, target)
    assert read_table(target) == records_to_columns(read_records(source))


def test_convert_file_failure_writes_nothing(tmp_path):
    source = _write(tmp_path, [LINES[0], "ABC,1,bad,093000,1,1,1,1,1"])
    target = tmp_path / "quotes.parquet"
    with pytest.raises(ConversionError):
        convert_file(source, target)
    assert not target.exists()


def test_convert_file_missing_input(tmp_path):
    with pytest.raises(FileNotFoundError):
        convert_file(tmp_path / "absent.txt", tmp_path / "out.parquet")