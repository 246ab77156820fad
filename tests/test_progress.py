from pathlib import Path

import pytest

from csv2pq.parquet import read_table
from csv2pq.progress import FileResult, output_path_for, process_files

HEADER = "<DATE>,<TIME>,<OPEN>,<HIGH>,<LOW>,<CLOSE>,<VOL>\n"


def _write_good(path: Path) -> None:
    path.write_text(HEADER + "20240102,100000,1.5,2.5,1.0,2.0,100\n", encoding="utf-8")


def test_output_path_for_replaces_extension(tmp_path):
    assert output_path_for("/data/SBER.txt", tmp_path) == tmp_path / "SBER.parquet"


def test_output_path_for_keeps_inner_dots(tmp_path):
    assert output_path_for("x/a.b.txt", tmp_path) == tmp_path / "a.b.parquet"


def test_output_path_for_empty_name_falls_back(tmp_path):
    assert output_path_for("", tmp_path) == tmp_path / "output.parquet"


def test_file_result_ok_flag(tmp_path):
    good = FileResult("a.txt", tmp_path / "a.parquet", 0.1)
    bad = FileResult("b.txt", tmp_path / "b.parquet", 0.1, "broken")
    assert good.ok is True
    assert bad.ok is False


def test_process_files_converts_and_reports(tmp_path):
    src = tmp_path / "in"
    dst = tmp_path / "out"
    src.mkdir()
    dst.mkdir()
    _write_good(src / "good.txt")
    (src / "bad.txt").write_text(HEADER + "notadate,100000,1,1,1,1,1\n", encoding="utf-8")
    (src / "skip.csv").write_text("ignored")

    results = process_files(src, dst, threads=2)

    assert [Path(r.input_file).name for r in results] == ["bad.txt", "good.txt"]
    by_name = {Path(r.input_file).name: r for r in results}
    assert by_name["good.txt"].ok
    assert not by_name["bad.txt"].ok
    assert "datetime" in by_name["bad.txt"].error
    assert sorted(p.name for p in dst.iterdir()) == ["good.parquet"]

    columns = read_table(dst / "good.parquet")
    table = {c.name: c.values for c in columns}
    assert table["datetime_str"] == ["2024-01-02 10:00:00"]
    assert table["open"] == [1.5]
    assert table["vol"] == [100]


def test_process_files_default_threads(tmp_path):
    src = tmp_path / "in"
    dst = tmp_path / "out"
    src.mkdir()
    dst.mkdir()
    for name in ("a", "b", "c"):
        _write_good(src / f"{name}.txt")
    results = process_files(src, dst)
    assert all(r.ok for r in results)
    assert sorted(p.name for p in dst.iterdir()) == [
        "a.parquet",
        "b.parquet",
        "c.parquet",
    ]


def test_process_files_empty_dir(tmp_path):
    assert process_files(tmp_path, tmp_path, threads=1) == []


def test_process_files_rejects_zero_threads(tmp_path):
    with pytest.raises(ValueError):
        process_files(tmp_path, tmp_path, threads=0)