# csv2pq

`csv2pq` converts a directory of OHLCV quote files into Parquet files, one per input file.

## Input

It reads every regular `.txt` file directly inside the input directory (subdirectories are not searched). Each file is UTF-8, comma-separated, and has a header row naming these columns:

```
<DATE>,<TIME>,<OPEN>,<HIGH>,<LOW>,<CLOSE>,<VOL>
20240102,100000,101.5,102.0,101.2,101.8,1500
```

- `<DATE>` is `YYYYMMDD` and `<TIME>` is `HHMMSS`.
- `<OPEN>`, `<HIGH>`, `<LOW>` and `<CLOSE>` are decimal numbers, with no spaces or underscores.
- `<VOL>` is an unsigned integer below 2**64.

Columns are looked up by header name. Every row must have as many fields as the header.

## Output

Each input `name.txt` becomes `name.parquet` in the output directory. The Parquet file has these columns, all required (no nulls):

| column         | type                                |
|----------------|-------------------------------------|
| `datetime_str` | string, `YYYY-MM-DD HH:MM:SS`       |
| `open`         | double                              |
| `high`         | double                              |
| `low`          | double                              |
| `close`        | double                              |
| `vol`          | unsigned 64-bit integer             |

The program creates the output directory and its parents if they are missing. If the directory already exists, it deletes the regular files in it before converting. Subdirectories are left alone.

## Installation

```
pip install .
```

## Usage

```
csv2pq --input ./quotes --output ./parquet
csv2pq -i ./quotes -o ./parquet --threads 4
```

Options:

- `-i`, `--input`: directory holding the `.txt` files (required)
- `-o`, `--output`: directory for the Parquet files (required)
- `-t`, `--threads`: number of worker threads, a positive integer. By default the worker pool picks its own size and the CPU count is reported. If the value is above the CPU count, a warning is printed and the reported count is capped. The worker pool still uses the number given.
- `--version`: print the version and exit

Files are converted in parallel and a progress bar is shown. If one file fails to convert, an error line is printed for that file and the other files are still converted. If the input path is not a directory or the output directory cannot be prepared, an error is printed to standard error and the command exits with status 1.

## Library use

```python
from csv2pq.convert import convert_file
from csv2pq.parquet import read_table

convert_file("quotes/SBER.txt", "parquet/SBER.parquet")
for column in read_table("parquet/SBER.parquet"):
    print(column.name, column.type, column.values[:3])
```

- `csv2pq.convert`: `read_records(path)` returns a list of `ProcessedRecord`. `parse_record(row)` parses one row given as a mapping keyed by header. `records_to_columns(records)` lays records out as columns. `convert_file(input_path, output_path)` does all three steps and writes the file. Bad input raises `ConversionError`, a subclass of `ValueError`.
- `csv2pq.parquet`: `write_table(path, columns)` writes a list of `Column(name, type, values)`, where `type` is a `ColumnType`: `STRING`, `DOUBLE`, `INT64` or `UINT64`. `read_table(path)` reads such a file back. Files it cannot read raise `ParquetFormatError`.
- `csv2pq.files`: `list_txt_files(dir_path)` returns the sorted `.txt` paths in a directory. `check_path(path)` raises unless the path is a directory. `prepare_output_dir(out_dir_path)` creates or cleans the output directory.
- `csv2pq.progress`: `process_files(input_dir, output_dir, threads=None)` converts a whole directory. It returns one `FileResult` per file, in listing order. Each result has `input_file`, `output_file`, `elapsed`, `error` and `ok`. `output_path_for(input_file, out_dir_path)` gives the Parquet path for an input file.

## Limitations

The Parquet support is a small built-in writer and reader, not a general Parquet library:

- Files are written as one row group with one uncompressed, PLAIN-encoded data page per column.
- There is no compression, no dictionary encoding and no nullable or nested columns.
- `read_table` reads files with that layout, such as those written by `write_table`. It rejects compressed or dictionary-encoded files and optional columns from other writers.