"""Parallel conversion of a directory of files with a progress bar."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from tqdm import tqdm

from csv2pq.convert import convert_file
from csv2pq.files import list_txt_files

_BAR_FORMAT = "[{bar}] {n_fmt}/{total_fmt} files converted ({percentage:.0f}%)"


@dataclass(frozen=True)
class FileResult:
    """Outcome of converting one input file."""

    input_file: str
    output_file: Path
    elapsed: float
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def output_path_for(input_file: str | Path, out_dir_path: str | Path) -> Path:
    """Return the Parquet path in ``out_dir_path`` for ``input_file``."""
    stem = Path(input_file).stem or "output"
    return Path(out_dir_path) / f"{stem}.parquet"


def _convert_one(input_file: str, out_dir: Path) -> FileResult:
    output_file = output_path_for(input_file, out_dir)
    start = time.perf_counter()
    try:
        convert_file(input_file, output_file)
    except (OSError, ValueError) as exc:
        return FileResult(input_file, output_file, time.perf_counter() - start, str(exc))
    return FileResult(input_file, output_file, time.perf_counter() - start)


def process_files(
    input_dir: str | Path,
    output_dir: str | Path,
    threads: int | None = None,
) -> list[FileResult]:
    """Convert every ``.txt`` file in ``input_dir`` into ``output_dir``.

    Failures are reported and recorded in the results rather than raised.
    Results are returned in the order the input files were listed.
    """
    if threads is not None and threads <= 0:
        raise ValueError("Failed to build thread pool: thread count must be positive")
    files = list_txt_files(input_dir)
    print(f"📂 Found {len(files)} file(s) to convert")
    out_dir = Path(output_dir)
    results: dict[str, FileResult] = {}
    with tqdm(total=len(files), bar_format=_BAR_FORMAT, leave=False) as bar:
        with ThreadPoolExecutor(max_workers=threads) as pool:
            futures = [pool.submit(_convert_one, name, out_dir) for name in files]
            for future in as_completed(futures):
                result = future.result()
                if result.ok:
                    tqdm.write(
                        f"✅ Converted '{result.input_file}' in {result.elapsed:.2f}s"
                    )
                else:
                    tqdm.write(
                        f"❌ Failed to convert file {result.input_file}: {result.error}"
                    )
                results[result.input_file] = result
                bar.update(1)
    return [results[name] for name in files]