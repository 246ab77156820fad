"""Discovery of input files and preparation of the output directory."""

from __future__ import annotations

from pathlib import Path


def list_txt_files(dir_path: str | Path) -> list[str]:
    """Return the paths of the regular ``.txt`` files directly inside ``dir_path``."""
    return sorted(
        str(entry)
        for entry in Path(dir_path).iterdir()
        if entry.is_file() and entry.suffix == ".txt"
    )


def check_path(path: str | Path) -> None:
    """Raise unless ``path`` exists and is a directory."""
    # stat() raises FileNotFoundError or PermissionError for unusable paths.
    if not Path(path).stat() or not Path(path).is_dir():
        raise NotADirectoryError(f"Provide directory, not file: {path}")


def prepare_output_dir(out_dir_path: str | Path) -> None:
    """Create the output directory, or remove the files already in it.

    Subdirectories of an existing output directory are left alone.
    """
    out_dir = Path(out_dir_path)
    if str(out_dir_path) == "" or out_dir.parent == out_dir:
        raise ValueError("Please give a correct path for the Parquet output directory")
    out_dir.parent.mkdir(parents=True, exist_ok=True)
    if not out_dir.exists():
        out_dir.mkdir(parents=True)
        return
    for entry in out_dir.iterdir():
        if entry.is_file():
            entry.unlink()