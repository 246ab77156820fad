"""Convert OHLCV CSV/TXT quote files to Parquet with a small built-in Parquet writer and reader."""

__version__ = "0.1.0"
__all__ = ["__version__"]