[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "csv2pq"
version = "0.1.0"
description = "Convert directories of OHLCV CSV/TXT quote files to Parquet"
requires-python = ">=3.10"
dependencies = [
    "tqdm",
]
keywords = ["csv", "parquet", "ohlcv", "conversion", "quotes"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: File Formats",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
csv2pq = "csv2pq.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["csv2pq"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
