[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rmdb"
version = "0.1.0"
description = "Storage layer of a small relational database: disk manager, LRU buffer pool, record files, write-ahead log records, SQL syntax tree and tokenizer"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "database",
    "buffer-pool",
    "lru",
    "storage-engine",
    "record-manager",
    "write-ahead-log",
    "sql",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rmdb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
