"""Storage layer of a small relational database: pages, buffer pool, record files, log records, SQL tree and tokenizer."""

__version__ = "0.1.0"