# rmdb

The storage layer of a small teaching relational database, in plain Python
with no runtime dependencies.

## What is inside

- `rmdb.disk_manager.DiskManager` creates, opens, closes and destroys files
  and directories, reads and writes fixed-size pages (`rmdb.page.PAGE_SIZE`,
  4096 bytes), hands out page numbers for each open file, and appends to and
  reads from a write-ahead log file (`db.log` by default). Used as a context
  manager, it closes every file it still has open on exit.
- `rmdb.page` holds `PageId` (file descriptor and page number) and `Page`,
  one frame of page data with its dirty flag, pin count and `lsn` property.
- `rmdb.replacer.LRUReplacer` tracks unpinned frames; `victim()` removes and
  returns the frame unpinned longest ago, or `None` when there is none.
- `rmdb.buffer_pool.BufferPoolManager` caches pages in a fixed number of
  frames. `fetch_page`, `new_page`, `unpin_page`, `flush_page`,
  `flush_all_pages` and `delete_page` pin, create, release and write back
  pages; `fetch_page` and `new_page` return `None` when every frame is pinned.
- `rmdb.bitmap` has the bit helpers (`set_bit`, `reset_bit`, `is_set`,
  `next_bit`, `first_bit`) used for the slot bitmaps of record pages.
- `rmdb.record` has `Rid`, the file and page headers `RmFileHdr` and
  `RmPageHdr`, and `RmRecord` with `serialize` / `deserialize`.
- `rmdb.rm_manager.RmManager` creates, opens, closes and destroys table data
  files. `rmdb.rm_file_handle.RmFileHandle` inserts (`insert_record`,
  `insert_record_at`), reads (`get_record`, `is_record`), updates and deletes
  fixed-size records addressed by `Rid`, and `rmdb.rm_scan.RmScan` walks
  every stored record of a file in page and slot order.
- `rmdb.log` holds the log record types `LogRecord`, `BeginLogRecord` and
  `InsertLogRecord` with their binary layout, the `LogBuffer`, and the
  `LogManager`, which gives each record the next log sequence number,
  buffers it, and writes the buffer to the log file when it is full or
  when `flush_log_to_disk()` is called.
- `rmdb.ast` has the SQL syntax tree nodes; `rmdb.ast_printer.format_tree`
  and `print_tree` render a tree as indented text; `rmdb.lexer.tokenize`
  splits SQL text into `Token`s ending with a `T_EOF` token and raises
  `LexerError` on a character no token can start with.

## Install

```
pip install .
```

## Example

```python
from rmdb.disk_manager import DiskManager
from rmdb.buffer_pool import BufferPoolManager
from rmdb.rm_manager import RmManager
from rmdb.rm_scan import RmScan

disk = DiskManager()
pool = BufferPoolManager(64, disk)
records = RmManager(disk, pool)

records.create_file("people.tbl", 8)
table = records.open_file("people.tbl")

rid = table.insert_record(b"alice\0\0\0")
print(bytes(table.get_record(rid).data))      # b'alice\x00\x00\x00'

table.update_record(rid, b"bob\0\0\0\0\0")
for found in RmScan(table):
    print(found, bytes(table.get_record(found).data))

table.delete_record(rid)
records.close_file(table)
records.destroy_file("people.tbl")
```

Records have the fixed size given when the file was created; a shorter
buffer raises `ValueError`. Errors of the engine are exceptions derived from
`rmdb.errors.RMDBError`, for example `RecordNotFoundError` when a slot holds
no record, `FileNotClosedError` when a file that is still open is opened
again, or `InvalidRecordSizeError` for a record size outside 1 to 512.

## Working with SQL text

```python
from rmdb.lexer import tokenize
from rmdb.ast import Col, SelectStmt
from rmdb.ast_printer import format_tree

for token in tokenize("select * from tb where a = 1;"):
    print(token.kind.name, token.value)

print(format_tree(SelectStmt(cols=[Col("tb", "a")], tabs=["tb"], conds=[])))
```

## What this package does not do

- There is no grammar: `tokenize` produces tokens, but nothing turns them
  into `rmdb.ast` trees; trees are built by hand.
- There is no server, client or command to run, and no query planning or
  execution, system catalog, indexes, locking or transactions.
- There is no crash recovery: log records can be written to and read back
  from the log file, but nothing replays or undoes them. Only begin and
  insert log records exist.

## Tests

```
pip install ".[test]"
pytest
```