"""Write-ahead log records, the log buffer and the log manager."""

from __future__ import annotations

import struct
import threading
from enum import IntEnum
from typing import ClassVar

from .disk_manager import DiskManager
from .page import INVALID_LSN, PAGE_SIZE
from .record import Rid, RmRecord

INVALID_TXN_ID = -1
LOG_BUFFER_SIZE = 1024 * PAGE_SIZE
FLUSH_TIMEOUT = 3.0

_HEADER = struct.Struct("<iiIii")
_INT = struct.Struct("<i")
_UINT = struct.Struct("<I")
_RID = struct.Struct("<ii")
_NAME_SIZE = struct.Struct("<Q")

OFFSET_LOG_TYPE = 0
OFFSET_LSN = OFFSET_LOG_TYPE + _INT.size
OFFSET_LOG_TOT_LEN = OFFSET_LSN + _INT.size
OFFSET_LOG_TID = OFFSET_LOG_TOT_LEN + _UINT.size
OFFSET_PREV_LSN = OFFSET_LOG_TID + _INT.size
OFFSET_LOG_DATA = OFFSET_PREV_LSN + _INT.size
LOG_HEADER_SIZE = OFFSET_LOG_DATA


class LogType(IntEnum):
    """The kind of operation a log record describes."""

    UPDATE = 0
    INSERT = 1
    DELETE = 2
    BEGIN = 3
    COMMIT = 4
    ABORT = 5


class LogRecord:
    """A log record: a fixed header, followed by data specific to its type."""

    _registry: ClassVar[dict[LogType, type[LogRecord]]] = {}
    record_type: ClassVar[LogType | None] = None

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        if cls.record_type is not None:
            LogRecord._registry[cls.record_type] = cls

    def __init__(
        self,
        log_type: LogType,
        log_tid: int = INVALID_TXN_ID,
        lsn: int = INVALID_LSN,
        prev_lsn: int = INVALID_LSN,
    ) -> None:
        self.log_type = LogType(log_type)
        self.log_tid = log_tid
        self.lsn = lsn
        self.prev_lsn = prev_lsn

    def _payload(self) -> bytes:
        return b""

    @property
    def log_tot_len(self) -> int:
        """The length of the whole serialized record."""
        return LOG_HEADER_SIZE + len(self._payload())

    def serialize(self) -> bytes:
        """The record as the bytes written to the log."""
        payload = self._payload()
        header = _HEADER.pack(
            int(self.log_type),
            self.lsn,
            LOG_HEADER_SIZE + len(payload),
            self.log_tid,
            self.prev_lsn,
        )
        return header + payload

    @classmethod
    def deserialize(cls, data: bytes | bytearray) -> LogRecord:
        """Read one record from the start of data.

        Called on LogRecord, it returns a record of the class matching the
        stored type; called on a subclass, the stored type must match it.
        """
        if len(data) < LOG_HEADER_SIZE:
            raise ValueError("log record header is truncated")
        raw_type, lsn, tot_len, tid, prev_lsn = _HEADER.unpack_from(data)
        try:
            log_type = LogType(raw_type)
        except ValueError:
            raise ValueError(f"unknown log type: {raw_type}") from None
        if tot_len < LOG_HEADER_SIZE or len(data) < tot_len:
            raise ValueError("log record is truncated")
        target = LogRecord._registry.get(log_type, LogRecord)
        if cls is not LogRecord and target is not cls:
            raise ValueError(f"log record of type {log_type.name} is not a {cls.__name__}")
        payload = bytes(data[LOG_HEADER_SIZE:tot_len])
        return target._build(log_type, lsn, tid, prev_lsn, payload)

    @classmethod
    def _build(
        cls, log_type: LogType, lsn: int, tid: int, prev_lsn: int, payload: bytes
    ) -> LogRecord:
        if payload:
            raise ValueError(f"unexpected data in {log_type.name} log record")
        return LogRecord(log_type, tid, lsn, prev_lsn)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LogRecord):
            return NotImplemented
        return type(self) is type(other) and self.serialize() == other.serialize()

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "\n".join(
            [
                f"log_type_: {self.log_type.name}",
                f"lsn: {self.lsn}",
                f"log_tot_len: {self.log_tot_len}",
                f"log_tid: {self.log_tid}",
                f"prev_lsn: {self.prev_lsn}",
            ]
        )


class BeginLogRecord(LogRecord):
    """Marks the start of a transaction."""

    record_type = LogType.BEGIN

    def __init__(
        self,
        txn_id: int = INVALID_TXN_ID,
        lsn: int = INVALID_LSN,
        prev_lsn: int = INVALID_LSN,
    ) -> None:
        super().__init__(LogType.BEGIN, txn_id, lsn, prev_lsn)

    @classmethod
    def _build(
        cls, log_type: LogType, lsn: int, tid: int, prev_lsn: int, payload: bytes
    ) -> BeginLogRecord:
        if payload:
            raise ValueError("unexpected data in BEGIN log record")
        return cls(tid, lsn, prev_lsn)


class InsertLogRecord(LogRecord):
    """Records the insertion of a record into a table."""

    record_type = LogType.INSERT

    def __init__(
        self,
        txn_id: int = INVALID_TXN_ID,
        insert_value: RmRecord | None = None,
        rid: Rid | None = None,
        table_name: str = "",
        lsn: int = INVALID_LSN,
        prev_lsn: int = INVALID_LSN,
    ) -> None:
        super().__init__(LogType.INSERT, txn_id, lsn, prev_lsn)
        self.insert_value = insert_value if insert_value is not None else RmRecord()
        self.rid = rid if rid is not None else Rid(-1, -1)
        self.table_name = table_name

    def _payload(self) -> bytes:
        name = self.table_name.encode()
        return b"".join(
            [
                self.insert_value.serialize(),
                _RID.pack(self.rid.page_no, self.rid.slot_no),
                _NAME_SIZE.pack(len(name)),
                name,
            ]
        )

    @classmethod
    def _build(
        cls, log_type: LogType, lsn: int, tid: int, prev_lsn: int, payload: bytes
    ) -> InsertLogRecord:
        value = RmRecord.deserialize(payload)
        offset = _INT.size + value.size
        if len(payload) < offset + _RID.size + _NAME_SIZE.size:
            raise ValueError("INSERT log record is truncated")
        page_no, slot_no = _RID.unpack_from(payload, offset)
        offset += _RID.size
        (name_size,) = _NAME_SIZE.unpack_from(payload, offset)
        offset += _NAME_SIZE.size
        if len(payload) != offset + name_size:
            raise ValueError("INSERT log record has a bad table name length")
        name = payload[offset:offset + name_size].decode()
        return cls(tid, value, Rid(page_no, slot_no), name, lsn, prev_lsn)

    def __str__(self) -> str:
        return "\n".join(
            [
                "insert record",
                super().__str__(),
                f"insert_value: {bytes(self.insert_value.data)!r}",
                f"insert rid: {self.rid.page_no}, {self.rid.slot_no}",
                f"table name: {self.table_name}",
            ]
        )


class LogBuffer:
    """The single in-memory buffer that log records are appended to."""

    def __init__(self, capacity: int = LOG_BUFFER_SIZE) -> None:
        self.capacity = capacity
        self.buffer = bytearray(capacity)
        self.offset = 0

    def is_full(self, append_size: int) -> bool:
        """Whether append_size more bytes would overflow the buffer."""
        return self.offset + append_size > self.capacity


class LogManager:
    """Hands out log sequence numbers, buffers records and writes them to disk."""

    def __init__(self, disk_manager: DiskManager, buffer_size: int = LOG_BUFFER_SIZE) -> None:
        self._disk = disk_manager
        self._latch = threading.Lock()
        self._global_lsn = 0
        self._buffered_lsn = INVALID_LSN
        self.log_buffer = LogBuffer(buffer_size)
        self.persist_lsn = INVALID_LSN

    def add_log_to_buffer(self, log_record: LogRecord) -> int:
        """Give the record the next lsn, append it to the buffer and return the lsn.

        The buffer is flushed first when the record does not fit in it.
        """
        with self._latch:
            size = log_record.log_tot_len
            if size > self.log_buffer.capacity:
                raise ValueError(
                    f"log record of {size} bytes exceeds the log buffer of "
                    f"{self.log_buffer.capacity} bytes"
                )
            if self.log_buffer.is_full(size):
                self._flush()
            lsn = self._global_lsn
            self._global_lsn += 1
            log_record.lsn = lsn
            data = log_record.serialize()
            start = self.log_buffer.offset
            self.log_buffer.buffer[start:start + len(data)] = data
            self.log_buffer.offset = start + len(data)
            self._buffered_lsn = lsn
            return lsn

    def flush_log_to_disk(self) -> None:
        """Write the buffered records to the log file and empty the buffer."""
        with self._latch:
            self._flush()

    def _flush(self) -> None:
        if self.log_buffer.offset == 0:
            return
        self._disk.write_log(bytes(self.log_buffer.buffer[:self.log_buffer.offset]))
        self.log_buffer.offset = 0
        self.persist_lsn = self._buffered_lsn