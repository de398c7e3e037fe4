import pytest

from rmdb.disk_manager import DiskManager
from rmdb.log import (
    INVALID_TXN_ID,
    LOG_HEADER_SIZE,
    BeginLogRecord,
    InsertLogRecord,
    LogBuffer,
    LogManager,
    LogRecord,
    LogType,
)
from rmdb.page import INVALID_LSN
from rmdb.record import Rid, RmRecord


@pytest.fixture
def disk(tmp_path):
    log_path = str(tmp_path / "db.log")
    dm = DiskManager(log_path)
    dm.create_file(log_path)
    with dm:
        yield dm


def _split(data):
    records = []
    while data:
        rec = LogRecord.deserialize(data)
        records.append(rec)
        data = data[rec.log_tot_len:]
    return records


def test_begin_record_round_trip():
    rec = BeginLogRecord(7)
    rec.lsn = 5
    data = rec.serialize()
    assert len(data) == LOG_HEADER_SIZE == rec.log_tot_len
    back = LogRecord.deserialize(data)
    assert isinstance(back, BeginLogRecord)
    assert back.log_tid == 7
    assert back.lsn == 5
    assert back.log_type is LogType.BEGIN
    assert back == rec


def test_log_type_is_first_field():
    assert BeginLogRecord(1).serialize()[:4] == b"\x03\x00\x00\x00"
    insert = InsertLogRecord(1, RmRecord(b"x"), Rid(1, 0), "t")
    assert insert.serialize()[:4] == b"\x01\x00\x00\x00"


def test_defaults_are_invalid():
    rec = BeginLogRecord()
    assert rec.log_tid == INVALID_TXN_ID
    assert rec.lsn == INVALID_LSN
    assert rec.prev_lsn == INVALID_LSN


def test_insert_record_round_trip():
    rec = InsertLogRecord(3, RmRecord(b"abcd"), Rid(2, 5), "orders")
    data = rec.serialize()
    assert rec.log_tot_len == len(data)
    back = InsertLogRecord.deserialize(data)
    assert back == rec
    assert back.insert_value == RmRecord(b"abcd")
    assert back.rid == Rid(2, 5)
    assert back.table_name == "orders"
    assert back.log_tid == 3


def test_insert_length_follows_name_and_value():
    short = InsertLogRecord(1, RmRecord(b"ab"), Rid(1, 1), "o")
    longer = InsertLogRecord(1, RmRecord(b"abcd"), Rid(1, 1), "orders")
    assert longer.log_tot_len - short.log_tot_len == (len("orders") - len("o")) + (
        len(b"abcd") - len(b"ab")
    )


def test_deserialize_truncated_raises():
    data = InsertLogRecord(1, RmRecord(b"abcd"), Rid(1, 2), "tb").serialize()
    with pytest.raises(ValueError):
        LogRecord.deserialize(data[:-1])
    with pytest.raises(ValueError):
        LogRecord.deserialize(data[:LOG_HEADER_SIZE - 1])


def test_deserialize_unknown_type_raises():
    data = bytearray(BeginLogRecord(1).serialize())
    data[0] = 9
    with pytest.raises(ValueError):
        LogRecord.deserialize(bytes(data))


def test_deserialize_with_wrong_class_raises():
    data = BeginLogRecord(1).serialize()
    with pytest.raises(ValueError):
        InsertLogRecord.deserialize(data)


def test_log_buffer_is_full():
    buf = LogBuffer(64)
    assert not buf.is_full(64)
    assert buf.is_full(65)
    buf.offset = 10
    assert buf.is_full(55)
    assert not buf.is_full(54)


def test_log_manager_assigns_increasing_lsns(disk):
    manager = LogManager(disk)
    lsns = [manager.add_log_to_buffer(BeginLogRecord(t)) for t in range(3)]
    assert lsns == [0, 1, 2]


def test_log_manager_flush_writes_records(disk):
    manager = LogManager(disk)
    records = [
        BeginLogRecord(4),
        InsertLogRecord(4, RmRecord(b"row1"), Rid(1, 0), "tb"),
        BeginLogRecord(5),
    ]
    for rec in records:
        manager.add_log_to_buffer(rec)
    assert disk.get_file_size(disk.log_file_name) == 0
    manager.flush_log_to_disk()
    total = sum(rec.log_tot_len for rec in records)
    assert disk.get_file_size(disk.log_file_name) == total
    assert manager.log_buffer.offset == 0
    assert manager.persist_lsn == records[-1].lsn
    assert _split(disk.read_log(total, 0)) == records


def test_log_manager_flushes_when_buffer_full(disk):
    manager = LogManager(disk, buffer_size=2 * LOG_HEADER_SIZE)
    for tid in range(3):
        manager.add_log_to_buffer(BeginLogRecord(tid))
    assert disk.get_file_size(disk.log_file_name) == 2 * LOG_HEADER_SIZE
    assert manager.persist_lsn == 1
    assert manager.log_buffer.offset == LOG_HEADER_SIZE
    written = _split(disk.read_log(2 * LOG_HEADER_SIZE, 0))
    assert [rec.log_tid for rec in written] == [0, 1]


def test_log_manager_rejects_oversized_record(disk):
    manager = LogManager(disk, buffer_size=LOG_HEADER_SIZE)
    with pytest.raises(ValueError):
        manager.add_log_to_buffer(InsertLogRecord(1, RmRecord(b"abcd"), Rid(1, 0), "tb"))


def test_flush_of_empty_buffer_writes_nothing(disk):
    manager = LogManager(disk)
    manager.flush_log_to_disk()
    assert disk.get_file_size(disk.log_file_name) == 0
    assert manager.persist_lsn == INVALID_LSN