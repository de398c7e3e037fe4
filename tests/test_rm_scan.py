import pytest

from rmdb.buffer_pool import BufferPoolManager
from rmdb.disk_manager import DiskManager
from rmdb.record import RM_NO_PAGE
from rmdb.rm_manager import RmManager
from rmdb.rm_scan import RmScan

RECORD_SIZE = 256


def rec(i: int) -> bytes:
    return bytes([i % 256]) * RECORD_SIZE


@pytest.fixture
def handle(tmp_path):
    with DiskManager(log_file_name=str(tmp_path / "db.log")) as disk:
        pool = BufferPoolManager(2, disk)
        manager = RmManager(disk, pool)
        path = str(tmp_path / "table")
        manager.create_file(path, RECORD_SIZE)
        yield manager.open_file(path)


def test_empty_file(handle):
    scan = RmScan(handle)
    assert scan.is_end()
    assert scan.rid().page_no == RM_NO_PAGE
    assert list(scan) == []


def test_scan_visits_inserted_in_order(handle):
    per_page = handle.file_hdr.num_records_per_page
    rids = [handle.insert_record(rec(i)) for i in range(per_page * 2 + 3)]
    assert list(RmScan(handle)) == rids


def test_scan_skips_deleted(handle):
    per_page = handle.file_hdr.num_records_per_page
    rids = [handle.insert_record(rec(i)) for i in range(per_page + 2)]
    for rid in rids[::3]:
        handle.delete_record(rid)
    expected = [r for r in rids if r not in rids[::3]]
    assert list(RmScan(handle)) == expected


def test_manual_stepping(handle):
    first = handle.insert_record(rec(1))
    second = handle.insert_record(rec(2))
    scan = RmScan(handle)
    assert scan.rid() == first
    scan.next()
    assert scan.rid() == second
    scan.next()
    assert scan.is_end()


def test_scan_reads_all_records(handle):
    rids = [handle.insert_record(rec(i)) for i in range(10)]
    data = [bytes(handle.get_record(r).data) for r in RmScan(handle)]
    assert data == [rec(i) for i in range(len(rids))]