import pytest

from rmdb.disk_manager import DiskManager
from rmdb.errors import (
    FileAlreadyExistsError,
    FileNotClosedError,
    FileNotOpenError,
    InternalError,
    MissingFileError,
    UnixError,
)
from rmdb.page import PAGE_SIZE


@pytest.fixture
def disk(tmp_path):
    with DiskManager(log_file_name=str(tmp_path / "db.log")) as manager:
        yield manager


def test_create_file_twice_fails(disk, tmp_path):
    path = str(tmp_path / "t.dat")
    disk.create_file(path)
    assert disk.is_file(path)
    with pytest.raises(FileAlreadyExistsError):
        disk.create_file(path)


def test_open_close_bookkeeping(disk, tmp_path):
    path = str(tmp_path / "t.dat")
    disk.create_file(path)
    fd = disk.open_file(path)
    assert disk.get_file_name(fd) == path
    assert disk.get_file_fd(path) == fd
    with pytest.raises(FileNotClosedError):
        disk.open_file(path)
    disk.close_file(fd)
    with pytest.raises(FileNotOpenError):
        disk.get_file_name(fd)
    with pytest.raises(FileNotOpenError):
        disk.close_file(fd)


def test_open_missing_file(disk, tmp_path):
    with pytest.raises(MissingFileError):
        disk.open_file(str(tmp_path / "nope.dat"))


def test_get_file_fd_opens_file(disk, tmp_path):
    path = str(tmp_path / "t.dat")
    disk.create_file(path)
    fd = disk.get_file_fd(path)
    assert disk.get_file_name(fd) == path


def test_destroy_file(disk, tmp_path):
    path = str(tmp_path / "t.dat")
    disk.create_file(path)
    fd = disk.open_file(path)
    with pytest.raises(FileNotClosedError):
        disk.destroy_file(path)
    disk.close_file(fd)
    disk.destroy_file(path)
    assert not disk.is_file(path)
    with pytest.raises(MissingFileError):
        disk.destroy_file(path)


def test_page_round_trip(disk, tmp_path):
    path = str(tmp_path / "t.dat")
    disk.create_file(path)
    fd = disk.open_file(path)
    page = bytes(range(256)) * (PAGE_SIZE // 256)
    disk.write_page(fd, 2, page)
    assert disk.read_page(fd, 2, PAGE_SIZE) == page
    assert disk.read_page(fd, 0, PAGE_SIZE) == bytes(PAGE_SIZE)
    assert disk.get_file_size(path) == 3 * PAGE_SIZE


def test_partial_page_write_and_read(disk, tmp_path):
    path = str(tmp_path / "t.dat")
    disk.create_file(path)
    fd = disk.open_file(path)
    disk.write_page(fd, 0, b"header")
    assert disk.read_page(fd, 0, 6) == b"header"


def test_read_past_end_is_an_error(disk, tmp_path):
    path = str(tmp_path / "t.dat")
    disk.create_file(path)
    fd = disk.open_file(path)
    with pytest.raises(InternalError):
        disk.read_page(fd, 5, PAGE_SIZE)


def test_write_to_bad_descriptor(disk):
    with pytest.raises(UnixError):
        disk.write_page(-1, 0, b"x")


def test_allocate_page_counts_up(disk):
    disk.set_fd2pageno(9, 4)
    assert [disk.allocate_page(9) for _ in range(3)] == [4, 5, 6]
    assert disk.get_fd2pageno(9) == 7
    assert disk.allocate_page(10) == 0


def test_allocate_page_rejects_bad_fd(disk):
    with pytest.raises(ValueError):
        disk.allocate_page(DiskManager.MAX_FD)


def test_file_size_of_missing_file(disk, tmp_path):
    assert disk.get_file_size(str(tmp_path / "missing")) == -1


def test_directories(disk, tmp_path):
    path = str(tmp_path / "db")
    assert not disk.is_dir(path)
    disk.create_dir(path)
    assert disk.is_dir(path)
    with pytest.raises(UnixError):
        disk.create_dir(path)
    disk.destroy_dir(path)
    assert not disk.is_dir(path)


def test_log_round_trip(disk, tmp_path):
    disk.create_file(disk.log_file_name)
    disk.write_log(b"first")
    disk.write_log(b"second")
    assert disk.read_log(100, 0) == b"firstsecond"
    assert disk.read_log(3, 5) == b"sec"
    assert disk.read_log(10, 11) == b""
    assert disk.read_log(10, 12) is None


def test_log_missing_file(disk):
    with pytest.raises(MissingFileError):
        disk.write_log(b"data")