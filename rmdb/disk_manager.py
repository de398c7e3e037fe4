"""File and page level access to the disk."""

from __future__ import annotations

import errno
import os
import shutil
import stat
import threading

from .errors import (
    FileAlreadyExistsError,
    FileNotClosedError,
    FileNotOpenError,
    InternalError,
    MissingFileError,
    UnixError,
)
from .page import PAGE_SIZE

LOG_FILE_NAME = "db.log"


class DiskManager:
    """Creates, opens and removes files and reads and writes their pages."""

    MAX_FD = 8192

    def __init__(self, log_file_name: str = LOG_FILE_NAME) -> None:
        self._path2fd: dict[str, int] = {}
        self._fd2path: dict[int, str] = {}
        self._fd2pageno: dict[int, int] = {}
        self._lock = threading.Lock()
        self.log_file_name = log_file_name
        self.log_fd = -1

    def __enter__(self) -> DiskManager:
        return self

    def __exit__(self, *exc_info) -> None:
        for fd in list(self._fd2path):
            self.close_file(fd)
        self.log_fd = -1

    # pages

    def write_page(self, fd: int, page_no: int, data: bytes) -> None:
        """Write data at the start of page page_no of the file."""
        try:
            os.lseek(fd, page_no * PAGE_SIZE, os.SEEK_SET)
            written = os.write(fd, data)
        except OSError as exc:
            raise UnixError(exc) from exc
        if written != len(data):
            raise InternalError("DiskManager write_page: short write")

    def read_page(self, fd: int, page_no: int, num_bytes: int) -> bytes:
        """Read num_bytes from the start of page page_no of the file."""
        try:
            os.lseek(fd, page_no * PAGE_SIZE, os.SEEK_SET)
            data = os.read(fd, num_bytes)
        except OSError as exc:
            raise UnixError(exc) from exc
        if len(data) != num_bytes:
            raise InternalError("DiskManager read_page: short read")
        return data

    def allocate_page(self, fd: int) -> int:
        """Hand out the next page number of the file."""
        if not 0 <= fd < self.MAX_FD:
            raise ValueError(f"file descriptor out of range: {fd}")
        with self._lock:
            page_no = self._fd2pageno.get(fd, 0)
            self._fd2pageno[fd] = page_no + 1
        return page_no

    def deallocate_page(self, page_no: int) -> None:
        """Release a page number; numbers are never handed out again."""
        if page_no < 0:
            raise ValueError(f"invalid page number: {page_no}")

    def set_fd2pageno(self, fd: int, start_page_no: int) -> None:
        """Let the file allocate page numbers from start_page_no on."""
        with self._lock:
            self._fd2pageno[fd] = start_page_no

    def get_fd2pageno(self, fd: int) -> int:
        """The number of pages allocated so far in the file."""
        with self._lock:
            return self._fd2pageno.get(fd, 0)

    # directories

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def create_dir(self, path: str) -> None:
        try:
            os.mkdir(path)
        except OSError as exc:
            raise UnixError(exc) from exc

    def destroy_dir(self, path: str) -> None:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise UnixError(exc) from exc

    # files

    def is_file(self, path: str) -> bool:
        try:
            return stat.S_ISREG(os.stat(path).st_mode)
        except OSError:
            return False

    def create_file(self, path: str) -> None:
        """Create an empty file; it must not exist yet."""
        if self.is_file(path):
            raise FileAlreadyExistsError(path)
        try:
            fd = os.open(path, os.O_CREAT | os.O_WRONLY, 0o644)
        except OSError as exc:
            raise UnixError(exc) from exc
        os.close(fd)

    def destroy_file(self, path: str) -> None:
        """Remove a closed file."""
        if path in self._path2fd:
            raise FileNotClosedError(path)
        try:
            os.unlink(path)
        except FileNotFoundError as exc:
            raise MissingFileError(path) from exc
        except OSError as exc:
            raise UnixError(exc) from exc

    def open_file(self, path: str) -> int:
        """Open a file for reading and writing and return its descriptor."""
        if path in self._path2fd:
            raise FileNotClosedError(path)
        try:
            fd = os.open(path, os.O_RDWR)
        except OSError as exc:
            if exc.errno == errno.ENOENT:
                raise MissingFileError(path) from exc
            raise UnixError(exc) from exc
        self._path2fd[path] = fd
        self._fd2path[fd] = path
        return fd

    def close_file(self, fd: int) -> None:
        """Close a file opened by open_file."""
        if fd not in self._fd2path:
            raise FileNotOpenError(fd)
        try:
            os.close(fd)
        except OSError as exc:
            raise UnixError(exc) from exc
        path = self._fd2path.pop(fd)
        del self._path2fd[path]
        if fd == self.log_fd:
            self.log_fd = -1

    def get_file_size(self, path: str) -> int:
        """The size of the file in bytes, or -1 if it cannot be examined."""
        try:
            return os.stat(path).st_size
        except OSError:
            return -1

    def get_file_name(self, fd: int) -> str:
        if fd not in self._fd2path:
            raise FileNotOpenError(fd)
        return self._fd2path[fd]

    def get_file_fd(self, path: str) -> int:
        """The descriptor of the file, opening it if it is not open yet."""
        if path not in self._path2fd:
            return self.open_file(path)
        return self._path2fd[path]

    # log

    def _ensure_log_open(self) -> None:
        if self.log_fd == -1:
            self.log_fd = self.open_file(self.log_file_name)

    def read_log(self, size: int, offset: int) -> bytes | None:
        """Read up to size bytes of the log from offset.

        Returns None when offset lies past the end of the log.
        """
        self._ensure_log_open()
        file_size = self.get_file_size(self.log_file_name)
        if offset > file_size:
            return None
        size = min(size, file_size - offset)
        if size <= 0:
            return b""
        try:
            os.lseek(self.log_fd, offset, os.SEEK_SET)
            data = os.read(self.log_fd, size)
        except OSError as exc:
            raise UnixError(exc) from exc
        if len(data) != size:
            raise InternalError("DiskManager read_log: short read")
        return data

    def write_log(self, data: bytes) -> None:
        """Append data to the end of the log."""
        self._ensure_log_open()
        try:
            os.lseek(self.log_fd, 0, os.SEEK_END)
            written = os.write(self.log_fd, data)
        except OSError as exc:
            raise UnixError(exc) from exc
        if written != len(data):
            raise UnixError()