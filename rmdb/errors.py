"""Exception hierarchy for the storage engine."""

from __future__ import annotations


class RMDBError(Exception):
    """Base class of every error raised by the database."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InternalError(RMDBError):
    """An invariant of the engine was broken."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Internal Error: {message}")
        self.detail = message


class UnixError(RMDBError):
    """An operating-system call failed."""

    def __init__(self, error: OSError | None = None) -> None:
        self.errno = error.errno if error is not None else None
        detail = error.strerror if error is not None and error.strerror else "unknown error"
        super().__init__(f"Unix Error: {detail}")


class FileAlreadyExistsError(RMDBError):
    """A file that was to be created exists already."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File already exists: {path}")
        self.path = path


class MissingFileError(RMDBError):
    """A file that was to be opened or removed does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class FileNotClosedError(RMDBError):
    """A file is still open where a closed one is required."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File is opened: {path}")
        self.path = path


class FileNotOpenError(RMDBError):
    """A file descriptor does not belong to an open file."""

    def __init__(self, fd: int) -> None:
        super().__init__(f"Invalid file descriptor: {fd}")
        self.fd = fd


class PageNotExistError(RMDBError):
    """A page number lies outside a table file."""

    def __init__(self, table_name: str, page_no: int) -> None:
        super().__init__(f"Page {page_no} in table {table_name} not exists")
        self.table_name = table_name
        self.page_no = page_no


class RecordNotFoundError(RMDBError):
    """No record is stored at the given slot."""

    def __init__(self, page_no: int, slot_no: int) -> None:
        super().__init__(f"Record not found: ({page_no},{slot_no})")
        self.page_no = page_no
        self.slot_no = slot_no


class InvalidRecordSizeError(RMDBError):
    """A record size is outside the allowed range."""

    def __init__(self, record_size: int) -> None:
        super().__init__(f"Invalid record size: {record_size}")
        self.record_size = record_size