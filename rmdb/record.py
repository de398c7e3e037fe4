"""Record identifiers, record file headers and records."""

from __future__ import annotations

import struct
from dataclasses import dataclass

RM_NO_PAGE = -1
RM_FILE_HDR_PAGE = 0
RM_FIRST_RECORD_PAGE = 1
RM_MAX_RECORD_SIZE = 512

_FILE_HDR = struct.Struct("<5i")
_PAGE_HDR = struct.Struct("<2i")
_SIZE = struct.Struct("<i")


@dataclass(frozen=True)
class Rid:
    """The location of a record: page number and slot number."""

    page_no: int
    slot_no: int


@dataclass
class RmFileHdr:
    """Metadata of a table file, kept in its page 0."""

    record_size: int = 0
    num_pages: int = 0
    num_records_per_page: int = 0
    first_free_page_no: int = RM_NO_PAGE
    bitmap_size: int = 0

    SIZE = _FILE_HDR.size

    def to_bytes(self) -> bytes:
        return _FILE_HDR.pack(
            self.record_size,
            self.num_pages,
            self.num_records_per_page,
            self.first_free_page_no,
            self.bitmap_size,
        )

    @classmethod
    def from_bytes(cls, data: bytes | bytearray) -> RmFileHdr:
        if len(data) < _FILE_HDR.size:
            raise ValueError("file header is truncated")
        return cls(*_FILE_HDR.unpack_from(data))


@dataclass
class RmPageHdr:
    """Metadata at the start of each record page."""

    next_free_page_no: int = RM_NO_PAGE
    num_records: int = 0

    SIZE = _PAGE_HDR.size

    def to_bytes(self) -> bytes:
        return _PAGE_HDR.pack(self.next_free_page_no, self.num_records)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray) -> RmPageHdr:
        if len(data) < _PAGE_HDR.size:
            raise ValueError("page header is truncated")
        return cls(*_PAGE_HDR.unpack_from(data))


class RmRecord:
    """The raw bytes of one table record."""

    __slots__ = ("data",)

    def __init__(self, data: bytes | bytearray = b"") -> None:
        self.data = bytearray(data)

    @property
    def size(self) -> int:
        return len(self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RmRecord):
            return NotImplemented
        return self.data == other.data

    def __repr__(self) -> str:
        return f"RmRecord({bytes(self.data)!r})"

    def serialize(self) -> bytes:
        """The record as its size followed by its bytes."""
        return _SIZE.pack(self.size) + bytes(self.data)

    @classmethod
    def deserialize(cls, data: bytes | bytearray) -> RmRecord:
        """Read a record written by serialize from the start of data."""
        if len(data) < _SIZE.size:
            raise ValueError("record is truncated")
        (size,) = _SIZE.unpack_from(data)
        end = _SIZE.size + size
        if size < 0 or len(data) < end:
            raise ValueError("record is truncated")
        return cls(data[_SIZE.size:end])