"""Page identifiers and in-memory page frames."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

PAGE_SIZE = 4096
INVALID_PAGE_ID = -1
INVALID_LSN = -1

OFFSET_PAGE_START = 0
OFFSET_LSN = 0
OFFSET_PAGE_HDR = 4

_LSN = struct.Struct("<i")


@dataclass(frozen=True)
class PageId:
    """A page located by the descriptor of its file and its number in it."""

    fd: int
    page_no: int = INVALID_PAGE_ID

    def __lt__(self, other: PageId) -> bool:
        if self.fd < other.fd:
            return True
        return self.page_no < other.page_no

    def __str__(self) -> str:
        return f"{{fd: {self.fd} page_no: {self.page_no}}}"

    @property
    def key(self) -> int:
        """A single integer combining descriptor and page number."""
        return (self.fd << 16) | self.page_no


@dataclass
class Page:
    """One frame of page data together with its buffer-pool bookkeeping."""

    id: PageId = field(default_factory=lambda: PageId(-1))
    data: bytearray = field(default_factory=lambda: bytearray(PAGE_SIZE))
    is_dirty: bool = False
    pin_count: int = 0

    def reset_memory(self) -> None:
        """Fill the page data with zero bytes."""
        self.data[:] = bytes(PAGE_SIZE)

    @property
    def lsn(self) -> int:
        """The log sequence number stored at the start of the page."""
        return _LSN.unpack_from(self.data, OFFSET_LSN)[0]

    @lsn.setter
    def lsn(self, value: int) -> None:
        _LSN.pack_into(self.data, OFFSET_LSN, value)