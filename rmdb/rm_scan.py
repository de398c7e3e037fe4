"""Sequential scan over the records of a table file."""

from __future__ import annotations

from collections.abc import Iterator

from .bitmap import next_bit
from .page import PageId
from .record import RM_FIRST_RECORD_PAGE, RM_NO_PAGE, Rid
from .rm_file_handle import RmFileHandle


class RmScan:
    """Walks the occupied slots of a file in page and slot order."""

    def __init__(self, file_handle: RmFileHandle) -> None:
        self._file_handle = file_handle
        self._rid = Rid(RM_FIRST_RECORD_PAGE, -1)
        self.next()

    def next(self) -> None:
        """Advance to the next occupied slot, or to the end."""
        fh = self._file_handle
        page_no, slot_no = self._rid.page_no, self._rid.slot_no
        per_page = fh.file_hdr.num_records_per_page
        while 0 <= page_no < fh.file_hdr.num_pages:
            handle = fh.fetch_page_handle(page_no)
            try:
                found = next_bit(True, handle.bitmap, per_page, slot_no)
            finally:
                fh.buffer_pool_manager.unpin_page(PageId(fh.fd, page_no), False)
            if found < per_page:
                self._rid = Rid(page_no, found)
                return
            page_no += 1
            slot_no = -1
        self._rid = Rid(RM_NO_PAGE, -1)

    def is_end(self) -> bool:
        """Whether the scan has passed the last record."""
        return self._rid.page_no == RM_NO_PAGE

    def rid(self) -> Rid:
        """The location of the current record."""
        return self._rid

    def __iter__(self) -> Iterator[Rid]:
        while not self.is_end():
            yield self._rid
            self.next()