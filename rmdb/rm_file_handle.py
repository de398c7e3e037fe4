"""Access to the records stored in one table file."""

from __future__ import annotations

import struct
from typing import Any

from .bitmap import first_bit, is_set, reset_bit, set_bit
from .buffer_pool import BufferPoolManager
from .disk_manager import DiskManager
from .errors import InternalError, PageNotExistError, RecordNotFoundError
from .page import OFFSET_PAGE_HDR, Page, PageId
from .record import RM_FILE_HDR_PAGE, RM_NO_PAGE, Rid, RmFileHdr, RmPageHdr, RmRecord

_INT = struct.Struct("<i")
_OFFSET_NEXT_FREE = OFFSET_PAGE_HDR
_OFFSET_NUM_RECORDS = OFFSET_PAGE_HDR + _INT.size
_OFFSET_BITMAP = OFFSET_PAGE_HDR + RmPageHdr.SIZE


class RmPageHandle:
    """A view of a record page: page header, slot bitmap and slots."""

    def __init__(self, file_hdr: RmFileHdr, page: Page) -> None:
        self.file_hdr = file_hdr
        self.page = page

    @property
    def page_no(self) -> int:
        return self.page.id.page_no

    @property
    def next_free_page_no(self) -> int:
        return _INT.unpack_from(self.page.data, _OFFSET_NEXT_FREE)[0]

    @next_free_page_no.setter
    def next_free_page_no(self, value: int) -> None:
        _INT.pack_into(self.page.data, _OFFSET_NEXT_FREE, value)

    @property
    def num_records(self) -> int:
        return _INT.unpack_from(self.page.data, _OFFSET_NUM_RECORDS)[0]

    @num_records.setter
    def num_records(self, value: int) -> None:
        _INT.pack_into(self.page.data, _OFFSET_NUM_RECORDS, value)

    @property
    def bitmap(self) -> memoryview:
        """A writable view of the slot bitmap."""
        return memoryview(self.page.data)[_OFFSET_BITMAP:self._slots_start]

    @property
    def _slots_start(self) -> int:
        return _OFFSET_BITMAP + self.file_hdr.bitmap_size

    def get_slot(self, slot_no: int) -> memoryview:
        """A writable view of the bytes of slot slot_no."""
        start = self._slots_start + slot_no * self.file_hdr.record_size
        return memoryview(self.page.data)[start:start + self.file_hdr.record_size]


class RmFileHandle:
    """Reads, inserts, updates and deletes the fixed-size records of one file."""

    def __init__(
        self,
        disk_manager: DiskManager,
        buffer_pool_manager: BufferPoolManager,
        fd: int,
    ) -> None:
        self.disk_manager = disk_manager
        self.buffer_pool_manager = buffer_pool_manager
        self.fd = fd
        raw = disk_manager.read_page(fd, RM_FILE_HDR_PAGE, RmFileHdr.SIZE)
        self.file_hdr = RmFileHdr.from_bytes(raw)
        disk_manager.set_fd2pageno(fd, self.file_hdr.num_pages)

    def _unpin(self, page_no: int, is_dirty: bool) -> None:
        self.buffer_pool_manager.unpin_page(PageId(self.fd, page_no), is_dirty)

    def _write_slot(self, handle: RmPageHandle, slot_no: int, buf: bytes) -> None:
        data = bytes(buf)
        size = self.file_hdr.record_size
        if len(data) < size:
            raise ValueError(f"record needs {size} bytes, got {len(data)}")
        handle.get_slot(slot_no)[:] = data[:size]

    def is_record(self, rid: Rid) -> bool:
        """Whether a record is stored at rid."""
        handle = self.fetch_page_handle(rid.page_no)
        try:
            return is_set(handle.bitmap, rid.slot_no)
        finally:
            self._unpin(rid.page_no, False)

    def get_record(self, rid: Rid, context: Any = None) -> RmRecord:
        """The record stored at rid."""
        handle = self.fetch_page_handle(rid.page_no)
        try:
            if not is_set(handle.bitmap, rid.slot_no):
                raise RecordNotFoundError(rid.page_no, rid.slot_no)
            return RmRecord(bytes(handle.get_slot(rid.slot_no)))
        finally:
            self._unpin(rid.page_no, False)

    def insert_record(self, buf: bytes, context: Any = None) -> Rid:
        """Store a record in the first free slot and return where it went."""
        handle = self._create_page_handle()
        page_no = handle.page_no
        dirty = False
        try:
            per_page = self.file_hdr.num_records_per_page
            slot_no = first_bit(False, handle.bitmap, per_page)
            if slot_no == per_page:
                raise InternalError("No free slot found in page")
            self._write_slot(handle, slot_no, buf)
            set_bit(handle.bitmap, slot_no)
            handle.num_records += 1
            dirty = True
            if handle.num_records == per_page:
                self.file_hdr.first_free_page_no = handle.next_free_page_no
            return Rid(page_no, slot_no)
        finally:
            self._unpin(page_no, dirty)

    def insert_record_at(self, rid: Rid, buf: bytes) -> None:
        """Store a record in the given, currently empty, slot."""
        handle = self.fetch_page_handle(rid.page_no)
        dirty = False
        try:
            if is_set(handle.bitmap, rid.slot_no):
                raise InternalError("Slot already occupied")
            self._write_slot(handle, rid.slot_no, buf)
            set_bit(handle.bitmap, rid.slot_no)
            handle.num_records += 1
            dirty = True
        finally:
            self._unpin(rid.page_no, dirty)

    def delete_record(self, rid: Rid, context: Any = None) -> None:
        """Remove the record stored at rid."""
        handle = self.fetch_page_handle(rid.page_no)
        dirty = False
        try:
            if not is_set(handle.bitmap, rid.slot_no):
                raise RecordNotFoundError(rid.page_no, rid.slot_no)
            was_full = handle.num_records == self.file_hdr.num_records_per_page
            reset_bit(handle.bitmap, rid.slot_no)
            handle.num_records -= 1
            dirty = True
            if was_full:
                self._release_page_handle(handle)
        finally:
            self._unpin(rid.page_no, dirty)

    def update_record(self, rid: Rid, buf: bytes, context: Any = None) -> None:
        """Overwrite the record stored at rid."""
        handle = self.fetch_page_handle(rid.page_no)
        dirty = False
        try:
            if not is_set(handle.bitmap, rid.slot_no):
                raise RecordNotFoundError(rid.page_no, rid.slot_no)
            self._write_slot(handle, rid.slot_no, buf)
            dirty = True
        finally:
            self._unpin(rid.page_no, dirty)

    def fetch_page_handle(self, page_no: int) -> RmPageHandle:
        """Pin page page_no of the file and wrap it; the caller unpins it."""
        if page_no < 0 or page_no >= self.file_hdr.num_pages:
            raise PageNotExistError("rm_file_handle", page_no)
        page = self.buffer_pool_manager.fetch_page(PageId(self.fd, page_no))
        if page is None:
            raise PageNotExistError("rm_file_handle", page_no)
        return RmPageHandle(self.file_hdr, page)

    def create_new_page_handle(self) -> RmPageHandle:
        """Append an empty, pinned record page to the file."""
        page = self.buffer_pool_manager.new_page(self.fd)
        if page is None:
            raise InternalError("Failed to create new page")
        handle = RmPageHandle(self.file_hdr, page)
        handle.next_free_page_no = RM_NO_PAGE
        handle.num_records = 0
        handle.bitmap[:] = bytes(self.file_hdr.bitmap_size)
        self.file_hdr.num_pages += 1
        return handle

    def _create_page_handle(self) -> RmPageHandle:
        if self.file_hdr.first_free_page_no == RM_NO_PAGE:
            handle = self.create_new_page_handle()
            if self.file_hdr.first_free_page_no == RM_NO_PAGE:
                self.file_hdr.first_free_page_no = handle.page_no
            return handle
        return self.fetch_page_handle(self.file_hdr.first_free_page_no)

    def _release_page_handle(self, handle: RmPageHandle) -> None:
        handle.next_free_page_no = self.file_hdr.first_free_page_no
        self.file_hdr.first_free_page_no = handle.page_no