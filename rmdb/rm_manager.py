"""Creation, opening, closing and removal of table files."""

from __future__ import annotations

from .bitmap import BITMAP_WIDTH
from .buffer_pool import BufferPoolManager
from .disk_manager import DiskManager
from .errors import InvalidRecordSizeError
from .page import PAGE_SIZE
from .record import RM_FILE_HDR_PAGE, RM_MAX_RECORD_SIZE, RM_NO_PAGE, RmFileHdr
from .rm_file_handle import RmFileHandle


class RmManager:
    """Manages the data files that hold table records."""

    def __init__(self, disk_manager: DiskManager, buffer_pool_manager: BufferPoolManager) -> None:
        self.disk_manager = disk_manager
        self.buffer_pool_manager = buffer_pool_manager

    def create_file(self, filename: str, record_size: int) -> None:
        """Create a table file for records of record_size bytes."""
        if record_size < 1 or record_size > RM_MAX_RECORD_SIZE:
            raise InvalidRecordSizeError(record_size)
        self.disk_manager.create_file(filename)
        fd = self.disk_manager.open_file(filename)
        try:
            per_page = (BITMAP_WIDTH * (PAGE_SIZE - 1 - RmFileHdr.SIZE) + 1) // (
                1 + record_size * BITMAP_WIDTH
            )
            file_hdr = RmFileHdr(
                record_size=record_size,
                num_pages=1,
                num_records_per_page=per_page,
                first_free_page_no=RM_NO_PAGE,
                bitmap_size=(per_page + BITMAP_WIDTH - 1) // BITMAP_WIDTH,
            )
            self.disk_manager.write_page(fd, RM_FILE_HDR_PAGE, file_hdr.to_bytes())
        finally:
            self.disk_manager.close_file(fd)

    def destroy_file(self, filename: str) -> None:
        """Remove a closed table file."""
        self.disk_manager.destroy_file(filename)

    def open_file(self, filename: str) -> RmFileHandle:
        """Open a table file and return a handle on it."""
        fd = self.disk_manager.open_file(filename)
        return RmFileHandle(self.disk_manager, self.buffer_pool_manager, fd)

    def close_file(self, file_handle: RmFileHandle) -> None:
        """Write the header and cached pages of the file back and close it."""
        self.disk_manager.write_page(
            file_handle.fd, RM_FILE_HDR_PAGE, file_handle.file_hdr.to_bytes()
        )
        self.buffer_pool_manager.flush_all_pages(file_handle.fd)
        self.disk_manager.close_file(file_handle.fd)