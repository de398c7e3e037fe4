"""A fixed-size pool of page frames cached in memory."""

from __future__ import annotations

import threading
from collections import deque

from .disk_manager import DiskManager
from .page import INVALID_PAGE_ID, PAGE_SIZE, Page, PageId
from .replacer import LRUReplacer, Replacer


class BufferPoolManager:
    """Keeps pages of open files in memory frames and writes them back on eviction."""

    def __init__(
        self,
        pool_size: int,
        disk_manager: DiskManager,
        replacer: Replacer | None = None,
    ) -> None:
        self.pool_size = pool_size
        self._disk = disk_manager
        self._pages = [Page() for _ in range(pool_size)]
        self._page_table: dict[PageId, int] = {}
        self._free_list: deque[int] = deque(range(pool_size))
        self._replacer = replacer if replacer is not None else LRUReplacer(pool_size)
        self._latch = threading.Lock()

    @staticmethod
    def mark_dirty(page: Page) -> None:
        """Mark a page as modified."""
        page.is_dirty = True

    def _find_victim(self) -> int | None:
        if self._free_list:
            return self._free_list.popleft()
        return self._replacer.victim()

    def _evict(self, page: Page) -> None:
        """Write a dirty page back and forget where it came from."""
        if page.is_dirty:
            self._disk.write_page(page.id.fd, page.id.page_no, bytes(page.data))
            page.is_dirty = False
        if page.id.page_no != INVALID_PAGE_ID:
            self._page_table.pop(page.id, None)

    def fetch_page(self, page_id: PageId) -> Page | None:
        """Pin the page, reading it from disk if needed.

        Returns None when every frame is pinned.
        """
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is not None:
                page = self._pages[frame_id]
                page.pin_count += 1
                self._replacer.pin(frame_id)
                return page

            frame_id = self._find_victim()
            if frame_id is None:
                return None
            page = self._pages[frame_id]
            self._evict(page)
            page.data[:] = self._disk.read_page(page_id.fd, page_id.page_no, PAGE_SIZE)
            page.id = page_id
            page.is_dirty = False
            page.pin_count = 1
            self._page_table[page_id] = frame_id
            self._replacer.pin(frame_id)
            return page

    def unpin_page(self, page_id: PageId, is_dirty: bool) -> bool:
        """Drop one pin of a resident page; False if it is absent or not pinned."""
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is None:
                return False
            page = self._pages[frame_id]
            if page.pin_count <= 0:
                return False
            page.pin_count -= 1
            if page.pin_count == 0:
                self._replacer.unpin(frame_id)
            if is_dirty:
                page.is_dirty = True
            return True

    def flush_page(self, page_id: PageId) -> bool:
        """Write a resident page to disk whether or not it is dirty."""
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is None:
                return False
            page = self._pages[frame_id]
            self._disk.write_page(page_id.fd, page_id.page_no, bytes(page.data))
            page.is_dirty = False
            return True

    def new_page(self, fd: int) -> Page | None:
        """Allocate a fresh zeroed page in the file and pin it.

        Returns None when every frame is pinned.
        """
        with self._latch:
            frame_id = self._find_victim()
            if frame_id is None:
                return None
            page_id = PageId(fd, self._disk.allocate_page(fd))
            page = self._pages[frame_id]
            self._evict(page)
            page.reset_memory()
            page.id = page_id
            page.is_dirty = False
            page.pin_count = 1
            self._page_table[page_id] = frame_id
            self._replacer.pin(frame_id)
            return page

    def delete_page(self, page_id: PageId) -> bool:
        """Remove a page from the pool; False only if it is still pinned."""
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is None:
                return True
            page = self._pages[frame_id]
            if page.pin_count > 0:
                return False
            if page.is_dirty:
                self._disk.write_page(page_id.fd, page_id.page_no, bytes(page.data))
            del self._page_table[page_id]
            self._replacer.pin(frame_id)
            page.reset_memory()
            page.id = PageId(page.id.fd, INVALID_PAGE_ID)
            page.is_dirty = False
            page.pin_count = 0
            self._free_list.append(frame_id)
            self._disk.deallocate_page(page_id.page_no)
            return True

    def flush_all_pages(self, fd: int) -> None:
        """Write every resident page of the file to disk."""
        with self._latch:
            for page_id, frame_id in self._page_table.items():
                if page_id.fd == fd:
                    page = self._pages[frame_id]
                    self._disk.write_page(page_id.fd, page_id.page_no, bytes(page.data))
                    page.is_dirty = False