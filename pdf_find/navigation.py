# navigation.py
from typing import Callable, Optional

from pdf_find.config import VISIBLE_PAGE_BUFFER


class PageNavigator:
    """
    Keeps track of the current page of a paginated view.
    The find controller reads the current page from it and asks it to
    navigate to the page of the selected match.
    """
    def __init__(self, page_count: int = 0, buffer_pages: int = VISIBLE_PAGE_BUFFER,
                 on_page_change: Optional[Callable[[int], None]] = None):
        self.page_count = page_count
        self.current_page = 0
        self.buffer_pages = buffer_pages
        self.on_page_change = on_page_change

    def set_page_count(self, page_count: int):
        self.page_count = max(page_count, 0)
        self.current_page = 0

    def scroll_to_page(self, page_index: int):
        if not 0 <= page_index < self.page_count:
            return
        if self.current_page != page_index:
            self.current_page = page_index
            if self.on_page_change:
                self.on_page_change(page_index)

    def is_page_visible(self, page_index: int) -> bool:
        return abs(page_index - self.current_page) <= self.buffer_pages
