# text_model.py
from pathlib import Path
from typing import List, Sequence

from pdf_find.exceptions import PageTextError
from pdf_find.page_text import TextFragment, fragments_from_text

PAGE_SEPARATOR = "\f"


class TextDocument:
    """Page-text source over plain strings, one string per page."""
    def __init__(self, pages: Sequence[str]):
        self.pages = list(pages)
        self.page_count = len(self.pages)

    @classmethod
    def from_file(cls, path, encoding: str = "utf-8") -> "TextDocument":
        """Reads a text file whose pages are separated by form feeds."""
        text = Path(path).read_text(encoding=encoding)
        return cls(text.split(PAGE_SEPARATOR))

    def get_text_fragments(self, page_num: int) -> List[TextFragment]:
        if not 0 <= page_num < self.page_count:
            raise PageTextError(page_num, f"No page {page_num} in document")
        return fragments_from_text(self.pages[page_num])
