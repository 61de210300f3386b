# pdf_model.py
import fitz  # PyMuPDF
from typing import List, Optional

from pdf_find.exceptions import PageTextError
from pdf_find.page_text import TextFragment


class PDFModel:
    """
    Page-text source for a PDF document.
    It encapsulates all interactions with the PyMuPDF (fitz) library.
    """
    def __init__(self, filepath: Optional[str] = None, stream: Optional[bytes] = None):
        self.filepath = filepath
        if stream is not None:
            self.doc: Optional[fitz.Document] = fitz.open(stream=stream, filetype="pdf")
        else:
            self.doc = fitz.open(filepath)
        self.page_count = self.doc.page_count if self.doc else 0

    def get_page(self, page_num: int):
        """Returns a page object from the document."""
        if self.doc and 0 <= page_num < self.page_count:
            return self.doc.load_page(page_num)
        return None

    def get_text_fragments(self, page_num: int) -> List[TextFragment]:
        """Returns the page's text spans in reading order; the last span of each line ends it."""
        page = self.get_page(page_num)
        if page is None:
            raise PageTextError(page_num, f"No page {page_num} in document")
        try:
            blocks = page.get_text("dict")["blocks"]
        except (RuntimeError, ValueError) as e:
            raise PageTextError(page_num, f"Could not read text of page {page_num}", e) from e

        fragments = []
        for block in blocks:
            if block.get("type") != 0:  # image block
                continue
            for line in block.get("lines", []):
                spans = [span["text"] for span in line.get("spans", []) if span.get("text")]
                for i, text in enumerate(spans):
                    fragments.append(TextFragment(text, has_eol=i == len(spans) - 1))
        return fragments

    def close(self):
        """Closes the PDF document."""
        if self.doc:
            self.doc.close()
            self.doc = None
            self.page_count = 0
