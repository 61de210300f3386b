# page_text.py
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from pdf_find.normalizer import LINE_SEPARATOR, NormalizedText, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextFragment:
    """One run of text as a page-text source hands it out."""
    text: str
    has_eol: bool = False


def join_fragments(fragments: Iterable[TextFragment]) -> str:
    """Concatenates fragments, adding a line separator after each line end."""
    parts: List[str] = []
    for fragment in fragments:
        parts.append(fragment.text)
        if fragment.has_eol:
            parts.append(LINE_SEPARATOR)
    return "".join(parts)


class PageTextEntry:
    """
    The text of one page and its normalized forms.
    Normalized forms are built on first use, one per diacritic policy.
    """
    def __init__(self, page_index: int, text: str, failed: bool = False):
        self.page_index = page_index
        self.text = text
        self.failed = failed
        self._normalized: Dict[bool, NormalizedText] = {}

    def normalized(self, match_diacritics: bool = False) -> NormalizedText:
        if match_diacritics not in self._normalized:
            self._normalized[match_diacritics] = normalize(self.text, match_diacritics)
        return self._normalized[match_diacritics]


class PageTextCache:
    """
    Lazily extracts and memoizes page text for the attached document.

    Extraction runs as a deferred step on the timer host. Requests for a
    page whose extraction is already scheduled join it instead of
    starting another one.
    """
    def __init__(self, host, document=None):
        self.host = host
        self.document = document
        self._entries: Dict[int, PageTextEntry] = {}
        self._pending: Dict[int, List[Callable[[PageTextEntry], None]]] = {}
        self._document_token = 0

    def set_document(self, document):
        """Attaches a new document and drops everything cached for the old one."""
        self.document = document
        self.clear()

    def clear(self):
        self._entries.clear()
        self._pending.clear()
        self._document_token += 1

    def is_cached(self, page_index: int) -> bool:
        return page_index in self._entries

    def request(self, page_index: int, callback: Callable[[PageTextEntry], None]):
        """Delivers the page's entry to callback from the timer host."""
        entry = self._entries.get(page_index)
        if entry is not None:
            self.host.after(0, callback, entry)
            return
        waiting = self._pending.get(page_index)
        if waiting is not None:
            waiting.append(callback)
            return
        self._pending[page_index] = [callback]
        self.host.after(0, self._extract_pending, page_index, self._document_token)

    def _extract_pending(self, page_index: int, token: int):
        if token != self._document_token:
            return
        entry = self.get_page_entry(page_index)
        for callback in self._pending.pop(page_index, []):
            callback(entry)

    def get_page_entry(self, page_index: int) -> PageTextEntry:
        """Returns the page's entry, extracting it now if needed."""
        entry = self._entries.get(page_index)
        if entry is None:
            entry = self._extract(page_index)
            self._entries[page_index] = entry
        return entry

    def get_page_text(self, page_index: int) -> str:
        return self.get_page_entry(page_index).text

    def get_normalized_text(self, page_index: int, match_diacritics: bool = False) -> NormalizedText:
        return self.get_page_entry(page_index).normalized(match_diacritics)

    def _extract(self, page_index: int) -> PageTextEntry:
        if self.document is None:
            return PageTextEntry(page_index, "", failed=True)
        try:
            text = join_fragments(self.document.get_text_fragments(page_index))
        except Exception as e:
            logger.warning("Text extraction failed on page %d: %s", page_index, e)
            return PageTextEntry(page_index, "", failed=True)
        logger.debug("Extracted %d characters from page %d", len(text), page_index)
        return PageTextEntry(page_index, text)


def fragments_from_text(text: Optional[str]) -> List[TextFragment]:
    """Splits plain text on newlines into fragments; every line but the last ends one."""
    if not text:
        return []
    lines = text.split(LINE_SEPARATOR)
    return [TextFragment(line, has_eol=i < len(lines) - 1) for i, line in enumerate(lines)]
