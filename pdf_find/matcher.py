# matcher.py
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Pattern, Sequence, Tuple, Union

from pdf_find.normalizer import NormalizedText, is_entire_word, normalize_query, splits_grapheme


@dataclass(frozen=True)
class MatchSpan:
    """A match's position in original (un-normalized) page text."""
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class Query:
    """
    Search terms and flags. A string is searched as one phrase; a list of
    strings is searched term by term, any term matching.
    """
    terms: Tuple[str, ...] = ()
    case_sensitive: bool = False
    entire_word: bool = False
    match_diacritics: bool = False
    highlight_all: bool = False
    raw: Union[str, Tuple[str, ...]] = field(default="", compare=False)

    @classmethod
    def from_command(cls, query=None, case_sensitive=False, entire_word=False,
                     match_diacritics=False, highlight_all=False) -> "Query":
        """Builds a query from a loosely-typed command payload."""
        if query is None:
            raw: Union[str, Tuple[str, ...]] = ""
            terms: Sequence[str] = ()
        elif isinstance(query, str):
            raw = query
            terms = (query,)
        elif isinstance(query, (list, tuple)):
            raw = tuple(str(term) for term in query if term is not None)
            terms = raw
        else:
            raw = str(query)
            terms = (raw,)
        terms = tuple(term.strip() for term in terms if term and term.strip())
        return cls(terms, bool(case_sensitive), bool(entire_word),
                   bool(match_diacritics), bool(highlight_all), raw)

    @property
    def is_empty(self) -> bool:
        return not any(_compile_term(term, self.case_sensitive, self.match_diacritics)
                       for term in self.terms)

    def same_search(self, other: Optional["Query"]) -> bool:
        """True if other would produce the same matches (highlighting aside)."""
        return (other is not None
                and self.terms == other.terms
                and self.case_sensitive == other.case_sensitive
                and self.entire_word == other.entire_word
                and self.match_diacritics == other.match_diacritics)


@lru_cache(maxsize=128)
def _compile_term(term: str, case_sensitive: bool, match_diacritics: bool) -> Optional[Pattern]:
    words = normalize_query(term, match_diacritics).split()
    if not words:
        return None
    # Whitespace in a term matches any whitespace run, line breaks included
    pattern = r"\s+".join(re.escape(word) for word in words)
    return re.compile(pattern, 0 if case_sensitive else re.IGNORECASE)


def _resolve_overlaps(candidates: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
    # Longest first, earlier start on ties; a candidate survives unless it
    # overlaps one already kept
    kept: List[Tuple[int, int]] = []
    for start, length in sorted(set(candidates), key=lambda c: (-c[1], c[0])):
        end = start + length
        if any(start < k_start + k_length and k_start < end for k_start, k_length in kept):
            continue
        kept.append((start, length))
    return sorted(kept)


def find_matches(query: Query, page_text: NormalizedText) -> List[MatchSpan]:
    """
    Returns the query's matches in page_text, sorted and non-overlapping,
    in original-text coordinates. page_text must have been normalized with
    the query's match_diacritics setting.
    """
    text = page_text.text
    candidates: List[Tuple[int, int]] = []
    for term in query.terms:
        pattern = _compile_term(term, query.case_sensitive, query.match_diacritics)
        if pattern is None:
            continue
        for match in pattern.finditer(text):
            start, length = match.start(), match.end() - match.start()
            if not length or splits_grapheme(text, start, length):
                continue
            if query.entire_word and not is_entire_word(text, start, length):
                continue
            candidates.append((start, length))

    spans = []
    for start, length in _resolve_overlaps(candidates):
        offset, original_length = page_text.to_original(start, length)
        spans.append(MatchSpan(offset, original_length))
    return spans
