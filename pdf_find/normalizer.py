# normalizer.py
"""
Text normalization for matching.

Page text is decomposed (NFD) one character at a time so that every
normalized character can be traced back to the original character it came
from. Spans found in normalized text are converted back with
``NormalizedText.to_original`` before they reach consumers.
"""
import unicodedata
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

# Inserted by the page text cache wherever a fragment ends a visual line
LINE_SEPARATOR = "\n"

# Typographic variants folded before decomposition
CHARACTERS_TO_NORMALIZE = {
    "‐": "-",    # Hyphen
    "‘": "'",    # Left single quotation mark
    "’": "'",    # Right single quotation mark
    "‚": "'",    # Single low-9 quotation mark
    "‛": "'",    # Single high-reversed-9 quotation mark
    "“": '"',    # Left double quotation mark
    "”": '"',    # Right double quotation mark
    "„": '"',    # Double low-9 quotation mark
    "‟": '"',    # Double high-reversed-9 quotation mark
    "¼": "1/4",  # Vulgar fraction one quarter
    "½": "1/2",  # Vulgar fraction one half
    "¾": "3/4",  # Vulgar fraction three quarters
}


class CharacterType(IntEnum):
    SPACE = 0
    ALPHA_LETTER = 1
    PUNCT = 2
    HAN_LETTER = 3
    KATAKANA_LETTER = 4
    HIRAGANA_LETTER = 5
    HALFWIDTH_KATAKANA_LETTER = 6
    THAI_LETTER = 7


@dataclass(frozen=True)
class NormalizedText:
    """
    Normalized text plus, for each normalized character, the half-open
    range [starts[i], ends[i]) of original text it stands for.
    """
    text: str
    starts: Tuple[int, ...]
    ends: Tuple[int, ...]
    original_length: int
    match_diacritics: bool = False

    @property
    def offset_map(self) -> Tuple[int, ...]:
        return self.starts

    def to_original(self, start: int, length: int) -> Tuple[int, int]:
        """Maps a (start, length) span in normalized text to original text."""
        if length <= 0:
            if start >= len(self.starts):
                return self.original_length, 0
            return self.starts[start], 0
        begin = self.starts[start]
        end = self.ends[start + length - 1]
        return begin, end - begin


def is_mark(ch: str) -> bool:
    """True for combining marks (Mn, Mc, Me)."""
    return unicodedata.category(ch).startswith("M")


def _decompose(ch: str) -> str:
    replacement = CHARACTERS_TO_NORMALIZE.get(ch)
    if replacement is not None:
        return replacement
    if "\ufb00" <= ch <= "\ufb4f":
        # Ligatures and other alphabetic presentation forms
        return unicodedata.normalize("NFKD", ch)
    return unicodedata.normalize("NFD", ch)


def normalize(text: str, match_diacritics: bool = False) -> NormalizedText:
    """
    Returns the decomposed form of text with an offset map back into it.

    With match_diacritics False, combining marks are dropped and the span
    of the character they were attached to grows to cover them. A hyphen
    that ends a line after a letter is dropped along with the line
    separator, joining the two halves of a hyphenated word.
    """
    chars: List[str] = []
    starts: List[int] = []
    ends: List[int] = []
    length = len(text)
    i = 0
    while i < length:
        ch = text[i]
        if (ch == "-" and i + 1 < length and text[i + 1] == LINE_SEPARATOR
                and chars and chars[-1].isalpha()):
            i += 2
            continue
        for piece in _decompose(ch):
            if not match_diacritics and is_mark(piece):
                if ends:
                    ends[-1] = i + 1
                continue
            chars.append(piece)
            starts.append(i)
            ends.append(i + 1)
        i += 1
    return NormalizedText("".join(chars), tuple(starts), tuple(ends), length, match_diacritics)


def normalize_query(term: str, match_diacritics: bool = False) -> str:
    return normalize(term, match_diacritics).text


def get_character_type(ch: str) -> CharacterType:
    if ch.isspace():
        return CharacterType.SPACE
    code = ord(ch)
    if 0x0E00 <= code <= 0x0E7F:
        return CharacterType.THAI_LETTER
    if 0x3040 <= code <= 0x309F:
        return CharacterType.HIRAGANA_LETTER
    if 0x30A0 <= code <= 0x30FF:
        return CharacterType.KATAKANA_LETTER
    if 0xFF66 <= code <= 0xFF9F:
        return CharacterType.HALFWIDTH_KATAKANA_LETTER
    if 0x3400 <= code <= 0x4DBF or 0x4E00 <= code <= 0x9FFF or 0xF900 <= code <= 0xFAFF:
        return CharacterType.HAN_LETTER
    if ch.isalnum() or ch == "_":
        return CharacterType.ALPHA_LETTER
    return CharacterType.PUNCT


def _base_char(text: str, index: int) -> Optional[str]:
    # Walks back over combining marks to the character they decorate
    while index >= 0 and is_mark(text[index]):
        index -= 1
    return text[index] if index >= 0 else None


def splits_grapheme(text: str, start: int, length: int) -> bool:
    """True if the span begins on, or is directly followed by, a combining mark."""
    end = start + length
    if start < len(text) and is_mark(text[start]):
        return True
    return end < len(text) and is_mark(text[end])


def is_entire_word(text: str, start: int, length: int) -> bool:
    """
    Checks that text[start:start + length] is not part of a larger word.

    A boundary exists where the character types on either side differ.
    Combining marks never form a boundary; they take the type of the
    character they are attached to.
    """
    if length <= 0 or splits_grapheme(text, start, length):
        return False
    end = start + length
    if start > 0:
        before = _base_char(text, start - 1)
        if before is not None and get_character_type(before) == get_character_type(text[start]):
            return False
    if end < len(text):
        last = _base_char(text, end - 1)
        if last is not None and get_character_type(last) == get_character_type(text[end]):
            return False
    return True
