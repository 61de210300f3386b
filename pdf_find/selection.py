# selection.py
"""
Selection and control-state tracking.

The tracker holds the selected match and at most one pending navigation
intent. An intent is resolved against the per-page match table as pages
get scanned: it walks from its origin in its direction, wrapping around
the document, and waits as soon as it reaches a page that has not been
scanned yet.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Sequence

from pdf_find.config import MATCHES_COUNT_LIMIT
from pdf_find.matcher import MatchSpan

PageMatches = Sequence[Optional[List[MatchSpan]]]

# Returned by the walk when it reaches a page that is not scanned yet
_WAIT = object()


class ControlState(IntEnum):
    FOUND = 0
    NOT_FOUND = 1
    WRAPPED = 2
    PENDING = 3


class SweepStatus(Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    SCANNING = "scanning"
    DONE = "done"


@dataclass(frozen=True)
class Selection:
    page_index: int
    match_index: int


@dataclass(frozen=True)
class MatchesCount:
    current: int = 0
    total: int = 0

    @property
    def exceeds_limit(self) -> bool:
        return self.total > MATCHES_COUNT_LIMIT


@dataclass(frozen=True)
class _Intent:
    find_previous: bool
    page_index: int
    # None seeks the first (or last) match of page_index itself
    match_index: Optional[int] = None


class SelectionTracker:
    """Owns the current Selection; everything else only reads it."""
    def __init__(self):
        self.selection: Optional[Selection] = None
        self.wrapped = False
        self._intent: Optional[_Intent] = None

    def reset(self):
        self.selection = None
        self.wrapped = False
        self._intent = None

    @property
    def has_pending_intent(self) -> bool:
        return self._intent is not None

    @property
    def anchor_page(self) -> int:
        """Page a new sweep should start from."""
        if self.selection is not None:
            return self.selection.page_index
        if self._intent is not None:
            return self._intent.page_index
        return 0

    def seek(self, page_index: int, find_previous: bool = False):
        """Drops the selection and looks for the first match from page_index on."""
        self.selection = None
        self.wrapped = False
        self._intent = _Intent(find_previous, max(page_index, 0))

    def advance(self, find_previous: bool = False):
        """Asks for the next (or previous) match relative to the selection."""
        if self.selection is not None:
            self._intent = _Intent(find_previous, self.selection.page_index,
                                   self.selection.match_index)
        elif self._intent is not None:
            # Nothing selected yet: only the direction can change
            self._intent = _Intent(find_previous, self._intent.page_index,
                                   self._intent.match_index)

    def drop_intent(self):
        self._intent = None

    def resolve(self, page_matches: PageMatches) -> bool:
        """
        Tries to satisfy the pending intent. Returns True if the selection
        moved, False if there was nothing to do, the intent has to wait for
        more pages, or no page has any match.
        """
        if self._intent is None:
            return False
        result = self._walk(self._intent, page_matches)
        if result is _WAIT:
            return False
        self._intent = None
        if result is None:
            return False
        self.selection, self.wrapped = result
        return True

    def _walk(self, intent: _Intent, page_matches: PageMatches):
        page_count = len(page_matches)
        if not page_count:
            return None
        page = min(intent.page_index, page_count - 1)
        wrapped = False
        # Revisiting the origin page lets a lone match wrap onto itself
        steps = page_count + 1 if intent.match_index is not None else page_count
        for step in range(steps):
            matches = page_matches[page]
            if matches is None:
                return _WAIT
            index = self._pick(matches, intent, step == 0)
            if index is not None:
                return Selection(page, index), wrapped
            if intent.find_previous:
                page -= 1
                if page < 0:
                    page, wrapped = page_count - 1, True
            else:
                page += 1
                if page >= page_count:
                    page, wrapped = 0, True
        return None

    @staticmethod
    def _pick(matches: List[MatchSpan], intent: _Intent, at_origin: bool) -> Optional[int]:
        if not matches:
            return None
        if at_origin and intent.match_index is not None:
            index = intent.match_index + (-1 if intent.find_previous else 1)
            return index if 0 <= index < len(matches) else None
        return len(matches) - 1 if intent.find_previous else 0

    def is_valid(self, page_matches: PageMatches) -> bool:
        if self.selection is None:
            return False
        page, index = self.selection.page_index, self.selection.match_index
        if not 0 <= page < len(page_matches):
            return False
        matches = page_matches[page]
        return matches is not None and 0 <= index < len(matches)

    def control_state(self, status: SweepStatus) -> ControlState:
        if self.selection is not None:
            return ControlState.WRAPPED if self.wrapped else ControlState.FOUND
        if status in (SweepStatus.DEBOUNCING, SweepStatus.SCANNING):
            return ControlState.PENDING
        return ControlState.NOT_FOUND

    def matches_count(self, page_matches: PageMatches) -> MatchesCount:
        total = sum(len(matches) for matches in page_matches if matches)
        if self.selection is None:
            return MatchesCount(0, total)
        before = sum(len(matches) for matches in page_matches[:self.selection.page_index] if matches)
        return MatchesCount(before + self.selection.match_index + 1, total)
