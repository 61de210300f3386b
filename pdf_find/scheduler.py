# scheduler.py
"""
The search sweep: debouncing, page-by-page scanning and cancellation.

Every deferred step goes through the timer host and carries the sweep
generation it was scheduled under. Starting or cancelling a sweep bumps
the generation, so steps from a superseded sweep find a mismatch and
return without touching any state.
"""
import dataclasses
import logging
from functools import partial
from typing import List, Optional

from pdf_find.config import ALL_PAGES, FindOptions
from pdf_find.matcher import MatchSpan, Query, find_matches
from pdf_find.page_text import PageTextCache, PageTextEntry
from pdf_find.selection import ControlState, MatchesCount, Selection, SelectionTracker, SweepStatus

logger = logging.getLogger(__name__)


class SearchScheduler:
    """
    Runs sweeps for the current query and reports to a listener.

    The listener gets ``page_matches_updated(page_index)``,
    ``matches_count_updated(count)``,
    ``control_state_updated(state, previous_state, count)`` and
    ``selection_changed(previous, selection)``.
    """
    def __init__(self, host, cache: PageTextCache, listener, options: Optional[FindOptions] = None):
        self.host = host
        self.cache = cache
        self.listener = listener
        self.options = options or FindOptions()
        self.tracker = SelectionTracker()

        self.status = SweepStatus.IDLE
        self.query: Optional[Query] = None
        self.page_matches: List[Optional[List[MatchSpan]]] = []
        self.page_count = 0

        self._generation = 0
        self._timer = None
        self._scan_order: List[int] = []
        self._state: Optional[ControlState] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> Optional[ControlState]:
        """The last control state reported to the listener."""
        return self._state

    @property
    def selection(self) -> Optional[Selection]:
        return self.tracker.selection

    @property
    def matches_count(self) -> MatchesCount:
        return self.tracker.matches_count(self.page_matches)

    def reset(self, page_count: int):
        """Forgets everything; used when a new document is attached."""
        self._cancel()
        self.page_count = max(page_count, 0)
        self.query = None
        self.tracker.reset()
        self._clear_matches()
        self.status = SweepStatus.IDLE
        self._state = None

    def search(self, query: Query, find_previous: bool = False):
        """Starts a new sweep after the debounce window."""
        self._begin(query, find_previous, debounce=True)

    def repeat(self, query: Optional[Query] = None, find_previous: bool = False,
               seek_from: Optional[int] = None):
        """
        Moves to the next or previous match without debouncing.

        A query that differs from the active one starts its sweep at once.
        seek_from discards the selection and looks again starting from that
        page instead of from the selected match.
        """
        if query is not None and not query.same_search(self.query):
            self._begin(query, find_previous, debounce=False)
            return
        if self.query is None or self.status is SweepStatus.IDLE:
            return

        if seek_from is not None and self.tracker.selection is not None:
            logger.debug("Selection on page %d is stale; seeking from page %d",
                         self.tracker.selection.page_index, seek_from)
            previous = self.tracker.selection
            self.tracker.seek(seek_from, find_previous)
            self.listener.selection_changed(previous, None)
        else:
            self.tracker.advance(find_previous)

        if self.status is SweepStatus.DEBOUNCING:
            self._cancel_timer()
            self._start_scan()
            return
        if not self._resolve():
            self._update_state(force=self.status is SweepStatus.DONE)

    def set_highlight_all(self, highlight_all: bool):
        """Changes the highlight flag of the active query without rescanning."""
        if self.query is None:
            return
        self.query = dataclasses.replace(self.query, highlight_all=bool(highlight_all))
        self.listener.page_matches_updated(ALL_PAGES)
        self._emit_matches_count()

    def close(self):
        """Cancels any sweep and clears all matches and the selection."""
        self._cancel()
        self.query = None
        self.tracker.reset()
        self._clear_matches()
        self.status = SweepStatus.IDLE
        self._state = None
        self.listener.page_matches_updated(ALL_PAGES)

    def _begin(self, query: Query, find_previous: bool, debounce: bool):
        start_page = self.tracker.anchor_page
        self._cancel()
        self.query = query
        self._clear_matches()
        self.tracker.seek(start_page, find_previous)
        self.listener.page_matches_updated(ALL_PAGES)

        if query.is_empty:
            self.tracker.drop_intent()
            self.status = SweepStatus.DONE
            self._emit_matches_count()
            self._update_state(force=True)
            return

        if not debounce:
            self._start_scan()
            return
        self.status = SweepStatus.DEBOUNCING
        self._update_state()
        self._timer = self.host.after(self.options.debounce_ms, self._on_debounce_expired,
                                      self._generation)

    def _on_debounce_expired(self, generation: int):
        if generation != self._generation:
            return
        self._timer = None
        self._start_scan()

    def _start_scan(self):
        self.status = SweepStatus.SCANNING
        count = self.page_count
        start = min(self.tracker.anchor_page, count - 1) if count else 0
        self._scan_order = [(start + i) % count for i in range(count)]
        logger.debug("Sweep %d for %r started on page %d of %d",
                     self._generation, self.query.raw, start, count)
        self._update_state()
        self._scan_next(self._generation, 0)

    def _scan_next(self, generation: int, position: int):
        if generation != self._generation:
            return
        if position >= len(self._scan_order):
            self._finish()
            return
        page_index = self._scan_order[position]
        self.cache.request(page_index, partial(self._on_page_text, generation, position))

    def _on_page_text(self, generation: int, position: int, entry: PageTextEntry):
        if generation != self._generation:
            return
        matches = find_matches(self.query, entry.normalized(self.query.match_diacritics))
        self._commit(entry.page_index, matches)
        self.host.after(0, self._scan_next, generation, position + 1)

    def _commit(self, page_index: int, matches: List[MatchSpan]):
        self.page_matches[page_index] = matches
        logger.debug("Page %d: %d matches", page_index, len(matches))
        self.listener.page_matches_updated(page_index)
        if not self._resolve():
            self._emit_matches_count()

    def _finish(self):
        self.status = SweepStatus.DONE
        self._resolve()
        self.tracker.drop_intent()
        count = self.matches_count
        logger.debug("Sweep %d for %r done: %d matches", self._generation, self.query.raw, count.total)
        self._emit_matches_count()
        self._update_state()

    def _resolve(self) -> bool:
        previous = self.tracker.selection
        if not self.tracker.resolve(self.page_matches):
            return False
        self.listener.selection_changed(previous, self.tracker.selection)
        self._emit_matches_count()
        self._update_state(force=True)
        return True

    def _emit_matches_count(self):
        if self.status is SweepStatus.SCANNING and not self.options.update_matches_count_on_progress:
            return
        self.listener.matches_count_updated(self.matches_count)

    def _update_state(self, force: bool = False):
        state = self.tracker.control_state(self.status)
        if state == self._state and not force:
            return
        previous, self._state = self._state, state
        self.listener.control_state_updated(state, previous, self.matches_count)

    def _clear_matches(self):
        self.page_matches = [None] * self.page_count

    def _cancel_timer(self):
        if self._timer is not None:
            self.host.after_cancel(self._timer)
            self._timer = None

    def _cancel(self):
        if self.status in (SweepStatus.DEBOUNCING, SweepStatus.SCANNING):
            logger.debug("Sweep %d cancelled", self._generation)
        self._cancel_timer()
        self._generation += 1
