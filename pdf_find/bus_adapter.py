# bus_adapter.py
import logging
from typing import Callable, List, Optional

from pdf_find.config import ALL_PAGES, FindOptions
from pdf_find.event_bus import EventBus
from pdf_find.matcher import MatchSpan, Query
from pdf_find.page_text import PageTextCache
from pdf_find.scheduler import SearchScheduler
from pdf_find.selection import ControlState, MatchesCount, Selection, SweepStatus

logger = logging.getLogger(__name__)

# Inbound commands
FIND = "find"
FIND_AGAIN = "find_again"
FIND_HIGHLIGHT_ALL_CHANGE = "find_highlight_all_change"
FIND_BAR_CLOSE = "find_bar_close"

# Outbound notifications
UPDATE_PAGE_MATCHES = "update_page_matches"
UPDATE_FIND_CONTROL_STATE = "update_find_control_state"
UPDATE_FIND_MATCHES_COUNT = "update_find_matches_count"


class FindBusAdapter:
    """
    Connects the search scheduler to an event bus and a page navigator.

    Inbound bus events are turned into scheduler calls; scheduler output is
    published back on the bus. This is the only class that talks to the
    viewer-side collaborators.
    """
    def __init__(self, event_bus: EventBus, navigator, host,
                 options: Optional[FindOptions] = None,
                 is_page_visible: Optional[Callable[[int], bool]] = None):
        self.event_bus = event_bus
        self.navigator = navigator
        self.is_page_visible = is_page_visible
        self.document = None
        self.cache = PageTextCache(host)
        self.scheduler = SearchScheduler(host, self.cache, self, options)
        self._bind_bus_events()

    def _bind_bus_events(self):
        self.event_bus.on(FIND, self._on_find)
        self.event_bus.on(FIND_AGAIN, self._on_find_again)
        self.event_bus.on(FIND_HIGHLIGHT_ALL_CHANGE, self._on_highlight_all_change)
        self.event_bus.on(FIND_BAR_CLOSE, self._on_find_bar_close)

    def unbind(self):
        self.event_bus.off(FIND, self._on_find)
        self.event_bus.off(FIND_AGAIN, self._on_find_again)
        self.event_bus.off(FIND_HIGHLIGHT_ALL_CHANGE, self._on_highlight_all_change)
        self.event_bus.off(FIND_BAR_CLOSE, self._on_find_bar_close)

    # --- Document ---

    def set_document(self, document):
        """Attaches a page-text source, or detaches with None."""
        self.document = document
        self.cache.set_document(document)
        page_count = document.page_count if document is not None else 0
        self.scheduler.reset(page_count)

    # --- Read-only views ---

    @property
    def query(self) -> Optional[Query]:
        return self.scheduler.query

    @property
    def selection(self) -> Optional[Selection]:
        return self.scheduler.selection

    @property
    def state(self) -> Optional[ControlState]:
        return self.scheduler.state

    @property
    def status(self) -> SweepStatus:
        return self.scheduler.status

    @property
    def matches_count(self) -> MatchesCount:
        return self.scheduler.matches_count

    def page_matches(self, page_index: int) -> List[MatchSpan]:
        if not 0 <= page_index < len(self.scheduler.page_matches):
            return []
        return list(self.scheduler.page_matches[page_index] or [])

    # --- Commands ---

    def search(self, query, case_sensitive=False, entire_word=False, highlight_all=False,
               match_diacritics=False, find_previous=False):
        if not self._has_document("search"):
            return
        new_query = Query.from_command(query, case_sensitive, entire_word,
                                       match_diacritics, highlight_all)
        self.scheduler.search(new_query, bool(find_previous))

    def repeat(self, query=None, find_previous=False):
        if not self._has_document("repeat"):
            return
        new_query = None
        current = self.scheduler.query
        if query is not None:
            # A repeat keeps the active flags; only the terms can change
            new_query = Query.from_command(
                query,
                case_sensitive=current.case_sensitive if current else False,
                entire_word=current.entire_word if current else False,
                match_diacritics=current.match_diacritics if current else False,
                highlight_all=current.highlight_all if current else False,
            )
        self.scheduler.repeat(new_query, bool(find_previous), self._stale_selection_page())

    def toggle_highlight_all(self, highlight_all, query=None):
        if not self._has_document("toggle_highlight_all"):
            return
        self.scheduler.set_highlight_all(bool(highlight_all))

    def close(self):
        if not self._has_document("close"):
            return
        self.scheduler.close()

    def _has_document(self, command: str) -> bool:
        if self.document is None:
            logger.debug("Ignoring %s: no document attached", command)
            return False
        return True

    def _stale_selection_page(self) -> Optional[int]:
        # Page to seek from when the selected match has scrolled out of view
        selection = self.scheduler.selection
        if selection is None or self.is_page_visible is None:
            return None
        if self.is_page_visible(selection.page_index):
            return None
        return self.navigator.current_page

    # --- Bus handlers ---

    def _on_find(self, query=None, case_sensitive=False, entire_word=False, highlight_all=False,
                 match_diacritics=False, find_previous=False, **_):
        self.search(query, case_sensitive, entire_word, highlight_all, match_diacritics, find_previous)

    def _on_find_again(self, query=None, find_previous=False, **_):
        self.repeat(query, find_previous)

    def _on_highlight_all_change(self, highlight_all=False, query=None, **_):
        self.toggle_highlight_all(highlight_all, query)

    def _on_find_bar_close(self, **_):
        self.close()

    # --- Scheduler listener ---

    def page_matches_updated(self, page_index: int):
        self.event_bus.dispatch(UPDATE_PAGE_MATCHES, page_index=page_index)

    def matches_count_updated(self, count: MatchesCount):
        self.event_bus.dispatch(UPDATE_FIND_MATCHES_COUNT, matches_count=count)

    def control_state_updated(self, state: ControlState, previous_state: Optional[ControlState],
                              count: MatchesCount):
        query = self.scheduler.query
        self.event_bus.dispatch(
            UPDATE_FIND_CONTROL_STATE,
            state=state,
            previous_state=previous_state,
            entire_word=query.entire_word if query else False,
            matches_count=count,
            raw_query=query.raw if query else "",
        )

    def selection_changed(self, previous: Optional[Selection], selection: Optional[Selection]):
        if previous is not None and (selection is None or previous.page_index != selection.page_index):
            self.page_matches_updated(previous.page_index)
        if selection is not None:
            self.navigator.scroll_to_page(selection.page_index)
            self.page_matches_updated(selection.page_index)
