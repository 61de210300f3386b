"""Incremental find-in-document for paginated text."""

from pdf_find.bus_adapter import FindBusAdapter
from pdf_find.config import ALL_PAGES, FindOptions
from pdf_find.event_bus import EventBus
from pdf_find.matcher import MatchSpan, Query, find_matches
from pdf_find.navigation import PageNavigator
from pdf_find.normalizer import normalize
from pdf_find.selection import ControlState, MatchesCount, Selection, SweepStatus
from pdf_find.text_model import TextDocument

__version__ = "0.1.0"

__all__ = [
    "ALL_PAGES",
    "ControlState",
    "EventBus",
    "FindBusAdapter",
    "FindOptions",
    "MatchSpan",
    "MatchesCount",
    "PageNavigator",
    "Query",
    "Selection",
    "SweepStatus",
    "TextDocument",
    "find_matches",
    "normalize",
]
