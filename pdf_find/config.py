# config.py

from dataclasses import dataclass

# --- Search Timing ---
# Quiet period after a new query before the sweep starts
FIND_TIMEOUT_MS: int = 250

# --- Result Reporting ---
# Above this many matches UIs show "more than N" instead of an exact count
MATCHES_COUNT_LIMIT: int = 1000

# Page index sentinel meaning "all currently visible pages"
ALL_PAGES: int = -1

# --- Viewer Constants ---
# Number of pages above/below the current page that count as visible
VISIBLE_PAGE_BUFFER: int = 0


@dataclass(frozen=True)
class FindOptions:
    """Tunables for the find controller. Bad values are clamped, not rejected."""
    debounce_ms: int = FIND_TIMEOUT_MS
    update_matches_count_on_progress: bool = True

    def __post_init__(self):
        try:
            debounce = int(self.debounce_ms)
        except (TypeError, ValueError):
            debounce = FIND_TIMEOUT_MS
        object.__setattr__(self, "debounce_ms", max(debounce, 0))
        object.__setattr__(self, "update_matches_count_on_progress",
                           bool(self.update_matches_count_on_progress))
