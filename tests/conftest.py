"""Shared fixtures: a virtual-time timer host, an event recorder and small documents."""

import pytest

from pdf_find.bus_adapter import (
    UPDATE_FIND_CONTROL_STATE,
    UPDATE_FIND_MATCHES_COUNT,
    UPDATE_PAGE_MATCHES,
    FindBusAdapter,
)
from pdf_find.config import FindOptions
from pdf_find.event_bus import EventBus
from pdf_find.navigation import PageNavigator
from pdf_find.text_model import TextDocument


class ManualHost:
    """Tk-style after()/after_cancel() on a virtual clock advanced by the test."""

    def __init__(self):
        self.now = 0
        self._seq = 0
        self._timers = {}

    def after(self, ms, func, *args):
        self._seq += 1
        handle = f"after#{self._seq}"
        self._timers[handle] = (self.now + ms, self._seq, func, args)
        return handle

    def after_cancel(self, handle):
        self._timers.pop(handle, None)

    @property
    def pending(self):
        return len(self._timers)

    def advance(self, ms=0):
        """Runs every callback due within the next ms milliseconds, in order."""
        target = self.now + ms
        while True:
            due = [(when, seq, handle) for handle, (when, seq, _, _) in self._timers.items() if when <= target]
            if not due:
                break
            when, _, handle = min(due)
            _, _, func, args = self._timers.pop(handle)
            self.now = max(self.now, when)
            func(*args)
        self.now = target

    def step(self):
        """Runs the earliest pending callback, moving the clock to its due time."""
        if not self._timers:
            return False
        handle = min(self._timers, key=lambda h: self._timers[h][:2])
        when, _, func, args = self._timers.pop(handle)
        self.now = max(self.now, when)
        func(*args)
        return True

    def run_all(self):
        self.advance(60_000)


class Recorder:
    """Collects outbound find notifications from a bus."""

    def __init__(self, bus):
        self.events = []
        for name in (UPDATE_PAGE_MATCHES, UPDATE_FIND_CONTROL_STATE, UPDATE_FIND_MATCHES_COUNT):
            bus.on(name, self._listener(name))

    def _listener(self, name):
        def record(**payload):
            self.events.append((name, payload))

        return record

    def of(self, name):
        return [payload for event, payload in self.events if event == name]

    @property
    def states(self):
        return [payload["state"] for payload in self.of(UPDATE_FIND_CONTROL_STATE)]

    @property
    def counts(self):
        return [payload["matches_count"] for payload in self.of(UPDATE_FIND_MATCHES_COUNT)]

    def clear(self):
        self.events.clear()


class CountingDocument(TextDocument):
    """TextDocument that counts extractions and can fail on chosen pages."""

    def __init__(self, pages, failing=()):
        super().__init__(pages)
        self.failing = set(failing)
        self.calls = []

    def get_text_fragments(self, page_num):
        self.calls.append(page_num)
        if page_num in self.failing:
            raise RuntimeError(f"broken page {page_num}")
        return super().get_text_fragments(page_num)


@pytest.fixture
def host():
    return ManualHost()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    return Recorder(bus)


@pytest.fixture
def navigator():
    return PageNavigator()


@pytest.fixture
def three_pages():
    return CountingDocument(["alpha beta", "beta gamma", "beta"])


@pytest.fixture
def make_adapter(bus, navigator, host):
    """Builds an adapter with a document attached."""

    def factory(document, options=None, is_page_visible=None):
        adapter = FindBusAdapter(bus, navigator, host, options or FindOptions(), is_page_visible)
        navigator.set_page_count(document.page_count)
        adapter.set_document(document)
        return adapter

    return factory
