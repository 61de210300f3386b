"""Unit tests for page text assembly and the page text cache."""

import logging

from conftest import CountingDocument

from pdf_find.page_text import PageTextCache, PageTextEntry, TextFragment, fragments_from_text, join_fragments


class TestJoinFragments:
    def test_line_separator_after_eol_fragments(self):
        fragments = [
            TextFragment("alpha", has_eol=False),
            TextFragment(" beta", has_eol=True),
            TextFragment("gamma", has_eol=True),
        ]
        assert join_fragments(fragments) == "alpha beta\ngamma\n"

    def test_no_fragments(self):
        assert join_fragments([]) == ""

    def test_fragments_from_text(self):
        assert fragments_from_text("one\ntwo") == [TextFragment("one", True), TextFragment("two", False)]
        assert fragments_from_text("") == []
        assert join_fragments(fragments_from_text("one\ntwo")) == "one\ntwo"


class TestPageTextEntry:
    def test_normalized_forms_are_memoized_per_policy(self):
        entry = PageTextEntry(0, "caf\xe9")
        stripped = entry.normalized()
        kept = entry.normalized(match_diacritics=True)
        assert stripped.text == "cafe"
        assert kept.text == "cafe\u0301"
        assert entry.normalized() is stripped
        assert entry.normalized(True) is kept


class TestPageTextCache:
    def test_request_delivers_asynchronously(self, host):
        document = CountingDocument(["alpha beta"])
        cache = PageTextCache(host, document)
        received = []
        cache.request(0, received.append)
        assert received == []
        host.advance()
        assert [entry.text for entry in received] == ["alpha beta"]

    def test_concurrent_requests_share_one_extraction(self, host):
        document = CountingDocument(["alpha", "beta"])
        cache = PageTextCache(host, document)
        received = []
        cache.request(1, received.append)
        cache.request(1, received.append)
        cache.request(1, received.append)
        host.advance()
        assert document.calls == [1]
        assert len(received) == 3
        assert received[0] is received[1] is received[2]

    def test_cached_page_is_not_extracted_again(self, host):
        document = CountingDocument(["alpha"])
        cache = PageTextCache(host, document)
        cache.request(0, lambda entry: None)
        host.advance()
        cache.request(0, lambda entry: None)
        host.advance()
        assert cache.get_page_text(0) == "alpha"
        assert document.calls == [0]
        assert cache.is_cached(0)

    def test_synchronous_access(self, host):
        document = CountingDocument(["alpha\nbeta"])
        cache = PageTextCache(host, document)
        assert cache.get_page_text(0) == "alpha\nbeta"
        assert cache.get_normalized_text(0).text == "alpha\nbeta"
        assert document.calls == [0]

    def test_extraction_failure_yields_empty_failed_entry(self, host, caplog):
        document = CountingDocument(["alpha", "beta"], failing={0})
        cache = PageTextCache(host, document)
        with caplog.at_level(logging.WARNING, logger="pdf_find.page_text"):
            entry = cache.get_page_entry(0)
        assert entry.failed
        assert entry.text == ""
        assert "page 0" in caplog.text
        # Failures are remembered too
        cache.get_page_entry(0)
        assert document.calls == [0]

    def test_new_document_clears_cache(self, host):
        first = CountingDocument(["old"])
        second = CountingDocument(["new"])
        cache = PageTextCache(host, first)
        assert cache.get_page_text(0) == "old"
        cache.set_document(second)
        assert not cache.is_cached(0)
        assert cache.get_page_text(0) == "new"

    def test_pending_extraction_for_old_document_is_dropped(self, host):
        first = CountingDocument(["old"])
        second = CountingDocument(["new"])
        cache = PageTextCache(host, first)
        stale = []
        cache.request(0, stale.append)
        cache.set_document(second)
        host.advance()
        assert stale == []
        assert first.calls == []

    def test_no_document(self, host):
        cache = PageTextCache(host)
        entry = cache.get_page_entry(0)
        assert entry.failed and entry.text == ""
