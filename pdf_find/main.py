# main.py
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pdf_find.bus_adapter import UPDATE_FIND_MATCHES_COUNT, FindBusAdapter
from pdf_find.config import FindOptions
from pdf_find.event_bus import EventBus
from pdf_find.hosts import LoopHost
from pdf_find.navigation import PageNavigator
from pdf_find.selection import SweepStatus
from pdf_find.text_model import TextDocument

logger = logging.getLogger("pdf_find")


def _open_document(path: Path):
    if path.suffix.lower() == ".pdf":
        from pdf_find.pdf_model import PDFModel
        return PDFModel(str(path))
    return TextDocument.from_file(path)


def _context(text: str, start: int, end: int, width: int):
    before = " ".join(text[max(0, start - width):start].split())
    after = " ".join(text[end:end + width].split())
    return before, after


async def _run_search(document, query, args) -> FindBusAdapter:
    loop = asyncio.get_running_loop()
    done = loop.create_future()
    bus = EventBus()
    navigator = PageNavigator(document.page_count)
    adapter = FindBusAdapter(bus, navigator, LoopHost(loop), FindOptions(debounce_ms=0))

    def on_matches_count(matches_count, **_):
        if adapter.status is SweepStatus.DONE and not done.done():
            done.set_result(matches_count)

    bus.on(UPDATE_FIND_MATCHES_COUNT, on_matches_count)
    adapter.set_document(document)
    adapter.search(query, case_sensitive=args.case_sensitive, entire_word=args.entire_word,
                   match_diacritics=args.match_diacritics, highlight_all=True)
    count = await done
    logger.info("%d matches in %d pages", count.total, document.page_count)
    return adapter


def main(argv: Optional[List[str]] = None) -> int:
    """Searches a PDF or form-feed separated text file and prints JSON lines."""
    parser = argparse.ArgumentParser(
        prog="pdf-find",
        description="Find text in a PDF (or a text file with form-feed page breaks).",
    )
    parser.add_argument("file", help="PDF or text file to search.")
    parser.add_argument("query", nargs="+", help="Search term(s); several terms match any of them.")
    parser.add_argument("--case-sensitive", action="store_true", help="Match case.")
    parser.add_argument("--entire-word", action="store_true", help="Only match whole words.")
    parser.add_argument("--match-diacritics", action="store_true", help="Treat accented letters as distinct.")
    parser.add_argument("--context", type=int, default=30, help="Characters of context per side. Default: 30.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log sweep progress to stderr.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = Path(args.file)
    if not path.is_file():
        print(f"ERROR: file not found: {path}", file=sys.stderr)
        return 2
    try:
        document = _open_document(path)
    except Exception as e:
        print(f"ERROR: cannot open {path}: {e}", file=sys.stderr)
        return 2

    query = args.query[0] if len(args.query) == 1 else args.query
    adapter = asyncio.run(_run_search(document, query, args))

    found = 0
    for page_index in range(document.page_count):
        text = adapter.cache.get_page_text(page_index)
        for span in adapter.page_matches(page_index):
            before, after = _context(text, span.offset, span.end, max(args.context, 0))
            record = {
                "page": page_index + 1,
                "offset": span.offset,
                "length": span.length,
                "match": text[span.offset:span.end],
                "context_before": before,
                "context_after": after,
            }
            sys.stdout.write(json.dumps(record, ensure_ascii=False) + "\n")
            found += 1

    if hasattr(document, "close"):
        document.close()
    return 0 if found else 1


if __name__ == "__main__":
    raise SystemExit(main())
