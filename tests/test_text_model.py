import fitz
import pytest

from pdf_find.exceptions import PageTextError
from pdf_find.page_text import join_fragments
from pdf_find.pdf_model import PDFModel
from pdf_find.text_model import TextDocument


def make_pdf(*pages):
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


class TestTextDocument:
    def test_pages_become_line_fragments(self):
        document = TextDocument(["one\ntwo"])
        fragments = document.get_text_fragments(0)
        assert [f.text for f in fragments] == ["one", "two"]
        assert [f.has_eol for f in fragments] == [True, False]
        assert join_fragments(fragments) == "one\ntwo"

    def test_from_file_splits_on_form_feed(self, tmp_path):
        path = tmp_path / "book.txt"
        path.write_text("first page\fsecond page\fthird", encoding="utf-8")
        document = TextDocument.from_file(path)
        assert document.page_count == 3
        assert document.pages[1] == "second page"

    def test_missing_page_raises(self):
        with pytest.raises(PageTextError) as info:
            TextDocument(["only"]).get_text_fragments(1)
        assert info.value.page_index == 1


class TestPDFModel:
    def test_extracts_text_per_page(self):
        model = PDFModel(stream=make_pdf("alpha beta", "gamma"))
        assert model.page_count == 2
        assert "alpha beta" in join_fragments(model.get_text_fragments(0))
        assert "gamma" in join_fragments(model.get_text_fragments(1))
        model.close()

    def test_lines_end_with_a_line_break(self):
        model = PDFModel(stream=make_pdf("alpha beta"))
        fragments = model.get_text_fragments(0)
        assert fragments[-1].has_eol
        model.close()

    def test_blank_page_has_no_fragments(self):
        model = PDFModel(stream=make_pdf(""))
        assert model.get_text_fragments(0) == []
        model.close()

    def test_missing_page_raises(self):
        model = PDFModel(stream=make_pdf("alpha"))
        with pytest.raises(PageTextError):
            model.get_text_fragments(4)
        model.close()

    def test_close_releases_the_document(self):
        model = PDFModel(stream=make_pdf("alpha"))
        model.close()
        assert model.page_count == 0
        assert model.get_page(0) is None
