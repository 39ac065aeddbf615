"""Tests for the text acquisition helpers: file decoding, trimming and extension dispatch."""

import pytest

import text_dialog
from text_dialog import UNREADABLE_PAGE, extract_text, normalize_text, read_text_file


class TestReadTextFile:

    def test_utf8(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_bytes("Grüße aus Köln".encode("utf-8"))
        assert read_text_file(str(path)) == "Grüße aus Köln"

    def test_latin1_file_is_readable(self, tmp_path):
        path = tmp_path / "legacy.txt"
        path.write_bytes("Grüße aus Köln".encode("latin-1"))
        assert read_text_file(str(path)) == "Grüße aus Köln"

    def test_arbitrary_bytes_never_raise_decode_errors(self, tmp_path):
        path = tmp_path / "binary.txt"
        path.write_bytes(bytes(range(256)))
        assert len(read_text_file(str(path))) == 256

    def test_missing_file_raises_oserror(self, tmp_path):
        with pytest.raises(OSError):
            read_text_file(str(tmp_path / "missing.txt"))


class TestNormalizeText:

    def test_strips_surrounding_whitespace(self):
        assert normalize_text("  \n Hello world \t\n") == "Hello world"

    def test_inner_whitespace_is_kept(self):
        assert normalize_text("one\n\ntwo") == "one\n\ntwo"

    @pytest.mark.parametrize("value", [None, 42, b"bytes"])
    def test_non_string_is_empty(self, value):
        assert normalize_text(value) == ""


class TestExtractText:

    @pytest.mark.parametrize("name", ["story.txt", "STORY.TXT", "story.md", "story"])
    def test_plain_text_and_unknown_types(self, tmp_path, name):
        path = tmp_path / name
        path.write_text("Es war einmal", encoding="utf-8")
        assert extract_text(str(path)) == "Es war einmal"

    def test_docx(self, tmp_path):
        docx = pytest.importorskip("docx")
        document = docx.Document()
        document.add_paragraph("Erster Absatz")
        document.add_paragraph("Zweiter Absatz")
        path = tmp_path / "story.docx"
        document.save(str(path))
        assert extract_text(str(path)) == "Erster Absatz\n\nZweiter Absatz"

    def test_pdf_goes_to_pdf_extractor(self, tmp_path, monkeypatch):
        seen = []
        monkeypatch.setattr(text_dialog, "extract_text_from_pdf", lambda p: seen.append(p) or "pdf text")
        path = str(tmp_path / "paper.PDF")
        assert extract_text(path) == "pdf text"
        assert seen == [path]


class FakePage:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error

    def extract_text(self):
        if self.error: raise self.error
        return self.text


class FakeReader:
    is_encrypted = False
    pages = []

    def __init__(self, filepath):
        self.filepath = filepath


class TestExtractTextFromPdf:

    def test_unreadable_page_is_replaced(self, monkeypatch):
        FakeReader.pages = [FakePage("Seite eins"), FakePage(error=ValueError("broken stream")), FakePage("Seite drei")]
        monkeypatch.setattr(text_dialog, "HAS_PYPDF2", True)
        monkeypatch.setattr(text_dialog, "PdfReader", FakeReader, raising=False)
        assert text_dialog.extract_text_from_pdf("paper.pdf") == f"Seite eins\n\n{UNREADABLE_PAGE}\n\nSeite drei"

    def test_pages_without_text_are_skipped(self, monkeypatch):
        FakeReader.pages = [FakePage("Nur Text"), FakePage("")]
        monkeypatch.setattr(text_dialog, "HAS_PYPDF2", True)
        monkeypatch.setattr(text_dialog, "PdfReader", FakeReader, raising=False)
        assert text_dialog.extract_text_from_pdf("paper.pdf") == "Nur Text"
