"""Tests for document loaders."""

from __future__ import annotations

from pathlib import Path

import pytest

from privacy_guard.parsers import (
    DOCXLoader,
    HTMLLoader,
    PDFLoader,
    TextLoader,
    get_loader,
    html_to_text,
    load_document,
)


class TestTextLoader:
    def test_load(self, tmp_policy_file: Path) -> None:
        document = TextLoader().load(tmp_policy_file)
        assert document.filename == "policy.txt"
        assert document.format == "text"
        assert "Privacy Policy" in document.text

    def test_form_feed_pages(self, tmp_path: Path) -> None:
        path = tmp_path / "paged.txt"
        path.write_text("Page one.\fPage two.\f\f", encoding="utf-8")
        document = TextLoader().load(path)
        assert document.pages == ["Page one.", "Page two."]
        assert document.page_count == 2
        assert document.text == "Page one.\n\nPage two."

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            TextLoader().load(tmp_path / "missing.txt")

    def test_wrong_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "page.html"
        path.write_text("<p>x</p>", encoding="utf-8")
        with pytest.raises(ValueError):
            TextLoader().load(path)


class TestHTMLLoader:
    RAW = (
        "<html><head><title>Title</title><style>p { color: red; }</style></head>"
        "<body><nav>Menu</nav><p>Hello &amp; welcome</p>"
        "<script>var tracking = 1;</script><p>Second paragraph</p>"
        "<footer>Footer links</footer></body></html>"
    )

    def test_html_to_text(self) -> None:
        text = html_to_text(self.RAW)
        assert "Hello & welcome" in text
        assert "Second paragraph" in text
        for hidden in ("Title", "color", "Menu", "tracking", "Footer"):
            assert hidden not in text

    def test_block_boundaries(self) -> None:
        assert html_to_text("<p>One</p><p>Two</p>") == "One\n\nTwo"

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "policy.html"
        path.write_text(self.RAW, encoding="utf-8")
        document = HTMLLoader().load(path)
        assert document.format == "html"
        assert "Second paragraph" in document.text


class TestDOCXLoader:
    def test_load(self, tmp_path: Path) -> None:
        docx = pytest.importorskip("docx")
        path = tmp_path / "policy.docx"
        doc = docx.Document()
        doc.add_paragraph("We may share your data with partners.")
        doc.add_paragraph("")
        doc.add_paragraph("We retain it indefinitely.")
        doc.save(str(path))

        document = DOCXLoader().load(path)
        assert document.format == "docx"
        assert document.metadata["paragraph_count"] == 2
        assert document.text == (
            "We may share your data with partners.\n\nWe retain it indefinitely."
        )


class TestGetLoader:
    @pytest.mark.parametrize(
        "name, loader_type",
        [
            ("a.txt", TextLoader),
            ("a.MD", TextLoader),
            ("a.htm", HTMLLoader),
            ("a.pdf", PDFLoader),
            ("a.docx", DOCXLoader),
        ],
    )
    def test_by_extension(self, name: str, loader_type: type) -> None:
        assert isinstance(get_loader(Path(name)), loader_type)

    def test_unsupported(self) -> None:
        with pytest.raises(ValueError, match="No loader available"):
            get_loader(Path("policy.xyz"))

    def test_load_document(self, sample_policy_path: Path) -> None:
        document = load_document(str(sample_policy_path))
        assert document.filename == "sample_privacy_policy.txt"
        assert document.text
