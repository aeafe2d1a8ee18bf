"""Loaders that turn policy files into plain text for analysis.

The analysis engine itself never reads files; these loaders exist for
the CLI and :meth:`RiskAnalyzer.analyze_file`. Supported formats are
plain text, saved HTML pages, PDF and DOCX.
"""

from __future__ import annotations

import html as html_module
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from html.parser import HTMLParser
from pathlib import Path


@dataclass
class LoadedDocument:
    """Plain text extracted from a policy file."""

    filename: str
    pages: list[str] = field(default_factory=list)
    format: str = "text"
    metadata: dict = field(default_factory=dict)

    @property
    def text(self) -> str:
        return "\n\n".join(page for page in self.pages if page)

    @property
    def page_count(self) -> int:
        return len(self.pages)


class DocumentLoader(ABC):
    """Base class for format-specific loaders."""

    supported_extensions: tuple[str, ...] = ()

    def can_handle(self, path: Path) -> bool:
        return path.suffix.lower() in self.supported_extensions

    @abstractmethod
    def load(self, path: Path) -> LoadedDocument:
        """Read ``path`` and return its text.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the extension is not handled by this loader.
        """
        ...

    def _validate_path(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not self.can_handle(path):
            raise ValueError(
                f"Unsupported file extension '{path.suffix}' for {self.__class__.__name__}. "
                f"Supported: {self.supported_extensions}"
            )


class TextLoader(DocumentLoader):
    """Plain text and Markdown; form feeds separate pages."""

    supported_extensions = (".txt", ".text", ".md")

    def load(self, path: Path) -> LoadedDocument:
        self._validate_path(path)
        text = path.read_text(encoding="utf-8", errors="replace")
        pages = [page.strip() for page in text.split("\f")]
        return LoadedDocument(filename=path.name, pages=[p for p in pages if p], format="text")


class _VisibleTextExtractor(HTMLParser):
    """Collect the visible body text of a page, skipping chrome elements."""

    _SKIP_TAGS = {"script", "style", "head", "noscript", "nav", "footer", "template", "svg"}
    _BLOCK_TAGS = {"p", "div", "br", "li", "tr", "section", "article",
                   "h1", "h2", "h3", "h4", "h5", "h6"}

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list) -> None:
        if tag in self._SKIP_TAGS:
            self._skip_depth += 1
        elif tag in self._BLOCK_TAGS:
            self.parts.append("\n")

    def handle_endtag(self, tag: str) -> None:
        if tag in self._SKIP_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag in self._BLOCK_TAGS:
            self.parts.append("\n")

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self.parts.append(data)


def html_to_text(raw_html: str) -> str:
    """Strip markup from ``raw_html``, keeping block boundaries as newlines."""
    extractor = _VisibleTextExtractor()
    extractor.feed(raw_html)
    extractor.close()
    text = html_module.unescape("".join(extractor.parts))
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n\s*", "\n\n", text)
    return text.strip()


class HTMLLoader(DocumentLoader):
    """Saved web pages."""

    supported_extensions = (".html", ".htm")

    def load(self, path: Path) -> LoadedDocument:
        self._validate_path(path)
        raw = path.read_text(encoding="utf-8", errors="replace")
        return LoadedDocument(filename=path.name, pages=[html_to_text(raw)], format="html")


class PDFLoader(DocumentLoader):
    """PDF documents via pdfplumber, one entry per page."""

    supported_extensions = (".pdf",)

    def load(self, path: Path) -> LoadedDocument:
        self._validate_path(path)
        import pdfplumber

        with pdfplumber.open(str(path)) as pdf:
            pages = [(page.extract_text() or "").strip() for page in pdf.pages]
            metadata = {"pdf_metadata": pdf.metadata or {}}
        return LoadedDocument(filename=path.name, pages=pages, format="pdf", metadata=metadata)


class DOCXLoader(DocumentLoader):
    """Word documents via python-docx; the whole body is one page."""

    supported_extensions = (".docx",)

    def load(self, path: Path) -> LoadedDocument:
        self._validate_path(path)
        from docx import Document

        doc = Document(str(path))
        paragraphs = [p.text.strip() for p in doc.paragraphs if p.text.strip()]
        metadata: dict = {"paragraph_count": len(paragraphs)}
        if doc.core_properties.title:
            metadata["title"] = doc.core_properties.title
        return LoadedDocument(
            filename=path.name,
            pages=["\n\n".join(paragraphs)],
            format="docx",
            metadata=metadata,
        )


_LOADERS: tuple[DocumentLoader, ...] = (TextLoader(), HTMLLoader(), PDFLoader(), DOCXLoader())


def get_loader(path: Path) -> DocumentLoader:
    """Pick the loader for ``path`` by extension.

    Raises:
        ValueError: If no loader supports the extension.
    """
    for loader in _LOADERS:
        if loader.can_handle(path):
            return loader
    supported = sorted(ext for loader in _LOADERS for ext in loader.supported_extensions)
    raise ValueError(
        f"No loader available for '{path.suffix}'. Supported formats: {', '.join(supported)}"
    )


def load_document(path: str | Path) -> LoadedDocument:
    """Load any supported policy file."""
    path = Path(path)
    return get_loader(path).load(path)
