"""parsers/epub_parser.py - Parse EPUB spine sections into one token stream with chapter marks."""

import logging
from pathlib import Path
from typing import Iterable

import ebooklib
from bs4 import BeautifulSoup
from ebooklib import epub
from tqdm import tqdm

from models import BookMetadata, Chapter, NavEntry
from parsers.base import UNKNOWN_AUTHOR, ExtractResult, require_tokens, title_from_path
from tokenizer import collapse_whitespace, normalize_words

logger = logging.getLogger(__name__)

NON_CONTENT_TAGS = ["script", "style", "nav", "noscript", "header", "footer", "svg"]
NON_CONTENT_ROLES = {"doc-toc", "navigation"}
NON_CONTENT_EPUB_TYPES = {"toc", "landmarks"}


class EpubSection:
    """One spine document, loaded into a BeautifulSoup tree on demand."""

    def __init__(self, item):
        self.item = item
        self.href = item.get_name()
        self.soup: BeautifulSoup | None = None

    def load(self) -> BeautifulSoup:
        self.soup = BeautifulSoup(self.item.get_content(), features="lxml")
        return self.soup

    def unload(self) -> None:
        self.soup = None


class EpubBook:
    """Adapts an ebooklib book to the sections/navigation/metadata shape extraction expects."""

    def __init__(self, epub_path: Path):
        self.path = Path(epub_path)
        if not self.path.exists():
            raise FileNotFoundError(f"EPUB not found: {self.path}")
        try:
            self.book = epub.read_epub(str(self.path))
        except Exception as e:
            raise ValueError(f"Failed to read EPUB file {self.path}: {e}") from e
        self.sections = self._spine_sections()
        self.navigation = convert_toc(self.book.toc)

    def _spine_sections(self) -> list[EpubSection]:
        sections = []
        for idref, _linear in self.book.spine:
            item = self.book.get_item_with_id(idref)
            if item is None or item.get_type() != ebooklib.ITEM_DOCUMENT:
                continue
            sections.append(EpubSection(item))
        return sections

    def _dc(self, field: str) -> str | None:
        try:
            values = self.book.get_metadata("DC", field)
        except Exception as e:
            logger.warning("Error reading %s metadata: %s", field, e)
            return None
        if values and values[0][0]:
            return str(values[0][0]).strip() or None
        return None

    def metadata(self) -> BookMetadata:
        return BookMetadata(
            title=self._dc("title") or title_from_path(self.path),
            author=self._dc("creator") or UNKNOWN_AUTHOR,
            cover=self.cover_image(),
            source_format="epub",
        )

    def cover_image(self) -> bytes | None:
        """Cover bytes from the cover-image item, or the OPF <meta name="cover"> fallback."""
        try:
            for item in self.book.get_items_of_type(ebooklib.ITEM_COVER):
                return item.get_content()
            for _value, attrs in self.book.get_metadata("OPF", "cover"):
                item = self.book.get_item_with_id(attrs.get("content", ""))
                if item is not None:
                    return item.get_content()
        except Exception as e:
            logger.warning("Cover extraction failed for %s: %s", self.path.name, e)
        return None


def convert_toc(entries: Iterable) -> list[NavEntry]:
    """ebooklib TOC (Links and (Section, children) pairs) -> NavEntry tree."""
    result = []
    for entry in entries:
        if isinstance(entry, (tuple, list)):
            section, children = entry
            result.append(NavEntry(
                label=getattr(section, "title", "") or "",
                href=getattr(section, "href", "") or "",
                subitems=tuple(convert_toc(children)),
            ))
        else:
            result.append(NavEntry(label=entry.title or "", href=entry.href or ""))
    return result


def find_nav_entry(entries: Iterable[NavEntry], href: str) -> NavEntry | None:
    """Depth-first search for an entry whose href contains, or is contained in, href."""
    for entry in entries:
        if entry.href and (entry.href in href or href in entry.href):
            return entry
        found = find_nav_entry(entry.subitems, href)
        if found is not None:
            return found
    return None


def _is_non_content(tag) -> bool:
    if tag.get("role") in NON_CONTENT_ROLES:
        return True
    epub_type = tag.get("epub:type")
    if epub_type and NON_CONTENT_EPUB_TYPES.intersection(str(epub_type).split()):
        return True
    if tag.get("id") == "toc":
        return True
    return "toc" in (tag.get("class") or [])


def strip_non_content(soup: BeautifulSoup) -> None:
    """Remove scripts, styles, navigation landmarks, headers/footers, SVG and TOC blocks."""
    for tag in soup.find_all(NON_CONTENT_TAGS) + soup.find_all(_is_non_content):
        if not tag.decomposed:
            tag.decompose()


def section_text(soup: BeautifulSoup) -> str:
    strip_non_content(soup)
    root = soup.body or soup
    return collapse_whitespace(root.get_text(separator=" "))


def extract_epub(book, show_progress: bool = False) -> ExtractResult:
    """
    Walk the spine in order and build the token stream and chapter list.

    A chapter is recorded at the running token count before its section's
    tokens are appended. A section that fails to load or parse is logged and
    skipped; it never aborts the book.
    """
    tokens: list[str] = []
    chapters: list[Chapter] = []

    bar = tqdm(book.sections, desc="Extracting", unit="section", disable=not show_progress)
    for section in bar:
        match = find_nav_entry(book.navigation, section.href)
        if match is not None:
            chapters.append(Chapter(label=match.label, index=len(tokens)))
            if show_progress:
                bar.set_postfix_str(match.label[:30])

        try:
            soup = section.load()
            words = normalize_words(section_text(soup))
        except Exception as e:
            logger.warning("Skipping section %s: %s", section.href, e)
            continue
        finally:
            section.unload()
        tokens.extend(words)

    return ExtractResult(tokens=require_tokens(tokens, "EPUB"), chapters=chapters)


def parse_epub(epub_path: Path, show_progress: bool = False) -> ExtractResult:
    """Main entry point. Returns ExtractResult with tokens, chapters and metadata."""
    book = EpubBook(epub_path)
    result = extract_epub(book, show_progress=show_progress)
    result.metadata = book.metadata()
    return result
