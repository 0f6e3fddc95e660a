"""models.py - Shared data types for speedread."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Chapter:
    label: str       # TOC label, e.g. "Chapter I: Jeeves Exerts the Old Cerebellum"
    index: int       # Index of the chapter's first token


@dataclass(frozen=True)
class NavEntry:
    """One node of an EPUB navigation tree."""
    label: str
    href: str
    subitems: tuple["NavEntry", ...] = ()


@dataclass
class BookMetadata:
    title: str
    author: str
    cover: bytes | None = field(default=None, repr=False)
    source_format: str = ""         # "epub", "markdown", "text"


@dataclass(frozen=True)
class DecomposedToken:
    leading: str
    core: str
    trailing: str


@dataclass(frozen=True)
class ContextLine:
    text: str
    distance: int    # 1 = nearest to the current token


@dataclass(frozen=True)
class TocEntry:
    label: str
    index: int
    percent: int
