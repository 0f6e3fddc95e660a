"""parsers/base.py - Shared parser utilities and types."""

from dataclasses import dataclass, field
from pathlib import Path

from models import BookMetadata, Chapter

UNKNOWN_AUTHOR = "Unknown Author"


class EmptyContentError(ValueError):
    """Extraction produced no readable tokens."""


@dataclass
class ExtractResult:
    """Standard return type for all parsers."""
    tokens: tuple[str, ...]
    chapters: list[Chapter] = field(default_factory=list)
    metadata: BookMetadata | None = None


def title_from_path(file_path: Path) -> str:
    """'the_inimitable-jeeves.epub' -> 'The Inimitable Jeeves'."""
    return Path(file_path).stem.replace("_", " ").replace("-", " ").strip().title()


def require_tokens(tokens: list[str], source: Path | str) -> tuple[str, ...]:
    if not tokens:
        raise EmptyContentError(f"No readable text found in {source}")
    return tuple(tokens)
