"""parsers/text_parser.py - Parse plain text and Markdown files into a token stream."""

import re
from pathlib import Path

from models import BookMetadata, Chapter
from parsers.base import UNKNOWN_AUTHOR, ExtractResult, require_tokens, title_from_path
from tokenizer import normalize_words, strip_markdown

MARKDOWN_EXTENSIONS = {".md", ".markdown"}
FRONT_MATTER_KEYS = ("title", "author")

_FRONT_MATTER = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def split_front_matter(content: str) -> tuple[dict[str, str], str]:
    """
    Separate a leading ``---`` block from a Markdown body.

    Only the ``title`` and ``author`` fields are read, and empty values are
    skipped so the caller's fallbacks apply. The block never reaches the
    token stream.
    """
    block = _FRONT_MATTER.match(content)
    if block is None:
        return {}, content
    fields = {}
    for line in block.group(1).splitlines():
        key, sep, value = line.partition(":")
        key = key.strip().lower()
        value = value.strip().strip("\"'")
        if sep and key in FRONT_MATTER_KEYS and value:
            fields[key] = value
    return fields, content[block.end():]


def extract_text(content: str) -> list[str]:
    """Raw text or Markdown -> tokens."""
    return normalize_words(strip_markdown(content))


def parse_text(file_path: Path) -> ExtractResult:
    """Parse a .txt or Markdown file as a single chapter starting at token 0."""
    file_path = Path(file_path)
    content = file_path.read_text(encoding="utf-8")

    is_markdown = file_path.suffix.lower() in MARKDOWN_EXTENSIONS
    frontmatter, body = split_front_matter(content) if is_markdown else ({}, content)

    title = frontmatter.get("title") or title_from_path(file_path)
    author = frontmatter.get("author") or UNKNOWN_AUTHOR

    tokens = require_tokens(extract_text(body), file_path)

    metadata = BookMetadata(
        title=title,
        author=author,
        cover=None,
        source_format="markdown" if is_markdown else "text",
    )
    return ExtractResult(tokens=tokens, chapters=[Chapter(label=title, index=0)], metadata=metadata)
