"""parsers/ - Multi-format document parser package."""

from pathlib import Path

from parsers.base import EmptyContentError, ExtractResult

SUPPORTED_EXTENSIONS = {".epub", ".txt", ".md", ".markdown"}

__all__ = ["EmptyContentError", "ExtractResult", "SUPPORTED_EXTENSIONS", "parse_file"]


def parse_file(file_path: Path, show_progress: bool = False) -> ExtractResult:
    """Dispatch to the appropriate parser based on file extension."""
    file_path = Path(file_path)
    suffix = file_path.suffix.lower()

    if suffix == ".epub":
        from parsers.epub_parser import parse_epub
        return parse_epub(file_path, show_progress=show_progress)
    elif suffix in (".txt", ".md", ".markdown"):
        from parsers.text_parser import parse_text
        return parse_text(file_path)
    else:
        raise ValueError(
            f"Unsupported file format: '{suffix}'. "
            f"Supported: {', '.join(sorted(SUPPORTED_EXTENSIONS))}"
        )
