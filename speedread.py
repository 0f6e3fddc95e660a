#!/usr/bin/env python3
"""
speedread - RSVP speed reader for the terminal.

Supported input formats: EPUB, Markdown (.md), plain text (.txt)

Words are flashed one at a time with the optimal recognition point (ORP)
highlighted, pausing longer on punctuation. Position and bookmarks are saved
per book, so the next run picks up where you stopped.

Quick start:
  1. python speedread.py book.epub --dry-run
  2. python speedread.py book.epub --wpm 350
  3. python speedread.py book.epub --chapter 3 --alt
"""

import argparse
import logging
import shutil
import sys
import threading
from pathlib import Path

from dotenv import load_dotenv

ORP_COLUMN = 20
HIGHLIGHT = "\033[1;31m"
RESET = "\033[0m"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Speed-read EPUB, Markdown and text files one word at a time",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Dry run - list chapters and word counts, no playback:
  python speedread.py book.epub --dry-run

  # Read at 450 words per minute:
  python speedread.py notes.md --wpm 450

  # Start at chapter 2, ignoring saved progress:
  python speedread.py book.epub --chapter 2 --no-resume

  # Alternate mode with surrounding context lines:
  python speedread.py book.epub --alt --line-chars 60

  # Bookmark word 1200, then later come back to the first bookmark:
  python speedread.py book.epub --start 1200 --bookmark --dry-run
  python speedread.py book.epub --goto-bookmark 1

Keys during playback:
  space       play / pause
  left/right  back / forward one word (shift: 10, ctrl: 50; also h/l, H/L, [/])
  up/down     rate +/- 10 WPM (also k/j)
  b           toggle bookmark on the current word
  n / p       next / previous bookmark
  a           toggle alternate (context) mode
  q, Esc      stop and save
        """,
    )
    parser.add_argument("input_path", type=Path, help="Path to EPUB, Markdown (.md) or text (.txt) file")
    parser.add_argument(
        "--wpm", type=int, default=None, metavar="N",
        help="Reading rate in words per minute (default: saved preference or SPEEDREAD_WPM)",
    )
    parser.add_argument(
        "--start", type=int, default=None, metavar="INDEX",
        help="Start at this word index",
    )
    parser.add_argument(
        "--chapter", type=int, default=None, metavar="N",
        help="Start at the beginning of chapter N (1-based)",
    )
    parser.add_argument(
        "--alt", action="store_true", default=None,
        help="Alternate reading mode: show context lines around the current word",
    )
    parser.add_argument(
        "--line-chars", type=int, default=None, metavar="N",
        help="Context line width in characters (default: terminal width)",
    )
    parser.add_argument(
        "--bookmark", action="store_true",
        help="Toggle a bookmark at the starting word",
    )
    parser.add_argument(
        "--goto-bookmark", type=int, default=None, metavar="N",
        help="Start at bookmark N from the bookmark list (1-based)",
    )
    parser.add_argument(
        "--font-size", type=int, default=None, metavar="PX",
        help="Save the display font size (24-128) shared with other readers of the store",
    )
    parser.add_argument(
        "--store", type=Path, default=None, metavar="FILE",
        help="Progress/preferences file (default: SPEEDREAD_STORE or ./speedread_store.json)",
    )
    parser.add_argument(
        "--no-resume", action="store_true", default=False,
        help="Ignore saved position and start from the beginning",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Parse input and list chapters without playing",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def print_chapter_list(session) -> None:
    meta = session.metadata
    frame = session.frame()
    print(f"Title:  {meta.title}")
    print(f"Author: {meta.author}")
    print(f"Format: {meta.source_format}")
    print(f"Cover:  {'yes' if meta.cover else 'no'}")
    print(f"\nFound {len(frame.toc)} chapters:")
    print("-" * 70)
    starts = [entry.index for entry in frame.toc] + [frame.length]
    for n, entry in enumerate(frame.toc, start=1):
        words = max(0, starts[n] - entry.index)
        print(f"  {n:2d}. {entry.label[:44]:<44} {entry.percent:>3d}%  {words:>7} words")
    print("-" * 70)
    minutes = frame.minutes_remaining
    remaining = f"~{minutes} min left at {frame.wpm} WPM" if minutes is not None else "paused (0 WPM)"
    print(f"  Total: {frame.length:,} words | at word {frame.index:,} ({frame.progress_percent}%) | {remaining}")
    if frame.bookmarks:
        marks = ", ".join(f"[{n}] word {b:,}" for n, b in enumerate(frame.bookmarks, start=1))
        print(f"  Bookmarks: {marks}")
    print()


def render_word(frame) -> str:
    pad = " " * max(0, ORP_COLUMN - len(frame.left))
    return f"{pad}{frame.left}{HIGHLIGHT}{frame.center}{RESET}{frame.right}"


def render_status(frame) -> str:
    minutes = frame.minutes_remaining
    left = f"{minutes} min left" if minutes is not None else "paused"
    return f"[{frame.progress_percent:3d}%  {frame.wpm} WPM  {left}]"


def render(session, line_chars: int) -> None:
    frame = session.frame()
    if not frame.alt_reading_mode:
        line = f"{render_word(frame)}    {render_status(frame)}"
        sys.stdout.write("\r\033[K" + line)
        sys.stdout.flush()
        return

    window = session.context(line_chars)
    lines = [f"\033[2m{ctx.text}{RESET}" for ctx in window.before]
    lines.append(render_word(frame))
    lines.extend(f"\033[2m{ctx.text}{RESET}" for ctx in window.after)
    lines.append(render_status(frame))
    sys.stdout.write("\033[H\033[J" + "\n".join(lines) + "\n")
    sys.stdout.flush()


def main(argv=None):
    args = parse_args(argv)
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Import lazily to keep --help fast
    from controls import KEY_HELP, KeyReader, handle_key
    from parsers import EmptyContentError
    from preferences import get_store_path
    from session import open_book
    from storage import JsonStore

    if not args.input_path.exists():
        print(f"ERROR: File not found: {args.input_path}")
        sys.exit(1)

    store = JsonStore(args.store or get_store_path())
    finished = threading.Event()
    line_chars = args.line_chars or shutil.get_terminal_size().columns

    print(f"Opening: {args.input_path}")
    try:
        session = open_book(
            args.input_path,
            store,
            resume=not args.no_resume,
            show_progress=True,
            on_tick=lambda _step: render(session, line_chars),
            on_stop=finished.set,
        )
    except EmptyContentError as e:
        print(f"ERROR: {e}")
        print("The book was not opened; saved progress is unchanged.")
        sys.exit(1)
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    if args.wpm is not None:
        session.set_rate(args.wpm)
    if args.font_size is not None:
        session.set_font_size(args.font_size)
    if args.alt is not None and args.alt != session.preferences.alt_reading_mode:
        session.toggle_alt_mode()
    if args.chapter is not None:
        try:
            session.jump_to_chapter(args.chapter)
        except IndexError as e:
            print(f"ERROR: {e}")
            sys.exit(1)
    if args.goto_bookmark is not None:
        marks = session.navigation.bookmarks
        if not 1 <= args.goto_bookmark <= len(marks):
            print(f"ERROR: Bookmark {args.goto_bookmark} out of range (book has {len(marks)} bookmarks)")
            sys.exit(1)
        session.jump_to_bookmark(marks[args.goto_bookmark - 1])
    if args.start is not None:
        session.jump_to(args.start)
    if args.bookmark:
        marked = session.toggle_bookmark()
        print(f"{'Added' if marked else 'Removed'} bookmark at word {session.position:,}")

    print_chapter_list(session)

    if args.dry_run:
        print("Dry run complete.")
        return

    try:
        with KeyReader() as keys:
            if session.wpm <= 0 and not keys.interactive:
                print("Rate is 0 WPM; nothing to play. Use --wpm to set a rate.")
                return
            if keys.interactive:
                print(KEY_HELP)
            render(session, line_chars)
            session.play()
            while not finished.is_set():
                key = keys.read(0.2)
                if key is None:
                    continue
                if not handle_key(session, key):
                    break
                render(session, line_chars)
        print("\n\nEnd of book." if finished.is_set() else "\n\nStopped.")
    except KeyboardInterrupt:
        print("\n\nPaused.")
    finally:
        session.close()

    frame = session.frame()
    print(f"Saved position: word {frame.index:,} of {frame.length:,} ({frame.progress_percent}%)")


if __name__ == "__main__":
    main()
