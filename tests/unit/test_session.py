import pytest

from preferences import SETTINGS_KEY
from session import progress_key


def test_position_changes_are_persisted(make_session, store):
    session = make_session(["a", "b", "c", "d", "e"])

    session.jump(3)
    assert store.get(progress_key("book1")) == {"currentIndex": 3, "bookmarks": []}

    session.toggle_bookmark()
    assert store.get(progress_key("book1")) == {"currentIndex": 3, "bookmarks": [3]}


def test_restore_progress_clamps_and_filters(make_session, store):
    store.set(progress_key("book1"), {"currentIndex": 99, "bookmarks": [1, 50, "x", 2, 1, True]})
    session = make_session([f"w{i}" for i in range(10)])

    session.restore_progress()

    assert session.position == 9
    assert session.navigation.bookmarks == [1, 2]


@pytest.mark.parametrize(
    "record",
    ["not a dict", {"currentIndex": "5"}, {"currentIndex": None, "bookmarks": "1,2"}, [3]],
)
def test_restore_progress_falls_back_on_malformed_records(make_session, store, record):
    store.set(progress_key("book1"), record)
    session = make_session(["a", "b", "c"])

    session.restore_progress()

    assert session.position == 0
    assert session.navigation.bookmarks == []


def test_frame_exposes_display_fragments(make_session):
    session = make_session(["The", "quick", "brown", "fox."], chapters=[0, 2], wpm=600)
    session.jump_to(3)

    frame = session.frame()

    assert (frame.left, frame.center, frame.right) == ("f", "o", "x.")
    assert frame.index == 3
    assert frame.length == 4
    assert frame.progress_percent == 75
    assert frame.minutes_remaining == 0
    assert frame.chapter == "Chapter 2"
    assert [entry.percent for entry in frame.toc] == [0, 50]
    assert frame.playing is False


def test_minutes_remaining(make_session):
    session = make_session(["w"] * 1200, wpm=300)

    assert session.frame().minutes_remaining == 4
    session.set_rate(0)
    assert session.frame().minutes_remaining is None


def test_adjust_rate_clamps(make_session):
    session = make_session(["a"], wpm=995)

    assert session.adjust_rate(10) == 1000
    session.set_rate(5)
    assert session.adjust_rate(-10) == 0


def test_preference_changes_are_persisted(make_session, store):
    session = make_session(["a", "b"])

    session.set_rate(450)
    session.toggle_alt_mode()
    session.set_font_size(80)

    assert store.get(SETTINGS_KEY) == {"wpm": 450, "fontSize": 80, "altReadingMode": True}


def test_jump_to_bookmark_clamps_stale_index(make_session):
    session = make_session(["a", "b", "c", "d", "e"])

    assert session.jump_to_bookmark(40) == 4


def test_jump_to_chapter(make_session):
    session = make_session(["a", "b", "c", "d", "e", "f"], chapters=[0, 4])

    assert session.jump_to_chapter(2) == 4
    assert session.jump_to_chapter(1) == 0
    with pytest.raises(IndexError):
        session.jump_to_chapter(3)


def test_context_applies_minimum_line_width(make_session):
    tokens = ["alpha", "beta", "gamma", "delta", "epsilon", "zeta"]
    session = make_session(tokens)
    session.jump_to(5)

    window = session.context(5)

    assert [(line.text, line.distance) for line in window.before] == [
        ("alpha beta gamma", 2),
        ("delta epsilon", 1),
    ]
    assert window.after == []


def test_toggle_play_and_close(make_session, timers):
    session = make_session(["a", "b", "c"])

    assert session.toggle_play() is True
    assert session.toggle_play() is False
    session.toggle_play()
    session.close()

    assert not session.is_playing
    assert timers.pending == []


def test_step_bookmark_moves_to_nearest_mark(make_session):
    session = make_session([f"w{i}" for i in range(20)])
    marks = [3, 8, 15]
    for index in marks:
        session.toggle_bookmark(index)
    session.jump_to(8)

    assert session.step_bookmark(1) == 15
    assert session.step_bookmark(1) is None
    assert session.position == 15
    assert session.step_bookmark(-1) == 8
    assert session.step_bookmark(-1) == 3
    assert session.step_bookmark(-1) is None


def test_set_font_size_clamps_to_supported_range(make_session, store):
    session = make_session(["a"])

    assert session.set_font_size(200) == 128
    assert session.set_font_size(4) == 24
    assert store.get(SETTINGS_KEY)["fontSize"] == 24
