import json

import preferences
from preferences import SETTINGS_KEY, Preferences, load_preferences, save_preferences
from storage import JsonStore, MemoryStore


def test_json_store_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "store.json"

    store = JsonStore(path)
    store.set("speedreader-progress-abc", {"currentIndex": 7, "bookmarks": [1, 3]})

    reloaded = JsonStore(path)
    assert reloaded.get("speedreader-progress-abc") == {"currentIndex": 7, "bookmarks": [1, 3]}
    assert reloaded.keys() == ["speedreader-progress-abc"]


def test_json_store_remove(tmp_path):
    path = tmp_path / "store.json"
    store = JsonStore(path)
    store.set("a", 1)
    store.set("b", 2)

    store.remove("a")
    store.remove("missing")

    assert json.loads(path.read_text(encoding="utf-8")) == {"b": 2}


def test_json_store_treats_malformed_file_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not valid json", encoding="utf-8")

    assert JsonStore(path).get("anything", "fallback") == "fallback"

    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert JsonStore(path).keys() == []


def test_load_preferences_defaults_when_missing(monkeypatch):
    monkeypatch.delenv("SPEEDREAD_WPM", raising=False)

    assert load_preferences(MemoryStore()) == Preferences()


def test_load_preferences_merges_and_ignores_bad_fields(monkeypatch):
    monkeypatch.delenv("SPEEDREAD_WPM", raising=False)
    store = MemoryStore({SETTINGS_KEY: {"wpm": "fast", "fontSize": 80, "altReadingMode": "yes"}})

    prefs = load_preferences(store)

    assert prefs.wpm == preferences.DEFAULT_WPM
    assert prefs.font_size == 80
    assert prefs.alt_reading_mode is False


def test_load_preferences_clamps_rate_and_accepts_zero(monkeypatch):
    monkeypatch.delenv("SPEEDREAD_WPM", raising=False)

    assert load_preferences(MemoryStore({SETTINGS_KEY: {"wpm": 5000}})).wpm == preferences.MAX_WPM
    assert load_preferences(MemoryStore({SETTINGS_KEY: {"wpm": 0}})).wpm == 0
    assert load_preferences(MemoryStore({SETTINGS_KEY: "garbage"})) == Preferences()


def test_default_wpm_from_environment(monkeypatch):
    monkeypatch.setenv("SPEEDREAD_WPM", " 420 ")
    assert load_preferences(MemoryStore()).wpm == 420

    monkeypatch.setenv("SPEEDREAD_WPM", "abc")
    assert preferences.get_default_wpm() == preferences.DEFAULT_WPM


def test_store_path_from_environment(monkeypatch, tmp_path):
    monkeypatch.delenv("SPEEDREAD_STORE", raising=False)
    assert preferences.get_store_path() == preferences.DEFAULT_STORE_PATH

    monkeypatch.setenv("SPEEDREAD_STORE", str(tmp_path / "custom.json"))
    assert preferences.get_store_path() == tmp_path / "custom.json"


def test_save_preferences_keeps_unrelated_keys():
    store = MemoryStore({SETTINGS_KEY: {"darkMode": True, "wpm": 100}})

    save_preferences(store, Preferences(wpm=450, font_size=72, alt_reading_mode=True))

    assert store.get(SETTINGS_KEY) == {
        "darkMode": True,
        "wpm": 450,
        "fontSize": 72,
        "altReadingMode": True,
    }
