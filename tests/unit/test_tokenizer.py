from tokenizer import collapse_whitespace, normalize_words, strip_markdown


def test_normalize_words_collapses_whitespace_and_keeps_punctuation():
    text = "  Hello,   world!\n\tNew\r\nline.  "

    assert normalize_words(text) == ["Hello,", "world!", "New", "line."]


def test_normalize_words_makes_dashes_their_own_tokens():
    assert normalize_words("It was—a dark night") == ["It", "was", "—", "a", "dark", "night"]
    assert normalize_words("pages 10–12") == ["pages", "10", "–", "12"]
    assert normalize_words("end —  start") == ["end", "—", "start"]
    assert normalize_words("мир—война") == ["мир", "—", "война"]


def test_normalize_words_keeps_punctuation_only_tokens():
    text = "Hello ... world -- ! ? — “ ”"

    assert normalize_words(text) == ["Hello", "...", "world", "--", "!", "?", "—", "“", "”"]


def test_normalize_words_keeps_non_ascii_words():
    assert normalize_words("Война и мир") == ["Война", "и", "мир"]
    assert normalize_words("Ὅμηρος, ἔπεα.") == ["Ὅμηρος,", "ἔπεα."]
    assert normalize_words("吾輩は 猫である") == ["吾輩は", "猫である"]


def test_normalize_words_keeps_mixed_fragments():
    assert normalize_words("well--known (a) 3.14 #1") == ["well--known", "(a)", "3.14", "#1"]


def test_normalize_words_empty_for_blank_text():
    assert normalize_words("") == []
    assert normalize_words("   \n\t ") == []


def test_normalize_words_is_stable_under_retokenization():
    text = (
        "“Well,” said Jeeves—quite gravely—“I fancy, sir, that the ‘thing’ is done.”\n\n"
        "Chapter 2 … begins–here; (really) [1] don't stop--now!"
    )
    tokens = normalize_words(text)

    assert tokens == normalize_words(text)
    assert normalize_words(" ".join(tokens)) == tokens
    assert all(token and " " not in token for token in tokens)
    assert tokens.count("—") == 2


def test_strip_markdown_removes_block_markup():
    text = (
        "# Title\n\n"
        "Some `code` and [link text](http://example.com) here.\n\n"
        "![alt text](cover.png)\n"
        "- item one\n"
        "1. first\n"
        "> quoted\n\n"
        "---\n"
        "```\nblock of code\n```\n"
        "end"
    )

    tokens = normalize_words(strip_markdown(text))

    assert tokens == ["Title", "Some", "and", "link", "text", "here.", "item", "one", "first", "quoted", "end"]


def test_strip_markdown_never_fuses_adjacent_words():
    assert normalize_words(strip_markdown("foo`x`bar")) == ["foo", "bar"]
    assert normalize_words(strip_markdown("left![img](a.png)right")) == ["left", "right"]


def test_collapse_whitespace():
    assert collapse_whitespace("\n a \t b\n\n") == "a b"
