# tests/test_resolver.py
import pytest

from abbrev_completer.core.resolver import (
    CompletionCandidate,
    Span,
    completion_prefix,
    extract_prefix,
    line_prefix,
    resolve_completions,
    utf16_len,
)


def test_no_trigger_gives_nothing(keymap):
    assert resolve_completions(keymap, "Gl-", 0, 3) == []


def test_bare_trigger_gives_nothing(keymap):
    assert resolve_completions(keymap, "x \\", 0, 3) == []


def test_unknown_abbreviation_gives_nothing(keymap):
    assert resolve_completions(keymap, "\\zz", 0, 3) == []


def test_span_starts_at_trigger():
    # trigger at column 5, prefix "Gl-" (3), cursor at 9
    from abbrev_completer.core.keymap import Keymap

    km = Keymap.build({"G": {"l": {"-": {">>": ["ƛ"]}}}})
    out = resolve_completions(km, "hello\\Gl-", 0, 9)
    assert out == [CompletionCandidate("Gl- ƛ", "ƛ", Span(0, 5, 9))]


def test_exact_and_longer_completions(keymap):
    out = resolve_completions(keymap, "\\Gl", 0, 3)
    assert [c.replacement_text for c in out] == ["λ", "ƛ"]
    assert [c.display_label for c in out] == ["Gl λ", "Gl ƛ"]
    assert all(c.replacement_span == Span(0, 0, 3) for c in out)


def test_last_trigger_on_line_wins(keymap):
    out = resolve_completions(keymap, "\\to x \\Ga", 0, 9)
    assert [c.replacement_text for c in out] == ["α"]
    assert out[0].replacement_span == Span(0, 6, 9)


def test_text_after_cursor_is_ignored(keymap):
    out = resolve_completions(keymap, "\\to and more", 0, 3)
    assert [c.replacement_text for c in out] == ["→"]


def test_later_line(keymap):
    text = "first line\nsecond \\=="
    out = resolve_completions(keymap, text, 1, 10)
    assert [c.replacement_text for c in out] == ["≡"]
    assert out[0].replacement_span == Span(1, 7, 10)


def test_crlf_line_endings(keymap):
    text = "a\r\n\\to\r\nb"
    out = resolve_completions(keymap, text, 1, 3)
    assert [c.replacement_text for c in out] == ["→"]


@pytest.mark.parametrize(
    "line, character",
    [(5, 0), (0, 99), (-1, 0), (0, -1)],
)
def test_out_of_range_positions_give_nothing(keymap, line, character):
    assert resolve_completions(keymap, "\\to", line, character) == []


def test_columns_are_utf16_units(keymap):
    # "𝑥" takes two UTF-16 units, so the trigger sits at column 3
    line = "𝑥 \\to"
    assert utf16_len(line) == 6
    out = resolve_completions(keymap, line, 0, 6)
    assert [c.replacement_text for c in out] == ["→"]
    assert out[0].replacement_span == Span(0, 3, 6)


def test_astral_prefix_length_counts_both_units():
    from abbrev_completer.core.keymap import Keymap

    km = Keymap.build({"𝑥": {">>": ["x"]}})
    out = resolve_completions(km, "\\𝑥", 0, 3)
    assert out[0].replacement_span == Span(0, 0, 3)


def test_line_prefix_cuts_at_cursor():
    assert line_prefix("abc\ndef", 1, 2) == "de"
    assert line_prefix("abc", 0, 3) == "abc"
    assert line_prefix("abc", 0, 0) == ""
    assert line_prefix("", 0, 0) == ""


def test_line_prefix_rejects_split_surrogate_pair():
    assert line_prefix("𝑥ab", 0, 1) is None
    assert line_prefix("𝑥ab", 0, 2) == "𝑥"


def test_extract_prefix():
    assert extract_prefix("a \\b \\cd") == "cd"
    assert extract_prefix("no trigger") is None
    assert extract_prefix("ends with \\") is None
    assert extract_prefix("a;b", trigger=";") == "b"


def test_completion_prefix():
    assert completion_prefix("x \\Gl", 0, 5) == "Gl"
    assert completion_prefix("x \\Gl", 0, 3) is None
    assert completion_prefix("x \\Gl", 3, 0) is None


def test_custom_trigger(keymap):
    out = resolve_completions(keymap, "x ;to", 0, 5, trigger=";")
    assert [c.replacement_text for c in out] == ["→"]
    assert out[0].replacement_span == Span(0, 2, 5)
