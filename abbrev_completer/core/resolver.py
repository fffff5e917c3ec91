# resolver.py
"""
Completion resolver - turns a cursor position into positioned expansions.

Columns follow the editor protocol and count UTF-16 code units, so a line
with astral characters (emoji, math alphanumerics) before the trigger still
gets the right replacement span.

Flow:
 - line_prefix(): cut the cursor line at the cursor
 - extract_prefix(): text typed after the last trigger character
 - build_candidates(): query the keymap, build CompletionCandidates
 - resolve_completions(): all of the above in one call
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from abbrev_completer.core.keymap import Keymap

logger = logging.getLogger(__name__)

DEFAULT_TRIGGER = "\\"

# line terminators recognised by the editor protocol
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Span:
    """Range on a single line, columns in UTF-16 code units (end exclusive)."""

    line: int
    start: int
    end: int


@dataclass(frozen=True)
class CompletionCandidate:
    display_label: str
    replacement_text: str
    replacement_span: Span


def utf16_len(text: str) -> int:
    """Length of `text` in UTF-16 code units."""
    return sum(2 if ord(ch) > 0xFFFF else 1 for ch in text)


def line_prefix(text: str, line: int, character: int) -> Optional[str]:
    """
    Return the part of line `line` before UTF-16 column `character`.
    None if the line or column is outside the document.
    A column that splits a surrogate pair is also None.
    """
    if line < 0 or character < 0:
        return None
    lines = _LINE_BREAK.split(text)
    if line >= len(lines):
        return None

    row = lines[line]
    units = 0
    for idx, ch in enumerate(row):
        width = 2 if ord(ch) > 0xFFFF else 1
        if units + width > character:
            return row[:idx] if units == character else None
        units += width
    if character > units:
        return None
    return row


def extract_prefix(line_text: str, trigger: str = DEFAULT_TRIGGER) -> Optional[str]:
    """Text after the last trigger character, or None if absent or empty."""
    _, sep, prefix = line_text.rpartition(trigger)
    if not sep or not prefix:
        return None
    return prefix


def completion_prefix(
    text: str, line: int, character: int, trigger: str = DEFAULT_TRIGGER
) -> Optional[str]:
    """The abbreviation being typed at the cursor, or None."""
    head = line_prefix(text, line, character)
    if head is None:
        return None
    return extract_prefix(head, trigger)


def build_candidates(
    keymap: Keymap,
    prefix: str,
    line: int,
    character: int,
    trigger: str = DEFAULT_TRIGGER,
) -> List[CompletionCandidate]:
    """One candidate per expansion of `prefix`, each replacing trigger+prefix."""
    logger.info("Completion for %s", prefix)
    start = character - utf16_len(prefix) - utf16_len(trigger)
    span = Span(line, start, character)
    return [
        CompletionCandidate(f"{prefix} {s}", s, span) for s in keymap.lookup(prefix)
    ]


def resolve_completions(
    keymap: Keymap,
    text: str,
    line: int,
    character: int,
    trigger: str = DEFAULT_TRIGGER,
) -> List[CompletionCandidate]:
    """
    Completions for the cursor at (line, character) in `text`.
    Every "nothing to offer" case returns [].
    """
    prefix = completion_prefix(text, line, character, trigger)
    if prefix is None:
        return []
    return build_candidates(keymap, prefix, line, character, trigger)
