"""
abbrev_completer.core

The completion engine, independent of the editor protocol.
Contains:
 - the abbreviation trie (Keymap) and its JSON loader
 - the completion resolver (trigger extraction, UTF-16 spans)
 - the open-document store
"""

from .keymap import Keymap, KeymapError, TrieNode, load_keymap
from .resolver import (
    CompletionCandidate,
    Span,
    build_candidates,
    completion_prefix,
    resolve_completions,
)
from .documents import DocumentStore

__all__ = [
    "Keymap",
    "KeymapError",
    "TrieNode",
    "load_keymap",
    "CompletionCandidate",
    "Span",
    "build_candidates",
    "completion_prefix",
    "resolve_completions",
    "DocumentStore",
]
