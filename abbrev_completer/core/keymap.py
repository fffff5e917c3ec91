# keymap.py
# Prefix tree (trie) mapping typed abbreviations to their expansions.
# Built once from a nested JSON document, read-only afterwards.

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)

DEFAULT_MARKER = ">>"


class KeymapError(Exception):
    """Raised when the keymap document is missing or not a JSON object."""


class TrieNode:
    """
    A single node in the keymap.
    terminal_values: expansions registered exactly at this prefix
    children: char -> TrieNode
    """

    __slots__ = ("terminal_values", "children")

    def __init__(self) -> None:
        self.terminal_values: List[str] = []
        self.children: Dict[str, TrieNode] = {}


class Keymap:
    """
    Trie of abbreviations, used by the completion resolver for:
     - expansions registered at the typed prefix ("finish now")
     - every expansion reachable by typing further ("keep typing")
    """

    def __init__(self, root: TrieNode | None = None, marker: str = DEFAULT_MARKER) -> None:
        self._root = root or TrieNode()
        self.marker = marker

    # construction -----------------------------------------------------
    @classmethod
    def build(cls, config: Any, marker: str = DEFAULT_MARKER) -> "Keymap":
        """
        Build a keymap from a nested mapping.

        The marker key holds a list of expansions for the current prefix.
        Any other key branches on its first character only; the rest of
        the key is ignored. Subtrees that are not objects become empty nodes.
        """
        return cls(_build_node(config, marker), marker=marker)

    # search/traversal ---------------------------------------------------------
    def lookup(self, prefix: str) -> List[str]:
        """
        Return the expansions at `prefix` followed by every expansion
        below it, in traversal order. No match returns [].
        """
        node = self._root
        for ch in prefix:
            nxt = node.children.get(ch)
            if nxt is None:
                return []
            node = nxt

        out: List[str] = list(node.terminal_values)
        _flatten(node.children, out)
        return out

    # convenience/debugging -----------------------------------------------------
    def size(self) -> int:
        """Count every expansion in the keymap."""
        return len(self.lookup(""))

    def __contains__(self, prefix: str) -> bool:
        """True if `prefix` has at least one expansion registered exactly there."""
        node = self._root
        for ch in prefix:
            node = node.children.get(ch)
            if node is None:
                return False
        return bool(node.terminal_values)


def _build_node(value: Any, marker: str) -> TrieNode:
    node = TrieNode()
    if not isinstance(value, dict):
        return node

    syms = value.get(marker)
    if isinstance(syms, list):
        node.terminal_values.extend(s for s in syms if isinstance(s, str))

    for key, sub in value.items():
        if key == marker or not key:
            continue
        # only the first character branches; last sibling wins
        node.children[key[0]] = _build_node(sub, marker)
    return node


def _flatten(children: Dict[str, TrieNode], out: List[str]) -> None:
    """DFS collecting expansions under a set of children."""
    for child in children.values():
        out.extend(child.terminal_values)
        _flatten(child.children, out)


def load_keymap(path: Union[str, Path], marker: str = DEFAULT_MARKER) -> Keymap:
    """
    Read a keymap JSON file and build it.
    Raises KeymapError if the file can't be read, isn't valid JSON,
    or its top level isn't an object.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise KeymapError(f"cannot read keymap {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise KeymapError(f"invalid keymap JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise KeymapError(
            f"keymap {path} must be a JSON object, got {type(data).__name__}"
        )

    keymap = Keymap.build(data, marker=marker)
    logger.info("loaded keymap %s (%d expansions)", path, keymap.size())
    return keymap
