# documents.py
"""
DocumentStore - open documents keyed by URI, whole-text sync.

One lock per URI serialises writers to the same document; edits to
different documents never wait on each other. Texts are immutable str
objects swapped whole, so a reader sees either the old or the new text.
"""

from __future__ import annotations
import logging
import threading
from typing import Dict, Iterator, Optional

logger = logging.getLogger(__name__)


class DocumentStore:
    def __init__(self) -> None:
        self._docs: Dict[str, str] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, uri: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(uri)
            if lock is None:
                lock = self._locks[uri] = threading.Lock()
            return lock

    def open(self, uri: str, text: str) -> None:
        with self._lock_for(uri):
            self._docs[uri] = text
        logger.debug("opened %s (%d chars)", uri, len(text))

    def replace(self, uri: str, text: str) -> None:
        """Swap in the full new text (also registers unknown URIs)."""
        with self._lock_for(uri):
            self._docs[uri] = text
        logger.debug("replaced %s (%d chars)", uri, len(text))

    def close(self, uri: str) -> None:
        with self._lock_for(uri):
            self._docs.pop(uri, None)
        # the lock stays: dropping it could let a reopen race a second lock in.
        # _locks grows by one small entry per distinct URI seen this session.
        logger.debug("closed %s", uri)

    def get(self, uri: str) -> Optional[str]:
        return self._docs.get(uri)

    def __contains__(self, uri: str) -> bool:
        return uri in self._docs

    def __len__(self) -> int:
        return len(self._docs)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._docs))
