"""
Language server glue.

Keeps a whole-text copy of every open document and answers completion
requests by looking up the abbreviation typed after the trigger character.
The keymap is loaded before serving starts and never changes afterwards.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from lsprotocol.types import (
    INITIALIZED,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    CompletionItem,
    CompletionItemKind,
    CompletionOptions,
    CompletionParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    InitializedParams,
    LogMessageParams,
    MessageType,
    Position,
    Range,
    TextDocumentSyncKind,
    TextEdit,
)
from pygls.lsp.server import LanguageServer

from abbrev_completer import __version__
from abbrev_completer.core.documents import DocumentStore
from abbrev_completer.core.keymap import Keymap
from abbrev_completer.core.resolver import (
    DEFAULT_TRIGGER,
    CompletionCandidate,
    build_candidates,
    completion_prefix,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "abbrev-completer"

# every printable ASCII character; the mnemonic alphabet comes from the keymap
TRIGGER_CHARACTERS = [chr(c) for c in range(ord("!"), ord("~") + 1)]


class AbbrevLanguageServer(LanguageServer):
    def __init__(self, *args, keymap: Optional[Keymap] = None, trigger: str = DEFAULT_TRIGGER, **kwargs):
        kwargs.setdefault("text_document_sync_kind", TextDocumentSyncKind.Full)
        super().__init__(*args, **kwargs)
        self.keymap = keymap or Keymap()
        self.trigger = trigger
        self.documents = DocumentStore()

    def configure(self, keymap: Keymap, trigger: str = DEFAULT_TRIGGER) -> None:
        """Install the keymap; call before serving starts."""
        self.keymap = keymap
        self.trigger = trigger

    def log_to_client(self, message: str, kind: MessageType = MessageType.Info) -> None:
        self.window_log_message(LogMessageParams(type=kind, message=message))


server = AbbrevLanguageServer(SERVER_NAME, __version__)


@server.feature(INITIALIZED)
def initialized(ls: AbbrevLanguageServer, params: InitializedParams) -> None:
    logger.info("client initialized; keymap has %d expansions", ls.keymap.size())
    ls.log_to_client(f"{SERVER_NAME} server initialized!")


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: AbbrevLanguageServer, params: DidOpenTextDocumentParams) -> None:
    ls.documents.open(params.text_document.uri, params.text_document.text)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: AbbrevLanguageServer, params: DidChangeTextDocumentParams) -> None:
    if not params.content_changes:
        return
    # full sync: the first change carries the whole new text
    ls.documents.replace(params.text_document.uri, params.content_changes[0].text)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: AbbrevLanguageServer, params: DidCloseTextDocumentParams) -> None:
    ls.documents.close(params.text_document.uri)


@server.feature(
    TEXT_DOCUMENT_COMPLETION,
    CompletionOptions(trigger_characters=TRIGGER_CHARACTERS),
)
def completions(
    ls: AbbrevLanguageServer, params: CompletionParams
) -> Optional[List[CompletionItem]]:
    text = ls.documents.get(params.text_document.uri)
    if text is None:
        return None

    pos = params.position
    prefix = completion_prefix(text, pos.line, pos.character, ls.trigger)
    if prefix is None:
        return None

    candidates = build_candidates(ls.keymap, prefix, pos.line, pos.character, ls.trigger)
    ls.log_to_client(f"Completion for {prefix}")
    return [to_completion_item(c) for c in candidates]


def to_completion_item(candidate: CompletionCandidate) -> CompletionItem:
    span = candidate.replacement_span
    return CompletionItem(
        label=candidate.display_label,
        kind=CompletionItemKind.Text,
        text_edit=TextEdit(
            range=Range(
                start=Position(line=span.line, character=span.start),
                end=Position(line=span.line, character=span.end),
            ),
            new_text=candidate.replacement_text,
        ),
    )


def start(keymap: Keymap, trigger: str = DEFAULT_TRIGGER, tcp: Optional[tuple] = None) -> None:
    """Serve over stdio, or TCP when `tcp` is a (host, port) pair."""
    server.configure(keymap, trigger)
    if tcp:
        host, port = tcp
        logger.info("serving on %s:%d", host, port)
        server.start_tcp(host, port)
    else:
        logger.info("serving on stdio")
        server.start_io()
