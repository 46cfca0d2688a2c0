"""Built-in handlers for the document-sync and completion methods."""

from __future__ import annotations

from collections.abc import Callable

from pathy_server.completion import CompletionCandidate, CompletionEngine, CompletionRequest
from pathy_server.documents import DocumentStore, TextChange, index_to_utf16, utf16_to_index
from pathy_server.handlers.registry import MethodDispatchError, MethodHandler, MethodRegistry

COMPLETION_KIND_FILE = 17
COMPLETION_KIND_FOLDER = 19
TRIGGER_KIND_INVOKED = 1


def register_builtin_handlers(
    registry: MethodRegistry,
    documents: DocumentStore,
    engine: CompletionEngine,
    initialize: Callable[[dict[str, object]], dict[str, object]],
    reload_config: Callable[[object], None],
    status: Callable[[], dict[str, object]],
    shutdown: Callable[[], None],
    exit_server: Callable[[], None],
) -> None:
    """Register the lifecycle, sync and completion methods."""
    registry.register("initialize", initialize)
    registry.register("initialized", lambda _: None, notification=True)
    registry.register("textDocument/didOpen", _did_open_handler(documents), notification=True)
    registry.register(
        "textDocument/didChange", _did_change_handler(documents), notification=True
    )
    registry.register("textDocument/didClose", _did_close_handler(documents), notification=True)
    registry.register(
        "workspace/didChangeConfiguration",
        _did_change_configuration_handler(reload_config),
        notification=True,
    )
    registry.register("textDocument/completion", _completion_handler(documents, engine))
    registry.register("pathy/status", lambda _: status())
    registry.register("shutdown", _no_result(shutdown))
    registry.register("exit", _no_result(exit_server), notification=True)


def _did_open_handler(documents: DocumentStore) -> MethodHandler:
    def handler(params: dict[str, object]) -> None:
        item = _text_document(params)
        text = item.get("text")
        if not isinstance(text, str):
            raise MethodDispatchError(
                code="INVALID_PARAMS", message="textDocument.text must be a string."
            )
        version = item.get("version")
        language_id = item.get("languageId")
        documents.open(
            uri=_uri(item),
            text=text,
            version=version if isinstance(version, int) else 0,
            language_id=language_id if isinstance(language_id, str) else None,
        )

    return handler


def _did_change_handler(documents: DocumentStore) -> MethodHandler:
    def handler(params: dict[str, object]) -> None:
        item = _text_document(params)
        raw_changes = params.get("contentChanges")
        if not isinstance(raw_changes, list):
            raise MethodDispatchError(
                code="INVALID_PARAMS", message="contentChanges must be a list."
            )
        version = item.get("version")
        documents.change(
            uri=_uri(item),
            version=version if isinstance(version, int) else None,
            changes=[_text_change(raw) for raw in raw_changes],
        )

    return handler


def _did_close_handler(documents: DocumentStore) -> MethodHandler:
    def handler(params: dict[str, object]) -> None:
        documents.close(_uri(_text_document(params)))

    return handler


def _did_change_configuration_handler(reload_config: Callable[[object], None]) -> MethodHandler:
    def handler(params: dict[str, object]) -> None:
        reload_config(params.get("settings"))

    return handler


def _completion_handler(documents: DocumentStore, engine: CompletionEngine) -> MethodHandler:
    def handler(params: dict[str, object]) -> dict[str, object]:
        uri = _uri(_text_document(params))
        line_number, character = _position(params.get("position"), "position")
        empty: dict[str, object] = {"isIncomplete": False, "items": []}
        document = documents.get(uri)
        if document is None:
            return empty
        line = document.line(line_number)
        if line is None:
            return empty
        column = utf16_to_index(line, character)
        if column is None:
            return empty
        context = params.get("context")
        manual = isinstance(context, dict) and context.get("triggerKind") == TRIGGER_KIND_INVOKED
        candidates = engine.complete(
            CompletionRequest(uri=uri, line=line_number, column=column, manual=manual)
        )
        return {
            "isIncomplete": False,
            "items": [
                _completion_item(candidate, line, rank)
                for rank, candidate in enumerate(candidates)
            ],
        }

    return handler


def _completion_item(candidate: CompletionCandidate, line: str, rank: int) -> dict[str, object]:
    span = candidate.replacement_range
    return {
        "label": candidate.label,
        "kind": COMPLETION_KIND_FOLDER if candidate.is_directory else COMPLETION_KIND_FILE,
        "detail": candidate.detail,
        "sortText": f"{rank:05d}",
        "filterText": candidate.label,
        "textEdit": {
            "range": {
                "start": {"line": span.line, "character": index_to_utf16(line, span.start)},
                "end": {"line": span.line, "character": index_to_utf16(line, span.end)},
            },
            "newText": candidate.insert_text,
        },
    }


def _no_result(action: Callable[[], None]) -> MethodHandler:
    def handler(_: dict[str, object]) -> None:
        action()

    return handler


def _text_document(params: dict[str, object]) -> dict[str, object]:
    item = params.get("textDocument")
    if not isinstance(item, dict):
        raise MethodDispatchError(code="INVALID_PARAMS", message="textDocument must be an object.")
    return item


def _uri(item: dict[str, object]) -> str:
    uri = item.get("uri")
    if not isinstance(uri, str) or not uri:
        raise MethodDispatchError(
            code="INVALID_PARAMS", message="textDocument.uri must be a non-empty string."
        )
    return uri


def _position(value: object, name: str) -> tuple[int, int]:
    if not isinstance(value, dict):
        raise MethodDispatchError(code="INVALID_PARAMS", message=f"{name} must be an object.")
    line = value.get("line")
    character = value.get("character")
    if not isinstance(line, int) or not isinstance(character, int) or line < 0 or character < 0:
        raise MethodDispatchError(
            code="INVALID_PARAMS",
            message=f"{name}.line and {name}.character must be non-negative integers.",
        )
    return line, character


def _text_change(raw: object) -> TextChange:
    if not isinstance(raw, dict) or not isinstance(raw.get("text"), str):
        raise MethodDispatchError(
            code="INVALID_PARAMS", message="Each content change needs a string 'text'."
        )
    text = raw["text"]
    span = raw.get("range")
    if span is None:
        return TextChange(text=text)
    if not isinstance(span, dict):
        raise MethodDispatchError(code="INVALID_PARAMS", message="range must be an object.")
    return TextChange(
        text=text,
        start=_position(span.get("start"), "range.start"),
        end=_position(span.get("end"), "range.end"),
    )
