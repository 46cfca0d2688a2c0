"""STDIO completion server entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from pathy_server import __version__
from pathy_server.completion import CompletionEngine
from pathy_server.config import ConfigStore, load_effective_config
from pathy_server.documents import DocumentStore, root_from_initialize
from pathy_server.handlers import MethodDispatchError, MethodRegistry, register_builtin_handlers
from pathy_server.logging import LOG_LEVELS, DiagnosticLogger, sanitize_params

SERVER_NAME = "pathy-server"
TRIGGER_CHARACTERS = ["/", ".", "~", "\\", '"', "'"]


@dataclass(slots=True, frozen=True)
class Request:
    """Normalized incoming request; ``request_id`` is None for notifications."""

    request_id: str | int | None
    method: str
    params: dict[str, object]


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for server startup configuration."""
    parser = argparse.ArgumentParser(prog=SERVER_NAME)
    parser.add_argument("--workspace-root", required=False, default=None)
    parser.add_argument("--log-level", choices=LOG_LEVELS, required=False, default="warning")
    parser.add_argument("--log-file", required=False, default=None)
    return parser


class StdioServer:
    """Deterministic JSON-lines server routing document and completion methods."""

    def __init__(
        self,
        logger: DiagnosticLogger,
        workspace_root: Path | None = None,
    ) -> None:
        self._logger = logger
        self._default_root = workspace_root
        self._documents = DocumentStore(logger=logger)
        self._config_store = ConfigStore(load_effective_config(workspace_root, None, logger))
        self._engine = CompletionEngine(
            documents=self._documents,
            config_store=self._config_store,
            logger=logger,
            workspace_root=workspace_root,
        )
        self._client_settings: object = None
        self._shutdown_requested = False
        self._exit_requested = False
        self._fallback_request_counter = 0
        self._registry = MethodRegistry()
        register_builtin_handlers(
            self._registry,
            documents=self._documents,
            engine=self._engine,
            initialize=self._initialize,
            reload_config=self.reload_config,
            status=self._status,
            shutdown=self._request_shutdown,
            exit_server=self._request_exit,
        )

    @property
    def engine(self) -> CompletionEngine:
        """Return the completion engine."""
        return self._engine

    @property
    def exit_requested(self) -> bool:
        """Return True once the client sent ``exit``."""
        return self._exit_requested

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        """Process JSON-line requests until EOF or ``exit``."""
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            response = self.handle_json_line(line)
            if response is not None:
                out_stream.write(f"{json.dumps(response, sort_keys=True)}\n")
                out_stream.flush()
            if self._exit_requested:
                break

    def handle_json_line(self, raw_line: str) -> dict[str, object] | None:
        """Handle a single JSON-line message."""
        try:
            payload = json.loads(raw_line)
        except json.JSONDecodeError:
            return self.error_response(
                request_id=self.next_request_id(),
                code="INVALID_JSON",
                message="Request must be valid JSON.",
            )
        return self.handle_payload(payload)

    def handle_payload(self, payload: object) -> dict[str, object] | None:
        """Validate and dispatch a parsed payload; notifications return None."""
        parsed = self.parse_request(payload)
        if isinstance(parsed, dict):
            return parsed
        request = parsed
        if self._logger.enabled_for("debug"):
            self._logger.debug(
                "request",
                "Dispatching message.",
                method=request.method,
                params=sanitize_params(request.params),
            )
        if self._shutdown_requested and request.method != "exit":
            if request.request_id is None:
                return None
            return self.error_response(
                request.request_id, "INVALID_REQUEST", "Server is shutting down."
            )
        try:
            result = self._registry.dispatch(
                name=request.method,
                params=request.params,
                expects_response=request.request_id is not None,
            )
        except MethodDispatchError as error:
            if request.request_id is None:
                self._logger.debug(
                    "notification_rejected", error.message, method=request.method
                )
                return None
            return self.error_response(request.request_id, error.code, error.message)
        except Exception as error:
            self._logger.error(
                "internal_error",
                "Unhandled server error while executing method.",
                method=request.method,
                error=type(error).__name__,
                detail=str(error),
            )
            if request.request_id is None:
                return None
            return self.error_response(
                request.request_id,
                "INTERNAL_ERROR",
                "Unhandled server error while executing method.",
            )
        if request.request_id is None:
            return None
        return self.success_response(request.request_id, result)

    def parse_request(self, payload: object) -> Request | dict[str, object]:
        """Validate request payload and return normalized Request."""
        if not isinstance(payload, dict):
            return self.error_response(
                request_id=self.next_request_id(),
                code="INVALID_REQUEST",
                message="Request must be an object.",
            )
        request_id = self.extract_request_id(payload)
        method = payload.get("method")
        params = payload.get("params", {})
        if params is None:
            params = {}

        if not isinstance(method, str) or not method:
            return self.error_response(
                request_id=request_id if request_id is not None else self.next_request_id(),
                code="INVALID_REQUEST",
                message="Request method must be a non-empty string.",
            )
        if not isinstance(params, dict):
            return self.error_response(
                request_id=request_id if request_id is not None else self.next_request_id(),
                code="INVALID_PARAMS",
                message="Request params must be an object.",
            )
        return Request(request_id=request_id, method=method, params=params)

    def extract_request_id(self, payload: dict[str, object]) -> str | int | None:
        """Return the request id, None for notifications, or a synthesized fallback."""
        if "id" not in payload:
            return None
        request_id = payload["id"]
        if isinstance(request_id, bool):
            return self.next_request_id()
        if isinstance(request_id, int) or (isinstance(request_id, str) and request_id):
            return request_id
        return self.next_request_id()

    def next_request_id(self) -> str:
        """Generate deterministic fallback request IDs for invalid ids."""
        self._fallback_request_counter += 1
        return f"req-{self._fallback_request_counter:06d}"

    @staticmethod
    def success_response(request_id: str | int, result: object) -> dict[str, object]:
        """Build success envelope."""
        return {"id": request_id, "ok": True, "result": result}

    @staticmethod
    def error_response(request_id: str | int, code: str, message: str) -> dict[str, object]:
        """Build explicit error envelope."""
        return {
            "id": request_id,
            "ok": False,
            "result": None,
            "error": {"code": code, "message": message},
        }

    def reload_config(self, client_settings: object) -> None:
        """Rebuild the config snapshot from pathy.toml plus client settings."""
        if client_settings is not None:
            self._client_settings = client_settings
        config = load_effective_config(
            self._engine.workspace_root, self._client_settings, self._logger
        )
        self._engine.apply_config(config)

    def _initialize(self, params: dict[str, object]) -> dict[str, object]:
        root = root_from_initialize(params) or self._default_root
        self._engine.workspace_root = root
        self.reload_config(params.get("initializationOptions"))
        self._logger.info(
            "initialized", "Server initialized.", workspace_root=str(root) if root else None
        )
        return {
            "capabilities": {
                "textDocumentSync": {"openClose": True, "change": 2},
                "completionProvider": {
                    "triggerCharacters": list(TRIGGER_CHARACTERS),
                    "resolveProvider": False,
                },
            },
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    def _status(self) -> dict[str, object]:
        root = self._engine.workspace_root
        return {
            "workspace_root": str(root) if root is not None else None,
            "open_documents": len(self._documents),
            "cached_directories": len(self._engine.cache),
            "shutdown_requested": self._shutdown_requested,
            "effective_config": self._config_store.current().to_public_dict(),
        }

    def _request_shutdown(self) -> None:
        self._shutdown_requested = True

    def _request_exit(self) -> None:
        self._exit_requested = True


def create_server(
    workspace_root: str | None = None,
    log_stream: TextIO | None = None,
    log_level: str = "warning",
) -> StdioServer:
    """Create a configured STDIO server instance."""
    logger = DiagnosticLogger(stream=log_stream, level=log_level)
    root = Path(workspace_root).absolute() if workspace_root is not None else None
    return StdioServer(logger=logger, workspace_root=root)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the completion server process."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.log_file is None:
        server = create_server(workspace_root=args.workspace_root, log_level=args.log_level)
        server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
        return 0
    with open(args.log_file, "a", encoding="utf-8") as log_stream:
        server = create_server(
            workspace_root=args.workspace_root, log_stream=log_stream, log_level=args.log_level
        )
        server.serve(in_stream=sys.stdin, out_stream=sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
