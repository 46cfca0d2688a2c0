from __future__ import annotations

import io

from pathy_server.server import StdioServer, create_server


def _server() -> StdioServer:
    return create_server(log_stream=io.StringIO())


def test_malformed_json_returns_invalid_json_error() -> None:
    response = _server().handle_json_line("{not-json")

    assert response is not None
    assert response["ok"] is False
    assert response["error"] == {"code": "INVALID_JSON", "message": "Request must be valid JSON."}
    assert str(response["id"]).startswith("req-")


def test_unknown_method_returns_explicit_error() -> None:
    response = _server().handle_payload({"id": "abc-123", "method": "textDocument/hover"})

    assert response == {
        "id": "abc-123",
        "ok": False,
        "result": None,
        "error": {"code": "METHOD_NOT_FOUND", "message": "Unknown method: textDocument/hover"},
    }


def test_unknown_notification_is_silent() -> None:
    assert _server().handle_payload({"method": "$/cancelRequest", "params": {"id": 1}}) is None


def test_non_object_payload_and_params_are_rejected() -> None:
    server = _server()

    not_object = server.handle_payload(["initialize"])
    bad_params = server.handle_payload({"id": 3, "method": "initialize", "params": []})
    no_method = server.handle_payload({"id": 4})

    assert not_object is not None and not_object["error"]["code"] == "INVALID_REQUEST"
    assert bad_params is not None and bad_params["error"]["code"] == "INVALID_PARAMS"
    assert bad_params["id"] == 3
    assert no_method is not None and no_method["error"]["code"] == "INVALID_REQUEST"


def test_invalid_completion_params_return_invalid_params() -> None:
    response = _server().handle_payload(
        {
            "id": 9,
            "method": "textDocument/completion",
            "params": {"textDocument": {"uri": "file:///x.py"}, "position": {"line": -1}},
        }
    )

    assert response is not None
    assert response["error"]["code"] == "INVALID_PARAMS"


def test_boolean_request_id_is_replaced() -> None:
    response = _server().handle_payload({"id": True, "method": "pathy/status"})

    assert response is not None
    assert response["ok"] is True
    assert response["id"] == "req-000001"


def test_notification_sent_with_id_is_rejected() -> None:
    response = _server().handle_payload(
        {"id": 5, "method": "textDocument/didClose", "params": {"textDocument": {"uri": "x"}}}
    )

    assert response is not None
    assert response["error"]["code"] == "INVALID_REQUEST"


def test_requests_after_shutdown_are_rejected() -> None:
    server = _server()

    shutdown = server.handle_payload({"id": 1, "method": "shutdown"})
    status = server.handle_payload({"id": 2, "method": "pathy/status"})
    server.handle_payload({"method": "exit"})

    assert shutdown is not None and shutdown["ok"] is True
    assert status is not None
    assert status["error"] == {"code": "INVALID_REQUEST", "message": "Server is shutting down."}
    assert server.exit_requested is True
