from __future__ import annotations

import io
import json
from pathlib import Path

from pathy_server.server import create_server


def _message(method: str, params: dict[str, object], request_id: int | None = None) -> str:
    payload: dict[str, object] = {"method": method, "params": params}
    if request_id is not None:
        payload["id"] = request_id
    return json.dumps(payload)


def test_stdio_server_session_roundtrip(tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()
    (tmp_path / "file.txt").write_text("x", encoding="utf-8")
    uri = (tmp_path / "main.py").as_uri()
    server = create_server(log_stream=io.StringIO())
    in_stream = io.StringIO(
        "\n".join(
            [
                _message(
                    "initialize",
                    {
                        "rootUri": tmp_path.as_uri(),
                        "initializationOptions": {"pathy": {"max_results": 10}},
                    },
                    request_id=1,
                ),
                _message("initialized", {}),
                _message(
                    "textDocument/didOpen",
                    {
                        "textDocument": {
                            "uri": uri,
                            "languageId": "python",
                            "version": 1,
                            "text": 'open("./")\n',
                        }
                    },
                ),
                _message(
                    "textDocument/completion",
                    {
                        "textDocument": {"uri": uri},
                        "position": {"line": 0, "character": 8},
                        "context": {"triggerKind": 2, "triggerCharacter": "/"},
                    },
                    request_id=2,
                ),
                _message("pathy/status", {}, request_id=3),
                _message("shutdown", {}, request_id=4),
                _message("exit", {}),
                _message("pathy/status", {}, request_id=5),
            ]
        )
        + "\n"
    )
    out_stream = io.StringIO()

    server.serve(in_stream=in_stream, out_stream=out_stream)
    responses = [json.loads(line) for line in out_stream.getvalue().splitlines() if line]

    assert [response["id"] for response in responses] == [1, 2, 3, 4]
    assert all(response["ok"] is True for response in responses)
    assert server.exit_requested is True

    capabilities = responses[0]["result"]["capabilities"]
    assert "/" in capabilities["completionProvider"]["triggerCharacters"]
    assert capabilities["textDocumentSync"] == {"openClose": True, "change": 2}
    assert responses[0]["result"]["serverInfo"]["name"] == "pathy-server"

    items = responses[1]["result"]["items"]
    assert responses[1]["result"]["isIncomplete"] is False
    assert [item["label"] for item in items] == ["sub", "file.txt"]
    assert [item["textEdit"]["newText"] for item in items] == ["sub/", "file.txt"]
    assert [item["kind"] for item in items] == [19, 17]
    assert [item["sortText"] for item in items] == ["00000", "00001"]
    assert items[0]["textEdit"]["range"] == {
        "start": {"line": 0, "character": 8},
        "end": {"line": 0, "character": 8},
    }

    status = responses[2]["result"]
    assert status["workspace_root"] == str(tmp_path)
    assert status["open_documents"] == 1
    assert status["cached_directories"] == 1
    assert status["effective_config"]["max_results"] == 10
    assert responses[3]["result"] is None


def test_notifications_produce_no_output() -> None:
    server = create_server(log_stream=io.StringIO())
    in_stream = io.StringIO(
        "\n".join(
            [
                _message("initialized", {}),
                _message(
                    "textDocument/didOpen",
                    {"textDocument": {"uri": "file:///x.py", "version": 1, "text": ""}},
                ),
                _message("textDocument/didClose", {"textDocument": {"uri": "file:///x.py"}}),
                "",
            ]
        )
        + "\n"
    )
    out_stream = io.StringIO()

    server.serve(in_stream=in_stream, out_stream=out_stream)

    assert out_stream.getvalue() == ""
