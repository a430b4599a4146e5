import json
import socket
import threading
from collections.abc import Iterator
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlparse

import pytest


class EchoHandler(BaseHTTPRequestHandler):
    """Answers every verb with a json description of the request.

    ``/status/<code>`` answers with that status, ``/redirect/<n>`` redirects
    ``n`` more times before echoing, ``/truncated/<code>`` cuts its body short.
    """

    def log_message(self, format: str, *args: object) -> None:
        pass

    def reply(
        self, code: int, body: bytes, content_type: str = "application/json"
    ) -> None:
        self.send_response(code)
        self.send_header("Content-type", content_type)
        self.send_header("Content-length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def echo(self) -> None:
        length = int(self.headers.get("Content-length") or 0)
        body = self.rfile.read(length).decode("utf-8")
        url = urlparse(self.path)
        parts = url.path.strip("/").split("/")

        match parts:
            case ["status", code]:
                return self.reply(int(code), b"not found", "text/plain")
            case ["truncated", code]:
                # promise more bytes than are sent, then close
                self.send_response(int(code))
                self.send_header("Content-length", "100")
                self.end_headers()
                self.wfile.write(b"short")
                self.close_connection = True
                return
            case ["redirect", hops] if int(hops) > 0:
                self.send_response(302)
                self.send_header("Location", f"/redirect/{int(hops) - 1}")
                self.send_header("Content-length", "0")
                self.end_headers()
                return

        payload = {
            "method": self.command,
            "path": url.path,
            "query": url.query,
            "body": body,
            "headers": {k.lower(): v for k, v in self.headers.items()},
        }
        self.reply(200, json.dumps(payload).encode("utf-8"))

    do_GET = do_POST = do_PUT = do_DELETE = do_OPTIONS = echo  # noqa: N815


@pytest.fixture(autouse=True)
def no_proxy(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.upper(), raising=False)


@pytest.fixture
def echo_server() -> Iterator[str]:
    server = ThreadingHTTPServer(("127.0.0.1", 0), EchoHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join()


@pytest.fixture
def closed_port() -> str:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"
