"""Shared fixtures: a scripted git runner and a local stand-in for the GitHub API."""

import itertools
import json
import socket
import threading
import time
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from linthawk_core.errors import GitError


def blame_line(sha: str, line: int, filename: str, content: str) -> str:
    """One record of `git blame --line-porcelain` output."""
    return (
        f"{sha} {line} {line} 1\n"
        "author Alice Mock\n"
        "author-mail <alice@example.com>\n"
        "author-time 1707762379\n"
        "author-tz +0100\n"
        "committer Alice Mock\n"
        "committer-mail <alice@example.com>\n"
        "committer-time 1707762379\n"
        "committer-tz +0100\n"
        "summary Mock commit title\n"
        f"filename {filename}\n"
        f"\t{content}\n"
    )


@pytest.fixture
def fake_git():
    """Build a CommandRunner that answers rev-parse and blame from fixed data.

    ``blames`` maps a path to ``(sha, line, content)`` tuples; paths listed in
    ``failing`` raise GitError when blamed.
    """

    def factory(blames=None, head="fake-commit-id", failing=()):
        blames = blames or {}
        calls = []

        def cmd(*args):
            calls.append(args)
            if args[0] == "rev-parse":
                if head is None:
                    raise GitError("fatal: not a git repository")
                return head.encode()
            if args[0] == "blame":
                path = args[-1]
                if path in failing:
                    raise GitError(f"fatal: no such path '{path}' in HEAD")
                return "".join(blame_line(sha, n, path, text) for sha, n, text in blames.get(path, [])).encode()
            return b""

        cmd.calls = calls
        return cmd

    return factory


@dataclass
class RecordedRequest:
    method: str
    path: str
    authorization: str | None
    body: dict | None


@dataclass
class FakeGithub:
    url: str = ""
    token: str | None = None
    status: int = 200
    response: dict = field(default_factory=lambda: {"id": 1, "state": "COMMENTED"})
    delay: float = 0.0
    requests: list[RecordedRequest] = field(default_factory=list)


class _ReviewHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        fake: FakeGithub = self.server.fake
        length = int(self.headers.get("Content-Length") or 0)
        raw = self.rfile.read(length) if length else b""
        auth = self.headers.get("Authorization")
        fake.requests.append(RecordedRequest("POST", self.path, auth, json.loads(raw) if raw else None))

        if fake.delay:
            time.sleep(fake.delay)

        status, payload = fake.status, fake.response
        if fake.token is not None and auth != f"Bearer {fake.token}":
            status, payload = 401, {"message": "Bad credentials"}

        data = json.dumps(payload).encode()
        try:
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(data)))
            self.end_headers()
            self.wfile.write(data)
        except (BrokenPipeError, ConnectionResetError):
            # The client gave up waiting, which is what the timeout tests want.
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def github_server(monkeypatch):
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")

    server = ThreadingHTTPServer(("127.0.0.1", 0), _ReviewHandler)
    server.daemon_threads = True
    server.fake = FakeGithub(url=f"http://127.0.0.1:{server.server_address[1]}")
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server.fake
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def blame_text():
    return blame_line


@pytest.fixture
def trickling_server():
    """A server that answers one byte every half second and never finishes."""
    stop = threading.Event()
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(("127.0.0.1", 0))
    listener.listen()
    listener.settimeout(0.2)

    def trickle(conn):
        with conn:
            conn.recv(65536)
            for byte in itertools.cycle(b"HTTP/1.1 200 OK\r\n"):
                if stop.wait(0.5):
                    return
                try:
                    conn.sendall(bytes([byte]))
                except OSError:
                    return

    def serve():
        while not stop.is_set():
            try:
                conn, _ = listener.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            threading.Thread(target=trickle, args=(conn,), daemon=True).start()

    threading.Thread(target=serve, daemon=True).start()
    try:
        yield f"http://127.0.0.1:{listener.getsockname()[1]}"
    finally:
        stop.set()
        listener.close()
