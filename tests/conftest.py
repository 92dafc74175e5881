import os
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

# Keep the app module from creating a database file on import
os.environ.setdefault("DB_URL", "sqlite://")

RESTRICTED_TOKEN = "Zm9vOmJhcg=="


class MockHandler(BaseHTTPRequestHandler):
    """Serves the fixed routes the tests rely on and records every request."""

    def log_message(self, format, *args):
        pass

    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        self.server.requests.append({
            "method": self.command,
            "path": self.path,
            "headers": {k.lower(): v for k, v in self.headers.items()},
            "body": body,
        })

        path = self.path.split("?", 1)[0]
        if path == "/meta_200.txt":
            self._reply(200, b"1.0.0", [("Content-Type", "text/plain"), ("X-Custom-Header", "Custom")])
        elif path == "/meta_404.txt":
            self._reply(404, b"not found", [("Content-Type", "text/plain")])
        elif path == "/restricted/meta_200.txt":
            if self.headers.get("Authorization") == RESTRICTED_TOKEN:
                self._reply(200, b"1.0.0", [("Content-Type", "text/plain")])
            else:
                self._reply(403, b"forbidden", [("Content-Type", "text/plain")])
        elif path == "/utf-8/meta_200.txt":
            self._reply(200, b"1.0.0", [("Content-Type", "application/json; charset=UTF-8")])
        elif path == "/utf-16/meta_200.txt":
            self._reply(200, "1.0.0".encode("utf-16"), [("Content-Type", "application/json; charset=UTF-16")])
        elif path == "/binary":
            self._reply(200, b"\x89PNG\r\n\x1a\n", [("Content-Type", "application/octet-stream")])
        elif path == "/no-content-type":
            self._reply(200, b"1.0.0", [])
        elif path == "/repeated":
            self._reply(200, b"ok", [("Content-Type", "text/plain"), ("X-Multi", "one"), ("X-Multi", "two")])
        elif path == "/echo":
            self._reply(200, body, [("Content-Type", "text/plain; charset=utf-8")])
        elif path == "/truncated":
            self.send_response(200)
            self.send_header("Content-Type", "text/plain")
            self.send_header("Content-Length", "100")
            self.end_headers()
            self.wfile.write(b"1.0.0")
        elif path == "/slow":
            time.sleep(1)
            self._reply(200, b"1.0.0", [("Content-Type", "text/plain")])
        elif path == "/delete":
            self._reply(204, b"", [])
        else:
            self._reply(404, b"no such route", [("Content-Type", "text/plain")])

    def _reply(self, status, body, headers):
        self.send_response(status)
        for name, value in headers:
            self.send_header(name, value)
        if status != 204:
            self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if body and self.command != "HEAD":
            self.wfile.write(body)

    do_GET = do_POST = do_PUT = do_PATCH = do_DELETE = _handle
    do_HEAD = do_OPTIONS = do_TRACE = _handle


class MockServer:
    def __init__(self):
        self.httpd = ThreadingHTTPServer(("127.0.0.1", 0), MockHandler)
        self.httpd.requests = []
        self.url = f"http://127.0.0.1:{self.httpd.server_address[1]}"
        self.thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)

    @property
    def requests(self):
        return self.httpd.requests

    def start(self):
        self.thread.start()

    def stop(self):
        self.httpd.shutdown()
        self.httpd.server_close()


@pytest.fixture
def http_server():
    server = MockServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def client():
    """FastAPI TestClient bound to a private in-memory database."""
    from fastapi.testclient import TestClient
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool

    from httpaction import app as app_module
    from httpaction.db import init_db

    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app_module.app.dependency_overrides[app_module.get_db] = override_get_db
    with TestClient(app_module.app) as test_client:
        yield test_client
    app_module.app.dependency_overrides.clear()
