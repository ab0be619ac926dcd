"""
Test Configuration and Fixtures
"""
import json
import socket
import threading
from contextlib import contextmanager
from unittest.mock import Mock

import pytest
import requests

from script_extraction_service import ClientSettings, DocumentExtractionClient

TEST_API_KEY = "sk-test-1234567890abcdef"
TEST_BASE_URL = "https://api.askyourpdf.test"


def make_response(status_code=200, payload=None, text=None):
    """Build a real requests.Response carrying the given JSON payload or raw text."""
    response = requests.Response()
    response.status_code = status_code
    if text is None:
        text = json.dumps(payload)
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def settings():
    return ClientSettings(api_key=TEST_API_KEY, base_url=TEST_BASE_URL)


@pytest.fixture
def session():
    """Mocked transport; tests set post.return_value or post.side_effect."""
    return Mock(spec=requests.Session)


@pytest.fixture
def client(settings, session):
    return DocumentExtractionClient(settings, session=session)


@pytest.fixture
def unconfigured_client(session):
    return DocumentExtractionClient(ClientSettings(api_key="", base_url=TEST_BASE_URL), session=session)


@contextmanager
def local_server(handler):
    """Serve one connection on 127.0.0.1 with `handler(conn, stop)` and yield the base URL."""
    listener = socket.create_server(("127.0.0.1", 0))
    stop = threading.Event()

    def run():
        try:
            conn, _ = listener.accept()
        except OSError:
            return
        with conn:
            try:
                handler(conn, stop)
            except OSError:
                pass  # client hung up

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{listener.getsockname()[1]}"
    finally:
        stop.set()
        listener.close()
        thread.join(timeout=2)


def never_reply(conn, stop):
    conn.recv(65536)
    stop.wait(5)


def trickle_upload_response(conn, stop):
    """Send headers at once, then the body one byte every 0.15s."""
    conn.recv(65536)
    body = json.dumps({"docId": "abc123"}).encode("utf-8")
    conn.sendall(
        b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n\r\n".encode("ascii")
    )
    for byte in body:
        if stop.wait(0.15):
            return
        conn.sendall(bytes([byte]))


def live_client(base_url, timeout):
    """Client on a real session that ignores proxy settings from the environment."""
    session = requests.Session()
    session.trust_env = False
    return DocumentExtractionClient(
        ClientSettings(api_key=TEST_API_KEY, base_url=base_url, timeout=timeout),
        session=session
    )


@pytest.fixture
def stalled_service():
    with local_server(never_reply) as base_url:
        yield base_url


@pytest.fixture
def trickling_service():
    with local_server(trickle_upload_response) as base_url:
        yield base_url


def reply_upload_at_once(conn, stop):
    conn.recv(65536)
    body = json.dumps({"docId": "abc123"}).encode("utf-8")
    conn.sendall(
        b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\nConnection: close\r\n\r\n".encode("ascii")
        + body
    )
