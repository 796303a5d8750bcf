import json
import sys
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pf9_upload.core.config import Settings

API_BASE = "https://api.test"
SIGNED_URL = "https://bucket.test/cust1/object?X-Amz-Signature=secret-signature"

Responder = Callable[[httpx.Request], httpx.Response]


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode())


class FakeUploadApi:
    """Routes identity, presign and PUT calls to swappable responders."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.bodies: list[bytes] = []
        self.whoami: Responder = lambda request: json_response(
            {"allowed_prefix": "cust1", "bucket": "b1", "customer_id": "c1"}
        )
        self.presign: Responder = lambda request: json_response({"url": SIGNED_URL})
        self.put: Responder = lambda request: httpx.Response(200)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(request.read())
        if request.method == "GET" and request.url.path == "/whoami":
            return self.whoami(request)
        if request.method == "POST" and request.url.path == "/presign":
            return self.presign(request)
        if request.method == "PUT":
            return self.put(request)
        return httpx.Response(404, json={"message": "Not Found"})

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def scratch_dir(tmp_path) -> Path:
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def settings(scratch_dir) -> Settings:
    return Settings(api_base=API_BASE, scratch_dir=scratch_dir, max_file_bytes=1024)


@pytest.fixture
def api() -> FakeUploadApi:
    return FakeUploadApi()


@pytest.fixture
def client(api):
    with httpx.Client(transport=httpx.MockTransport(api)) as client:
        yield client


@pytest.fixture
def report_file(tmp_path) -> Path:
    path = tmp_path / "report.log"
    path.write_bytes(b"0123456789")
    return path
