import json
import os
import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'src' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("WALLET_AUTH_DISABLED", "1")
os.environ.setdefault("LOG_LEVEL", "WARNING")

WALLET = "0xABC123"


class FakeUsersApi:
    """In-memory stand-in for the Users API behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.records: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.get_status = 200
        self.post_status = 200
        self.get_body: bytes | None = None
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if request.method == "GET":
            if self.get_status != 200:
                return httpx.Response(self.get_status, json={"error": "nope"})
            if self.get_body is not None:
                return httpx.Response(200, content=self.get_body)
            record = self.records.get(request.url.params.get("wallet"))
            return httpx.Response(200, content=json.dumps(record).encode(), headers={"content-type": "application/json"})
        if self.post_status != 200:
            return httpx.Response(self.post_status, json={"error": "nope"})
        body = json.loads(request.content)
        self.records[body["wallet"]] = body
        return httpx.Response(200, json=body)

    @property
    def reads(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    @property
    def writes(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    def client(self):
        from src.infrastructure.users_api.users_client import UsersApiClient

        return UsersApiClient("http://users.test", transport=httpx.MockTransport(self.handler))


@pytest.fixture()
def users_api() -> FakeUsersApi:
    return FakeUsersApi()


@pytest.fixture()
def client(users_api: FakeUsersApi) -> TestClient:
    # lazy import after env configured
    from src.infrastructure.api.dependencies import get_users_api
    from src.main import create_app

    app = create_app()
    app.dependency_overrides[get_users_api] = users_api.client
    return TestClient(app)


@pytest.fixture()
def auth_header() -> dict[str, str]:
    # any token is accepted in disabled mode
    return {"Authorization": "Bearer test-token", "X-Wallet-Address": WALLET}


@pytest.fixture()
def full_record() -> dict[str, str]:
    return {
        "nombre": "Ana",
        "apellido": "García",
        "email": "ana@example.com",
        "telefono": "+34 600 000 000",
        "lugarResidencia": "Madrid",
        "fechaNacimiento": "1990-05-14T00:00:00.000Z",
        "wallet": WALLET,
        "owner": WALLET,
    }
