from __future__ import annotations

import os

import httpx
from loguru import logger
from pydantic import ValidationError

from src.application.dtos.profile_dto import UserRecordIn, UserRecordOut


class UsersApiError(RuntimeError):
    """Any failed call to the Users API: transport, status or payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _timeout_from_env() -> float | None:
    raw = os.getenv("USERS_API_TIMEOUT")
    return float(raw) if raw else None


class UsersApiClient:
    """Async client for the external Users API that stores profile records.

    The transport can be swapped (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("USERS_API_BASE_URL", "http://localhost:3000")).rstrip("/")
        self.timeout = timeout if timeout is not None else _timeout_from_env()
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    async def fetch_profile(self, wallet_address: str) -> UserRecordIn | None:
        """Read the record for a wallet. ``None`` means no record yet."""
        try:
            async with self._client() as client:
                response = await client.get("/api/users", params={"wallet": wallet_address})
        except httpx.HTTPError as exc:
            raise UsersApiError(f"Users API request failed: {exc}") from exc

        if not response.is_success:
            raise UsersApiError(
                f"Users API returned {response.status_code} for wallet lookup",
                status_code=response.status_code,
            )
        if not response.content.strip():
            return None
        try:
            data = response.json()
        except ValueError as exc:
            raise UsersApiError(f"Users API returned malformed JSON: {exc}") from exc
        if not data:
            return None
        if not isinstance(data, dict):
            raise UsersApiError(f"Unexpected Users API payload type: {type(data).__name__}")
        try:
            return UserRecordIn.model_validate(data)
        except ValidationError as exc:
            raise UsersApiError(f"Users API returned an invalid record: {exc}") from exc

    async def save_profile(self, body: UserRecordOut) -> None:
        """Create or update the record. The response body is not inspected."""
        try:
            async with self._client() as client:
                response = await client.post("/api/users", json=body.to_wire())
        except httpx.HTTPError as exc:
            raise UsersApiError(f"Users API request failed: {exc}") from exc

        if not response.is_success:
            raise UsersApiError(
                f"Users API rejected profile save with {response.status_code}",
                status_code=response.status_code,
            )
        logger.debug(f"Users API stored profile for wallet {body.wallet}")
