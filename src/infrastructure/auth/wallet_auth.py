from __future__ import annotations

import os

import httpx
from loguru import logger

from src.domain.entities.profile import IdentityContext


class WalletAuthAdapter:
    """Resolves the connected wallet identity from the wallet-auth provider.

    When WALLET_AUTH_DISABLED=1 any bearer token is accepted and the wallet
    address is taken from the ``X-Wallet-Address`` header.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.disabled = os.getenv("WALLET_AUTH_DISABLED", "0") == "1"
        self.verify_url = os.getenv("WALLET_AUTH_VERIFY_URL")
        self.transport = transport

    async def resolve(self, token: str | None, wallet_header: str | None = None) -> IdentityContext:
        if not token:
            return IdentityContext()
        if self.disabled:
            wallets = (wallet_header,) if wallet_header else ()
            return IdentityContext(authenticated=True, wallets=wallets)
        if not self.verify_url:
            raise ValueError("Wallet auth is enabled but WALLET_AUTH_VERIFY_URL is not set")

        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self.transport) as client:
                response = await client.get(self.verify_url, headers={"Authorization": f"Bearer {token}"})
        except httpx.HTTPError as exc:
            raise ValueError(f"Wallet auth provider unreachable: {exc}") from exc
        if response.status_code in (401, 403):
            raise ValueError("Invalid access token")
        if not response.is_success:
            raise ValueError(f"Wallet auth provider returned {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise ValueError("Invalid wallet auth response") from exc
        if not isinstance(payload, dict):
            raise ValueError("Invalid wallet auth response")
        wallets = payload.get("wallets") or []
        if not isinstance(wallets, list):
            raise ValueError("Invalid wallet auth response")
        addresses = tuple(w.get("address", "") if isinstance(w, dict) else str(w) for w in wallets)
        addresses = tuple(a for a in addresses if a)
        logger.debug(f"Resolved {len(addresses)} wallet(s) from auth provider")
        return IdentityContext(authenticated=True, wallets=addresses)
