from __future__ import annotations

from typing import Annotated

from fastapi import Cookie, Depends, Header, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.domain.entities.profile import IdentityContext
from src.infrastructure.auth.wallet_auth import WalletAuthAdapter
from src.infrastructure.users_api.users_client import UsersApiClient

_bearer_scheme = HTTPBearer(auto_error=False)


def get_wallet_auth() -> WalletAuthAdapter:
    return WalletAuthAdapter()


def get_users_api() -> UsersApiClient:
    return UsersApiClient()


async def get_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
    wallet_token: Annotated[str | None, Cookie()] = None,
    x_wallet_address: Annotated[str | None, Header()] = None,
    auth: Annotated[WalletAuthAdapter, Depends(get_wallet_auth)] = None,
) -> IdentityContext:
    """Identity of the visitor; unauthenticated when no token is sent."""
    token = None
    if credentials and credentials.scheme and credentials.scheme.lower() == "bearer":
        token = credentials.credentials
    token = token or wallet_token
    try:
        return await auth.resolve(token, x_wallet_address)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))
