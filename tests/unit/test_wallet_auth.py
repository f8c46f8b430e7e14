import httpx
import pytest

from src.infrastructure.auth.wallet_auth import WalletAuthAdapter


@pytest.mark.asyncio
async def test_no_token_is_unauthenticated():
    identity = await WalletAuthAdapter().resolve(None, "0xABC123")
    assert identity.authenticated is False
    assert identity.wallet_address is None


@pytest.mark.asyncio
async def test_disabled_mode_trusts_wallet_header(monkeypatch):
    monkeypatch.setenv("WALLET_AUTH_DISABLED", "1")
    identity = await WalletAuthAdapter().resolve("any-token", "0xABC123")
    assert identity.authenticated is True
    assert identity.wallet_address == "0xABC123"

    no_wallet = await WalletAuthAdapter().resolve("any-token", None)
    assert no_wallet.authenticated is True
    assert no_wallet.wallet_address is None


@pytest.mark.asyncio
async def test_provider_wallets_first_one_wins(monkeypatch):
    monkeypatch.setenv("WALLET_AUTH_DISABLED", "0")
    monkeypatch.setenv("WALLET_AUTH_VERIFY_URL", "http://auth.test/me")

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer tok"
        return httpx.Response(200, json={"wallets": [{"address": "0xFIRST"}, {"address": "0xSECOND"}]})

    adapter = WalletAuthAdapter(transport=httpx.MockTransport(handler))
    identity = await adapter.resolve("tok")
    assert identity.wallets == ("0xFIRST", "0xSECOND")
    assert identity.wallet_address == "0xFIRST"


@pytest.mark.asyncio
async def test_provider_rejects_token(monkeypatch):
    monkeypatch.setenv("WALLET_AUTH_DISABLED", "0")
    monkeypatch.setenv("WALLET_AUTH_VERIFY_URL", "http://auth.test/me")
    adapter = WalletAuthAdapter(transport=httpx.MockTransport(lambda request: httpx.Response(401)))
    with pytest.raises(ValueError):
        await adapter.resolve("bad")


@pytest.mark.asyncio
async def test_enabled_without_verify_url(monkeypatch):
    monkeypatch.setenv("WALLET_AUTH_DISABLED", "0")
    monkeypatch.delenv("WALLET_AUTH_VERIFY_URL", raising=False)
    with pytest.raises(ValueError):
        await WalletAuthAdapter().resolve("tok")


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [["0xA"], "0xA", {"wallets": "0xA"}])
async def test_provider_payload_shape_rejected(monkeypatch, payload):
    monkeypatch.setenv("WALLET_AUTH_DISABLED", "0")
    monkeypatch.setenv("WALLET_AUTH_VERIFY_URL", "http://auth.test/me")
    adapter = WalletAuthAdapter(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=payload)))
    with pytest.raises(ValueError):
        await adapter.resolve("tok")
