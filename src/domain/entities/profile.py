from __future__ import annotations

from dataclasses import dataclass, fields, replace

PROFILE_FIELDS = ("first_name", "last_name", "email", "phone", "residence", "birth_date")
REQUIRED_FIELDS = ("first_name", "last_name", "email")


@dataclass(frozen=True)
class ProfileRecord:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    residence: str = ""
    birth_date: str = ""  # YYYY-MM-DD as shown in the form, "" when unknown

    def with_field(self, name: str, value: str) -> ProfileRecord:
        if name not in PROFILE_FIELDS:
            raise ValueError(f"Unknown profile field: {name}")
        return replace(self, **{name: value})

    def missing_required(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    def as_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class IdentityContext:
    """What the wallet-auth provider tells us about the current visitor."""

    authenticated: bool = False
    wallets: tuple[str, ...] = ()

    @property
    def wallet_address(self) -> str | None:
        # only the first connected wallet is used
        return self.wallets[0] if self.wallets else None

    @property
    def wallet_label(self) -> str:
        address = self.wallet_address
        return address[:8] + "..." if address else ""
