from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Literal

from loguru import logger

from src.application.dtos.profile_dto import ProfileFormFields, ProfileViewResponse, UserRecordOut
from src.domain.entities.profile import IdentityContext, ProfileRecord
from src.domain.services.birth_date import BirthDateError
from src.infrastructure.users_api.users_client import UsersApiClient, UsersApiError

SAVE_SUCCEEDED = "Profile saved successfully!"
SAVE_FAILED = "Error saving profile"


class RenderState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    LOADING = "loading"
    READY = "ready"


class MissingFieldsError(ValueError):
    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing


@dataclass(frozen=True)
class Notification:
    kind: Literal["success", "error"]
    message: str

    @property
    def ok(self) -> bool:
        return self.kind == "success"


Notifier = Callable[[Notification], None]


def _ignore(_: Notification) -> None:
    pass


class ProfileForm:
    """
    Profile settings form bound to a wallet identity.

    Holds the editable record in memory, loads it from the Users API whenever
    the identity changes and writes it back wholesale on save. Each load takes
    a new token; a response that arrives after a newer load was started is
    dropped so it cannot overwrite fresher state.
    """

    def __init__(self, users_api: UsersApiClient, notify: Notifier | None = None) -> None:
        self.users_api = users_api
        self.notify = notify or _ignore
        self.form_data = ProfileRecord()
        self.is_loading = True
        self._load_token = 0

    async def load(self, identity: IdentityContext) -> None:
        self._load_token += 1
        token = self._load_token
        wallet = identity.wallet_address
        if not wallet:
            self.is_loading = False
            return

        record: ProfileRecord | None = None
        try:
            user = await self.users_api.fetch_profile(wallet)
            # no stored record yet: start from a blank form rather than the previous wallet's data
            record = user.to_record() if user is not None else ProfileRecord()
        except (UsersApiError, BirthDateError) as exc:
            logger.error(f"Error fetching profile for wallet {wallet}: {exc}")

        if token != self._load_token:
            logger.debug(f"Dropping stale profile response for wallet {wallet}")
            return
        if record is not None:
            self.form_data = record
        self.is_loading = False

    def change_field(self, name: str, value: str) -> None:
        self.form_data = self.form_data.with_field(name, value)

    async def save(self, identity: IdentityContext) -> Notification | None:
        """Write the current form to the Users API.

        Returns ``None`` without doing anything when no wallet is connected.
        Raises ``MissingFieldsError`` before any request if a required field
        is blank; every other failure becomes an error notification.
        """
        wallet = identity.wallet_address
        if not wallet:
            return None
        missing = self.form_data.missing_required()
        if missing:
            raise MissingFieldsError(missing)

        try:
            body = UserRecordOut.from_record(self.form_data, wallet)
            await self.users_api.save_profile(body)
        except (UsersApiError, BirthDateError) as exc:
            logger.error(f"Error saving profile for wallet {wallet}: {exc}")
            notification = Notification("error", SAVE_FAILED)
        else:
            logger.info(f"Profile saved for wallet {wallet}")
            notification = Notification("success", SAVE_SUCCEEDED)
        self.notify(notification)
        return notification

    def render_state(self, identity: IdentityContext) -> RenderState:
        if not identity.authenticated:
            return RenderState.UNAUTHENTICATED
        if self.is_loading:
            return RenderState.LOADING
        return RenderState.READY

    def view(self, identity: IdentityContext) -> ProfileViewResponse:
        state = self.render_state(identity)
        form = ProfileFormFields.from_record(self.form_data) if state is RenderState.READY else None
        return ProfileViewResponse(state=state.value, wallet_label=identity.wallet_label, form=form)
