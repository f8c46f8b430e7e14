from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from src.application.dtos.profile_dto import ProfileFormFields, ProfileViewResponse, SaveProfileResponse
from src.application.use_cases.profile_form import MissingFieldsError, Notification, ProfileForm
from src.domain.entities.profile import PROFILE_FIELDS, IdentityContext
from src.infrastructure.api.dependencies import get_identity, get_users_api
from src.infrastructure.users_api.users_client import UsersApiClient

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[3] / "templates"))

router = APIRouter(
    prefix="/profile",
    tags=["Profile"],
    responses={
        401: {"description": "Unauthorized - Wallet token rejected by the auth provider"},
        422: {"description": "Validation Error - Required profile fields are missing"},
    },
)


def _render(
    request: Request,
    form: ProfileForm,
    identity: IdentityContext,
    notification: Notification | None = None,
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    view = form.view(identity)
    return templates.TemplateResponse(
        request,
        "profile.html",
        {"view": view, "notification": notification, "error": error},
        status_code=status_code,
    )


@router.get(
    "",
    response_class=HTMLResponse,
    summary="Profile Settings Page",
    description="""
    Render the profile settings page for the connected wallet.

    Shows a connect-wallet placeholder when no wallet session is present,
    otherwise loads the record from the Users API and renders the form.
    """,
)
async def profile_page(
    request: Request,
    identity: IdentityContext = Depends(get_identity),
    users_api: UsersApiClient = Depends(get_users_api),
):
    form = ProfileForm(users_api)
    await form.load(identity)
    return _render(request, form, identity)


@router.post(
    "",
    response_class=HTMLResponse,
    summary="Submit Profile Form",
    description="Save the submitted form to the Users API and re-render the page with the outcome.",
)
async def submit_profile_page(
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    residence: str = Form(""),
    birth_date: str = Form(""),
    identity: IdentityContext = Depends(get_identity),
    users_api: UsersApiClient = Depends(get_users_api),
):
    notices: list[Notification] = []
    form = ProfileForm(users_api, notify=notices.append)
    form.is_loading = False
    submitted = dict(
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=phone,
        residence=residence,
        birth_date=birth_date,
    )
    for name in PROFILE_FIELDS:
        form.change_field(name, submitted[name])

    try:
        await form.save(identity)
    except MissingFieldsError as exc:
        return _render(request, form, identity, error=str(exc), status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
    return _render(request, form, identity, notification=notices[-1] if notices else None)


@router.get(
    "/view",
    response_model=ProfileViewResponse,
    summary="Get Profile View",
    description="""
    JSON rendition of the profile page: the render state, the shortened
    wallet label and, once loaded, the form values.
    """,
)
async def profile_view(
    identity: IdentityContext = Depends(get_identity),
    users_api: UsersApiClient = Depends(get_users_api),
):
    form = ProfileForm(users_api)
    await form.load(identity)
    return form.view(identity)


@router.put(
    "",
    response_model=SaveProfileResponse,
    summary="Save Profile",
    description="""
    Save the whole profile record for the connected wallet.

    The record is sent to the Users API with the wallet address as both
    `wallet` and `owner`. The Users API is called once; there is no retry.
    """,
    responses={
        502: {"description": "Bad Gateway - The Users API rejected the write or was unreachable"},
    },
)
async def save_profile(
    body: ProfileFormFields,
    identity: IdentityContext = Depends(get_identity),
    users_api: UsersApiClient = Depends(get_users_api),
):
    if not identity.wallet_address:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No wallet connected")
    form = ProfileForm(users_api)
    for name, value in body.model_dump().items():
        form.change_field(name, value)
    try:
        notification = await form.save(identity)
    except MissingFieldsError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if not notification.ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=notification.message)
    return SaveProfileResponse(ok=True, message=notification.message)
