# hoozin/api/routes/auth.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, Response

from hoozin.api.dependencies.services import get_settings_store
from hoozin.services.settings_store import SettingsStore, TokenResponse

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.put(
    "/token",
    status_code=HTTPStatus.NO_CONTENT,
    summary="Store the Google access token obtained by the sign-in flow",
)
async def store_token(
    token: TokenResponse,
    settings_store: SettingsStore = Depends(get_settings_store),
) -> Response:
    await settings_store.set_token(token)
    return Response(status_code=HTTPStatus.NO_CONTENT)


@router.delete(
    "/token",
    status_code=HTTPStatus.NO_CONTENT,
    summary="Forget the stored Google access token",
)
async def clear_token(
    settings_store: SettingsStore = Depends(get_settings_store),
) -> Response:
    await settings_store.clear_token()
    return Response(status_code=HTTPStatus.NO_CONTENT)
