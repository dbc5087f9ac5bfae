from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_404_NOT_FOUND

from ejes.core.deps import get_storage
from ejes.models.settings import SettingsOut, SettingsUpdate
from ejes.services.storage import Storage

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=SettingsOut)
async def get_settings(storage: Storage = Depends(get_storage)):
    settings = storage.get_settings()
    if not settings:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Réglages non initialisés.")
    return SettingsOut.from_settings(settings)


@router.patch("", response_model=SettingsOut)
async def update_settings(body: SettingsUpdate, storage: Storage = Depends(get_storage)):
    return SettingsOut.from_settings(storage.update_settings(body))
