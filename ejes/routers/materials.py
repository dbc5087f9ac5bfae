from typing import List

from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_404_NOT_FOUND

from ejes.core.deps import get_storage
from ejes.models.material import Material
from ejes.services.storage import Storage

router = APIRouter(prefix="/api/materials", tags=["materials"])


@router.get("", response_model=List[Material])
async def list_materials(storage: Storage = Depends(get_storage)):
    return storage.get_materials()


@router.post("/{material_id}/read", response_model=Material)
async def mark_read(material_id: int, storage: Storage = Depends(get_storage)):
    material = storage.mark_material_seen(material_id)
    if not material:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Support introuvable.")
    return material
