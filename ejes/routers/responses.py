from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_404_NOT_FOUND

from ejes.core.deps import get_storage
from ejes.models.response import Response, ResponseCreate
from ejes.services.storage import Storage

router = APIRouter(prefix="/api/responses", tags=["responses"])


@router.get("/{exercise_id}", response_model=Response)
async def get_response(exercise_id: int, storage: Storage = Depends(get_storage)):
    response = storage.get_response(exercise_id)
    if not response:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Aucune réponse pour cet exercice.")
    return response


# Une seule réponse par exercice : un second envoi met à jour la première
@router.post("", response_model=Response)
async def save_response(body: ResponseCreate, storage: Storage = Depends(get_storage)):
    return storage.create_or_update_response(body)
