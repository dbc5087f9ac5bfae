from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND

from ejes.core.deps import get_storage
from ejes.models.session import Session, SessionCreate, SessionUpdate
from ejes.services.storage import Storage

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("/current", response_model=Session)
async def current_session(storage: Storage = Depends(get_storage)):
    session = storage.get_current_session()
    if not session:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Aucune session en cours.")
    return session


@router.post("", response_model=Session, status_code=HTTP_201_CREATED)
async def start_session(body: SessionCreate, storage: Storage = Depends(get_storage)):
    return storage.create_session(body)


# SessionNotFoundError est convertie en 404 par le handler de create_app
@router.patch("/{session_id}", response_model=Session)
async def update_session(session_id: int, body: SessionUpdate, storage: Storage = Depends(get_storage)):
    return storage.update_session(session_id, body)
