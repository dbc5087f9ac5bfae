from fastapi import APIRouter, Depends

from ejes.core.config import get_settings
from ejes.core.deps import get_storage
from ejes.services.storage import FileStorage, Storage

router = APIRouter(tags=["system"])


@router.get("/health")
def health(storage: Storage = Depends(get_storage)):
    s = get_settings()
    # "memory" = dossier de données inutilisable, rien n'est persisté
    backend = "file" if isinstance(storage, FileStorage) else "memory"
    return {"status": "ok", "version": s.APP_VERSION, "storage": backend}


@router.get("/version")
def version():
    s = get_settings()
    return {"name": s.APP_NAME, "version": s.APP_VERSION, "env": s.APP_ENV}
