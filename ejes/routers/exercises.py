import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND, HTTP_503_SERVICE_UNAVAILABLE

from ejes.core.config import AppSettings
from ejes.core.deps import get_settings_dep, get_storage
from ejes.core.security import get_api_key
from ejes.models.exercise import ClearResponse, Exercise, ExerciseBulkRequest, ExerciseCreate
from ejes.models.feedback import ImprovementEntry, ImprovementListResponse
from ejes.services.improvements import append_improvement
from ejes.services.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["exercises"])


def _exercise_or_404(storage: Storage, exercise_id: int) -> Exercise:
    exercise = storage.get_exercise(exercise_id)
    if not exercise:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Exercice introuvable.")
    return exercise


@router.get("/exercises", response_model=List[Exercise])
async def list_exercises(
    section_id: Optional[int] = Query(default=None, alias="sectionId"),
    storage: Storage = Depends(get_storage),
):
    if section_id is None:
        return storage.get_exercises()
    return storage.get_exercises_by_section(section_id)


@router.get("/sections/{section_id}/exercises", response_model=List[Exercise])
async def list_section_exercises(section_id: int, storage: Storage = Depends(get_storage)):
    return storage.get_exercises_by_section(section_id)


@router.get("/exercises/{exercise_id}", response_model=Exercise)
async def get_exercise(exercise_id: int, storage: Storage = Depends(get_storage)):
    return _exercise_or_404(storage, exercise_id)


@router.post("/exercises", response_model=Exercise, status_code=HTTP_201_CREATED)
async def create_exercise(body: ExerciseCreate, storage: Storage = Depends(get_storage)):
    return storage.create_exercise(body)


@router.post("/exercises/bulk", response_model=List[Exercise], status_code=HTTP_201_CREATED)
async def create_exercises(body: ExerciseBulkRequest, storage: Storage = Depends(get_storage)):
    return storage.create_exercises(body.exercises)


@router.put("/exercises", response_model=List[Exercise])
async def replace_exercises(
    body: ExerciseBulkRequest,
    storage: Storage = Depends(get_storage),
    _: str = Depends(get_api_key),  # remplacement destructif protégé par API key
):
    storage.clear_exercises()
    created = storage.create_exercises(body.exercises)
    logger.info("Replaced exercise set with %d exercises", len(created))
    return created


@router.delete("/exercises", response_model=ClearResponse)
async def clear_exercises(
    storage: Storage = Depends(get_storage),
    _: str = Depends(get_api_key),
):
    storage.clear_exercises()
    return ClearResponse(ok=True)


@router.post("/exercises/{exercise_id}/improve", response_model=ImprovementListResponse)
async def mark_for_improvement(
    exercise_id: int,
    storage: Storage = Depends(get_storage),
    settings: AppSettings = Depends(get_settings_dep),
):
    exercise = _exercise_or_404(storage, exercise_id)
    entry = ImprovementEntry(tema=exercise.tema, enunciado=exercise.enunciado, ejercicio=exercise.ejercicio)
    try:
        items = append_improvement(settings.improvements_path, entry)
    except OSError as e:
        logger.warning("Cannot write improvements file %s: %s", settings.improvements_path, e)
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            detail="Fichier mejorar.js indisponible.",
        )
    return ImprovementListResponse(total=len(items), items=items)
