from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool
from starlette.status import HTTP_404_NOT_FOUND

from ejes.core.deps import get_feedback_service, get_storage
from ejes.models.feedback import FeedbackRequest, FeedbackResponse
from ejes.models.settings import Settings
from ejes.services.feedback_service import FeedbackService
from ejes.services.storage import Storage

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


@router.post("", response_model=FeedbackResponse)
async def feedback(
    body: FeedbackRequest,
    storage: Storage = Depends(get_storage),
    service: FeedbackService = Depends(get_feedback_service),
):
    exercise = storage.get_exercise(body.exerciseId)
    if not exercise:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Exercice introuvable.")
    settings = storage.get_settings() or Settings()
    # appel réseau bloquant : hors de la boucle, le stockage n'est plus touché ensuite
    return await run_in_threadpool(service.review, settings, exercise, body.content)
