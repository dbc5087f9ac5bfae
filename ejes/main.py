import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from ejes.core.config import get_settings
from ejes.core.exceptions import EjesException, NotFoundError
from ejes.core.logging import setup_logging
from ejes.core.static import serve_static
from ejes.routers import system, exercises, responses, settings as settings_router, sessions, materials, feedback
from ejes.services.feedback_service import FeedbackService
from ejes.services.storage import Storage, create_storage

logger = logging.getLogger(__name__)


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="API de suivi d'étude (exercices, réponses, sessions pomodoro, supports)",
    )

    # Stockage choisi une seule fois au démarrage (fichiers JSON ou mémoire)
    app.state.storage = storage if storage is not None else create_storage(settings)
    app.state.feedback_service = FeedbackService(max_tokens=settings.FEEDBACK_MAX_TOKENS)

    # Middleware CORS
    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],  # fallback si mal configuré
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EjesException)
    async def ejes_exception_handler(request: Request, exc: EjesException):
        if isinstance(exc, NotFoundError):
            status_code = status.HTTP_404_NOT_FOUND
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        logger.warning(
            "Application exception on %s %s: %s: %s",
            request.method, request.url.path, type(exc).__name__, exc,
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "type": type(exc).__name__},
        )

    # Routers
    app.include_router(system.router)
    app.include_router(exercises.router)
    app.include_router(responses.router)
    app.include_router(settings_router.router)
    app.include_router(sessions.router)
    app.include_router(materials.router)
    app.include_router(feedback.router)

    if settings.STATIC_DIR:
        serve_static(app, settings.STATIC_DIR)
    else:
        # Redirect root → docs
        @app.get("/", include_in_schema=False)
        async def root():
            return RedirectResponse(url="/docs")

    return app
