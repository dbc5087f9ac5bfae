from fastapi import Request

from ejes.core.config import AppSettings, get_settings
from ejes.services.feedback_service import FeedbackService
from ejes.services.storage import Storage


def get_settings_dep() -> AppSettings:
    return get_settings()


def get_storage(request: Request) -> Storage:
    """
    Fournit le stockage créé une fois par create_app (DI).
    """
    return request.app.state.storage


def get_feedback_service(request: Request) -> FeedbackService:
    return request.app.state.feedback_service
