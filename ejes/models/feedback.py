from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class FeedbackSource(str, Enum):
    groq = "groq"
    local = "local"


class FeedbackRequest(BaseModel):
    exerciseId: int
    content: str = Field(..., min_length=1, description="Réponse de l'étudiant")


class FeedbackResponse(BaseModel):
    feedback: str
    source: FeedbackSource
    model: Optional[str] = None


class ImprovementEntry(BaseModel):
    tema: str
    enunciado: str
    ejercicio: str


class ImprovementListResponse(BaseModel):
    total: int
    items: List[ImprovementEntry]
