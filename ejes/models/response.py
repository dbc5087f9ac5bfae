from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ejes.utils.time_utils import now_if_missing, utcnow


class ResponseCreate(BaseModel):
    exerciseId: int
    content: str
    # None = conserver la difficulté déjà enregistrée
    difficulty: Optional[int] = Field(default=None, ge=0)


class Response(BaseModel):
    id: int
    exerciseId: int
    content: str
    difficulty: int = 0
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: datetime = Field(default_factory=utcnow)

    @field_validator("createdAt", "updatedAt", mode="before")
    @classmethod
    def default_now(cls, v):
        return now_if_missing(v)
