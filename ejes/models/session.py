from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ejes.utils.time_utils import now_if_missing, utcnow


class SessionCreate(BaseModel):
    endTime: Optional[datetime] = None
    pomodoroCount: int = Field(default=0, ge=0)
    exercisesCompleted: int = Field(default=0, ge=0)


class SessionUpdate(BaseModel):
    endTime: Optional[datetime] = None
    pomodoroCount: Optional[int] = Field(default=None, ge=0)
    exercisesCompleted: Optional[int] = Field(default=None, ge=0)


class Session(BaseModel):
    id: int
    startTime: datetime = Field(default_factory=utcnow)
    endTime: Optional[datetime] = None
    pomodoroCount: int = 0
    exercisesCompleted: int = 0

    @field_validator("startTime", mode="before")
    @classmethod
    def default_now(cls, v):
        return now_if_missing(v)
