from typing import List

from pydantic import BaseModel, Field


class ExerciseCreate(BaseModel):
    sectionId: int = Field(..., description="Section (eje) de l'exercice")
    tema: str = Field(..., description="Thème")
    enunciado: str = Field(..., description="Énoncé")
    ejercicio: str = Field(..., description="Corps de l'exercice")
    order: int = Field(..., description="Ordre dans la section")


class Exercise(ExerciseCreate):
    id: int


class ExerciseBulkRequest(BaseModel):
    exercises: List[ExerciseCreate]


class ClearResponse(BaseModel):
    ok: bool = True
