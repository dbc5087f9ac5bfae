from enum import Enum

from pydantic import BaseModel, Field


class MaterialType(str, Enum):
    teoria = "teoria"
    practica = "practica"


class MaterialCreate(BaseModel):
    subject: str = Field(..., description="Matière")
    title: str
    pdf: str = Field(..., description="URL ou chemin du PDF")
    type: MaterialType
    seen: bool = False


class Material(MaterialCreate):
    id: int


DEFAULT_MATERIAL = MaterialCreate(
    subject="Matemáticas",
    title="Guía de estudio",
    pdf="/materials/sample.pdf",
    type=MaterialType.teoria,
    seen=False,
)
