from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_GROQ_MODEL = "llama-3.1-8b-instant"
DEFAULT_FEEDBACK_PROMPT = (
    "Eres un profesor de matemáticas experto. Analiza la respuesta del estudiante "
    "y proporciona retroalimentación constructiva con explicaciones claras y "
    "ejemplos cuando sea necesario."
)


class Settings(BaseModel):
    """
    Réglages de l'étudiant (singleton, id = 1).
    """
    id: int = 1
    pomodoroMinutes: int = 25
    maxTimeMinutes: int = 10
    groqApiKey: Optional[str] = None
    groqModelId: str = DEFAULT_GROQ_MODEL
    feedbackPrompt: str = DEFAULT_FEEDBACK_PROMPT
    currentSection: int = 1
    currentExercise: int = 0


class SettingsUpdate(BaseModel):
    pomodoroMinutes: Optional[int] = Field(default=None, ge=1)
    maxTimeMinutes: Optional[int] = Field(default=None, ge=1)
    groqApiKey: Optional[str] = None
    groqModelId: Optional[str] = Field(default=None, min_length=1)
    feedbackPrompt: Optional[str] = Field(default=None, min_length=1)
    currentSection: Optional[int] = None
    currentExercise: Optional[int] = None


class SettingsOut(BaseModel):
    """
    Vue publique : la clé Groq n'est jamais renvoyée au client.
    """
    id: int
    pomodoroMinutes: int
    maxTimeMinutes: int
    hasGroqApiKey: bool
    groqModelId: str
    feedbackPrompt: str
    currentSection: int
    currentExercise: int

    @classmethod
    def from_settings(cls, s: Settings) -> "SettingsOut":
        data = s.model_dump(exclude={"groqApiKey"})
        return cls(**data, hasGroqApiKey=bool(s.groqApiKey))
