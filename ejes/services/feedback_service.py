import logging
from typing import Callable, Dict, List, Optional

from openai import OpenAI, OpenAIError

from ejes.models.exercise import Exercise
from ejes.models.feedback import FeedbackResponse, FeedbackSource
from ejes.models.settings import Settings

logger = logging.getLogger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


def _groq_client(api_key: str) -> OpenAI:
    return OpenAI(api_key=api_key, base_url=GROQ_BASE_URL)


class FeedbackService:
    """
    Retour pédagogique sur la réponse d'un étudiant.
    - Si une clé Groq est configurée dans les réglages : appelle Groq
      (API compatible OpenAI) avec le modèle et le prompt des réglages.
    - Sinon, ou en cas d'erreur : retour local minimal.
    """

    def __init__(
        self,
        client_factory: Callable[[str], OpenAI] = _groq_client,
        max_tokens: int = 600,
    ):
        self.client_factory = client_factory
        self.max_tokens = max_tokens

    def review(self, settings: Settings, exercise: Exercise, answer: str) -> FeedbackResponse:
        # 1) Tentative Groq
        if settings.groqApiKey:
            try:
                client = self.client_factory(settings.groqApiKey)
                comp = client.chat.completions.create(
                    model=settings.groqModelId,
                    messages=self.build_messages(settings, exercise, answer),
                    max_tokens=self.max_tokens,
                    temperature=0.2,
                )
                text = (comp.choices[0].message.content or "").strip()
                if text:
                    return FeedbackResponse(
                        feedback=text,
                        source=FeedbackSource.groq,
                        model=settings.groqModelId,
                    )
                logger.warning("Groq returned an empty completion. Fallback local.")
            except OpenAIError as e:
                logger.warning("Groq error: %s. Fallback local.", e)

        # 2) Fallback local
        return FeedbackResponse(
            feedback=self._local_feedback(exercise, answer),
            source=FeedbackSource.local,
        )

    @staticmethod
    def build_messages(settings: Settings, exercise: Exercise, answer: str) -> List[Dict[str, str]]:
        prompt = (
            f"Tema: {exercise.tema}\n"
            f"Enunciado: {exercise.enunciado}\n"
            f"Ejercicio: {exercise.ejercicio}\n\n"
            f"Respuesta del estudiante:\n{answer.strip()}"
        )
        return [
            {"role": "system", "content": settings.feedbackPrompt},
            {"role": "user", "content": prompt},
        ]

    @staticmethod
    def _local_feedback(exercise: Exercise, answer: Optional[str]) -> str:
        text = (answer or "").strip()
        if len(text) < 8:
            baseline = "Tu respuesta es muy breve: desarrolla el razonamiento paso a paso."
        else:
            baseline = (
                "Respuesta registrada. Configura una clave de Groq en los ajustes "
                "para recibir una retroalimentación detallada."
            )
        return f"{baseline}\n\nTema: {exercise.tema}"
