from types import SimpleNamespace

from openai import OpenAIError

from ejes.models.exercise import Exercise
from ejes.models.feedback import FeedbackSource
from ejes.models.settings import Settings
from ejes.services.feedback_service import FeedbackService

EXERCISE = Exercise(id=1, sectionId=1, tema="Límites", enunciado="Calcula", ejercicio="lim x->0 sin(x)/x", order=1)


class _FakeCompletions:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _factory(completions, keys):
    def build(api_key):
        keys.append(api_key)
        return SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return build


def test_local_fallback_without_key():
    keys = []
    service = FeedbackService(client_factory=_factory(_FakeCompletions("unused"), keys))
    out = service.review(Settings(), EXERCISE, "El límite vale 1 por L'Hôpital")
    assert out.source == FeedbackSource.local
    assert "Límites" in out.feedback
    assert keys == []


def test_groq_reply_uses_settings():
    keys = []
    completions = _FakeCompletions("  Muy bien razonado.  ")
    service = FeedbackService(client_factory=_factory(completions, keys), max_tokens=100)
    settings = Settings(groqApiKey="gsk_x", groqModelId="llama-test", feedbackPrompt="Sé breve.")

    out = service.review(settings, EXERCISE, "vale 1")
    assert out.source == FeedbackSource.groq
    assert out.feedback == "Muy bien razonado."
    assert out.model == "llama-test"
    assert keys == ["gsk_x"]

    call = completions.calls[0]
    assert call["model"] == "llama-test"
    assert call["max_tokens"] == 100
    assert call["messages"][0] == {"role": "system", "content": "Sé breve."}
    assert "vale 1" in call["messages"][1]["content"]


def test_groq_error_falls_back():
    completions = _FakeCompletions(error=OpenAIError("rate limited"))
    service = FeedbackService(client_factory=_factory(completions, []))
    out = service.review(Settings(groqApiKey="gsk_x"), EXERCISE, "no sé")
    assert out.source == FeedbackSource.local


def test_feedback_endpoint(test_client):
    test_client.post(
        "/api/exercises",
        json={"sectionId": 1, "tema": "Matrices", "enunciado": "Invierte", "ejercicio": "A", "order": 1},
    )
    r = test_client.post("/api/feedback", json={"exerciseId": 1, "content": "A^-1 = adj(A)/det(A)"})
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["source"] == "local"
    assert "Matrices" in data["feedback"]


def test_feedback_unknown_exercise_404(test_client):
    r = test_client.post("/api/feedback", json={"exerciseId": 5, "content": "algo"})
    assert r.status_code == 404
