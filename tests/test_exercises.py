API_KEY_HEADER = {"x-api-key": "change_me"}


def _body(section_id=1, order=1, tema="Integrales"):
    return {
        "sectionId": section_id,
        "tema": tema,
        "enunciado": "Resuelve la integral",
        "ejercicio": "∫ x dx",
        "order": order,
    }


def test_create_and_get_exercise(test_client):
    r = test_client.post("/api/exercises", json=_body(order=2))
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["id"] == 1
    assert created["ejercicio"] == "∫ x dx"

    r = test_client.get(f"/api/exercises/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created


def test_get_missing_exercise_404(test_client):
    r = test_client.get("/api/exercises/123")
    assert r.status_code == 404


def test_create_rejects_incomplete_body(test_client):
    r = test_client.post("/api/exercises", json={"tema": "x"})
    assert r.status_code == 422


def test_bulk_create_and_section_listing(test_client):
    exercises = [_body(1, 2, "a"), _body(2, 1, "b"), _body(1, 1, "c")]
    r = test_client.post("/api/exercises/bulk", json={"exercises": exercises})
    assert r.status_code == 201, r.text
    assert [e["id"] for e in r.json()] == [1, 2, 3]

    r = test_client.get("/api/sections/1/exercises")
    assert [e["tema"] for e in r.json()] == ["c", "a"]

    r = test_client.get("/api/exercises", params={"sectionId": 2})
    assert [e["tema"] for e in r.json()] == ["b"]

    r = test_client.get("/api/exercises")
    assert [e["order"] for e in r.json()] == [1, 1, 2]


def test_replace_requires_api_key(test_client):
    r = test_client.put("/api/exercises", json={"exercises": [_body()]})
    assert r.status_code == 401

    r = test_client.delete("/api/exercises", headers={"x-api-key": "wrong"})
    assert r.status_code == 401


def test_replace_exercises_resets_ids(test_client):
    test_client.post("/api/exercises/bulk", json={"exercises": [_body(), _body(order=2)]})

    r = test_client.put(
        "/api/exercises",
        json={"exercises": [_body(tema="nuevo")]},
        headers=API_KEY_HEADER,
    )
    assert r.status_code == 200, r.text
    assert r.json()[0]["id"] == 1

    r = test_client.get("/api/exercises")
    assert [e["tema"] for e in r.json()] == ["nuevo"]


def test_clear_exercises(test_client):
    test_client.post("/api/exercises", json=_body())
    r = test_client.delete("/api/exercises", headers=API_KEY_HEADER)
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    assert test_client.get("/api/exercises").json() == []


def test_mark_for_improvement_appends(test_client, data_dir):
    test_client.post("/api/exercises", json=_body(tema="Series"))
    r = test_client.post("/api/exercises/1/improve")
    assert r.status_code == 200, r.text
    assert r.json()["total"] == 1

    r = test_client.post("/api/exercises/1/improve")
    assert r.json()["total"] == 2
    text = (data_dir / "mejorar.js").read_text(encoding="utf-8")
    assert text.startswith("export const ejercicios = [")
    assert "Series" in text


def test_mark_missing_exercise_for_improvement_404(test_client):
    r = test_client.post("/api/exercises/9/improve")
    assert r.status_code == 404
