import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Type

from pydantic import BaseModel

from ejes.core.config import AppSettings
from ejes.core.exceptions import SessionNotFoundError
from ejes.models.exercise import Exercise, ExerciseCreate
from ejes.models.material import DEFAULT_MATERIAL, Material
from ejes.models.response import Response, ResponseCreate
from ejes.models.session import Session, SessionCreate, SessionUpdate
from ejes.models.settings import Settings, SettingsUpdate
from ejes.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

# Collections stockées sous forme de liste (settings est un objet unique)
COLLECTIONS: Dict[str, Type[BaseModel]] = {
    "exercises": Exercise,
    "responses": Response,
    "sessions": Session,
    "materials": Material,
}

# Champs qu'un PATCH peut remettre à null ; ailleurs null = "ne pas toucher"
NULLABLE_FIELDS = {
    "settings": {"groqApiKey"},
    "sessions": {"endTime"},
}


class Storage(Protocol):
    """
    Contrat commun aux deux implémentations.
    Les lectures renvoient None quand l'élément n'existe pas ;
    seule update_session lève une exception.
    """

    def get_exercises(self) -> List[Exercise]: ...
    def get_exercises_by_section(self, section_id: int) -> List[Exercise]: ...
    def get_exercise(self, exercise_id: int) -> Optional[Exercise]: ...
    def create_exercise(self, data: ExerciseCreate) -> Exercise: ...
    def create_exercises(self, items: List[ExerciseCreate]) -> List[Exercise]: ...
    def clear_exercises(self) -> None: ...

    def get_response(self, exercise_id: int) -> Optional[Response]: ...
    def create_or_update_response(self, data: ResponseCreate) -> Response: ...

    def get_settings(self) -> Optional[Settings]: ...
    def update_settings(self, data: SettingsUpdate) -> Settings: ...

    def get_current_session(self) -> Optional[Session]: ...
    def create_session(self, data: SessionCreate) -> Session: ...
    def update_session(self, session_id: int, data: SessionUpdate) -> Session: ...

    def get_materials(self) -> List[Material]: ...
    def mark_material_seen(self, material_id: int) -> Optional[Material]: ...


class MemStorage:
    """
    Stockage en mémoire (dicts indexés par id).
    Réglages par défaut et un support de cours sont créés à la construction.
    """

    def __init__(self) -> None:
        self.exercises: Dict[int, Exercise] = {}
        self.responses: Dict[int, Response] = {}
        self.sessions: Dict[int, Session] = {}
        self.materials: Dict[int, Material] = {}
        self.settings: Optional[Settings] = Settings(id=1)
        self.current_id: Dict[str, int] = {
            "exercises": 1,
            "responses": 1,
            "settings": 2,
            "sessions": 1,
            "materials": 1,
        }
        self.seed_default_material()

    # ---------- exercises ----------

    def get_exercises(self) -> List[Exercise]:
        return sorted(self.exercises.values(), key=lambda ex: ex.order)

    def get_exercises_by_section(self, section_id: int) -> List[Exercise]:
        return sorted(
            (ex for ex in self.exercises.values() if ex.sectionId == section_id),
            key=lambda ex: ex.order,
        )

    def get_exercise(self, exercise_id: int) -> Optional[Exercise]:
        return self.exercises.get(exercise_id)

    def create_exercise(self, data: ExerciseCreate) -> Exercise:
        exercise = Exercise(id=self._next_id("exercises"), **data.model_dump())
        self.exercises[exercise.id] = exercise
        return exercise

    def create_exercises(self, items: List[ExerciseCreate]) -> List[Exercise]:
        # Pas atomique : les exercices déjà créés restent en cas d'erreur
        return [self.create_exercise(item) for item in items]

    def clear_exercises(self) -> None:
        self.exercises.clear()
        self.current_id["exercises"] = 1

    # ---------- responses ----------

    def get_response(self, exercise_id: int) -> Optional[Response]:
        return next(
            (r for r in self.responses.values() if r.exerciseId == exercise_id),
            None,
        )

    def create_or_update_response(self, data: ResponseCreate) -> Response:
        existing = self.get_response(data.exerciseId)
        now = utcnow()

        if existing:
            updated = existing.model_copy(
                update={
                    "content": data.content,
                    "difficulty": existing.difficulty if data.difficulty is None else data.difficulty,
                    "updatedAt": now,
                }
            )
            self.responses[existing.id] = updated
            return updated

        response = Response(
            id=self._next_id("responses"),
            exerciseId=data.exerciseId,
            content=data.content,
            difficulty=data.difficulty or 0,
            createdAt=now,
            updatedAt=now,
        )
        self.responses[response.id] = response
        return response

    # ---------- settings ----------

    def get_settings(self) -> Optional[Settings]:
        return self.settings

    def update_settings(self, data: SettingsUpdate) -> Settings:
        changes = _changes(data, NULLABLE_FIELDS["settings"])
        if self.settings:
            self.settings = _merge(self.settings, changes)
        else:
            self.settings = Settings(id=self._next_id("settings"), **changes)
        return self.settings

    # ---------- sessions ----------

    def get_current_session(self) -> Optional[Session]:
        open_sessions = [s for s in self.sessions.values() if s.endTime is None]
        return open_sessions[-1] if open_sessions else None

    def create_session(self, data: SessionCreate) -> Session:
        session = Session(id=self._next_id("sessions"), startTime=utcnow(), **data.model_dump())
        self.sessions[session.id] = session
        return session

    def update_session(self, session_id: int, data: SessionUpdate) -> Session:
        existing = self.sessions.get(session_id)
        if not existing:
            raise SessionNotFoundError(session_id)
        updated = _merge(existing, _changes(data, NULLABLE_FIELDS["sessions"]))
        self.sessions[session_id] = updated
        return updated

    # ---------- materials ----------

    def get_materials(self) -> List[Material]:
        return list(self.materials.values())

    def mark_material_seen(self, material_id: int) -> Optional[Material]:
        material = self.materials.get(material_id)
        if not material:
            return None
        material = material.model_copy(update={"seen": True})
        self.materials[material_id] = material
        return material

    def seed_default_material(self) -> Material:
        material = Material(id=self._next_id("materials"), **DEFAULT_MATERIAL.model_dump())
        self.materials[material.id] = material
        return material

    # ---------- restauration (utilisée par FileStorage) ----------

    def restore(self, kind: str, records: List[BaseModel]) -> None:
        """
        Remplace une collection entière et recale son compteur sur max(id) + 1.
        """
        collection: Dict[int, BaseModel] = getattr(self, kind)
        collection.clear()
        for record in sorted(records, key=lambda r: r.id):
            collection[record.id] = record
        self.current_id[kind] = max((r.id for r in records), default=0) + 1

    def restore_settings(self, settings: Settings) -> None:
        self.settings = settings
        self.current_id["settings"] = settings.id + 1

    def snapshot(self, kind: str) -> List[BaseModel]:
        return list(getattr(self, kind).values())

    def _next_id(self, kind: str) -> int:
        value = self.current_id[kind]
        self.current_id[kind] = value + 1
        return value


def _changes(data: BaseModel, nullable) -> Dict[str, object]:
    """
    Champs explicitement envoyés ; un null n'efface que les champs nullables.
    """
    return {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in nullable
    }


def _merge(existing: BaseModel, changes: Dict[str, object]) -> BaseModel:
    # revalidation : un enregistrement fusionné doit pouvoir être rechargé depuis le disque
    return type(existing).model_validate({**existing.model_dump(), **changes})


class FileStorage:
    """
    Enveloppe un MemStorage et réécrit le fichier JSON de l'entité
    concernée après chaque mutation (un fichier par type d'entité).
    """

    def __init__(self, data_dir, store: Optional[MemStorage] = None):
        self.data_dir = Path(data_dir)
        # OSError volontairement non capturée : create_storage bascule en mémoire
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.store = store if store is not None else MemStorage()
        self.paths: Dict[str, Path] = {
            kind: self.data_dir / f"{kind}.json"
            for kind in ("exercises", "responses", "settings", "sessions", "materials")
        }
        self._load_from_disk()

    # ---------- chargement ----------

    def _load_from_disk(self) -> None:
        loaded_materials = False
        for kind, model in COLLECTIONS.items():
            records = self._load_collection(kind, model)
            if records is None:
                continue
            self.store.restore(kind, records)
            if kind == "materials":
                loaded_materials = True

        settings = self._load_settings()
        if settings is not None:
            self.store.restore_settings(settings)

        # rien récupéré (absent, illisible ou vide) : support par défaut écrit sur disque
        recovered = loaded_materials and bool(self.store.materials)
        if not self.store.materials:
            self.store.seed_default_material()
        if not recovered:
            self._save("materials")

    def _load_collection(self, kind: str, model: Type[BaseModel]) -> Optional[List[BaseModel]]:
        path = self.paths[kind]
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise ValueError(f"{path.name}: tableau JSON attendu")
            records = [model.model_validate(item) for item in raw]
        except (OSError, ValueError):
            logger.exception("Failed to load %s from disk", path)
            return None
        logger.info("Loaded %d %s from %s", len(records), kind, path)
        return records

    def _load_settings(self) -> Optional[Settings]:
        path = self.paths["settings"]
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return Settings.model_validate(json.load(f))
        except (OSError, ValueError):
            logger.exception("Failed to load %s from disk", path)
            return None

    # ---------- sauvegarde ----------

    def _save(self, kind: str) -> None:
        if kind == "settings":
            settings = self.store.get_settings()
            if settings is None:
                return
            payload = settings.model_dump(mode="json")
        else:
            payload = [r.model_dump(mode="json") for r in self.store.snapshot(kind)]

        with open(self.paths[kind], "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)

    # ---------- lectures (délégation directe) ----------

    def get_exercises(self) -> List[Exercise]:
        return self.store.get_exercises()

    def get_exercises_by_section(self, section_id: int) -> List[Exercise]:
        return self.store.get_exercises_by_section(section_id)

    def get_exercise(self, exercise_id: int) -> Optional[Exercise]:
        return self.store.get_exercise(exercise_id)

    def get_response(self, exercise_id: int) -> Optional[Response]:
        return self.store.get_response(exercise_id)

    def get_settings(self) -> Optional[Settings]:
        return self.store.get_settings()

    def get_current_session(self) -> Optional[Session]:
        return self.store.get_current_session()

    def get_materials(self) -> List[Material]:
        return self.store.get_materials()

    # ---------- mutations (mémoire puis disque) ----------

    def create_exercise(self, data: ExerciseCreate) -> Exercise:
        exercise = self.store.create_exercise(data)
        self._save("exercises")
        return exercise

    def create_exercises(self, items: List[ExerciseCreate]) -> List[Exercise]:
        try:
            return self.store.create_exercises(items)
        finally:
            self._save("exercises")

    def clear_exercises(self) -> None:
        self.store.clear_exercises()
        self._save("exercises")

    def create_or_update_response(self, data: ResponseCreate) -> Response:
        response = self.store.create_or_update_response(data)
        self._save("responses")
        return response

    def update_settings(self, data: SettingsUpdate) -> Settings:
        settings = self.store.update_settings(data)
        self._save("settings")
        return settings

    def create_session(self, data: SessionCreate) -> Session:
        session = self.store.create_session(data)
        self._save("sessions")
        return session

    def update_session(self, session_id: int, data: SessionUpdate) -> Session:
        session = self.store.update_session(session_id, data)
        self._save("sessions")
        return session

    def mark_material_seen(self, material_id: int) -> Optional[Material]:
        material = self.store.mark_material_seen(material_id)
        if material is not None:
            self._save("materials")
        return material


def create_storage(settings: AppSettings) -> Storage:
    """
    Construit le stockage une seule fois au démarrage :
    fichiers JSON si le dossier est utilisable, sinon mémoire seule.
    """
    try:
        storage = FileStorage(settings.data_path)
    except OSError as e:
        logger.warning("Falling back to in-memory storage: %s", e)
        return MemStorage()
    logger.info("Using file storage in %s", settings.data_path)
    return storage
