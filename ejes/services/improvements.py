import json
import logging
import re
from pathlib import Path
from typing import List

from ejes.models.feedback import ImprovementEntry

logger = logging.getLogger(__name__)

_EXPORT_RE = re.compile(r"export const ejercicios = (\[[\s\S]*\]);?")


def read_improvements(path: Path) -> List[ImprovementEntry]:
    """
    Lit la liste "mejorar.js". Fichier absent ou illisible = liste vide.
    """
    if not path.exists():
        return []
    match = _EXPORT_RE.search(path.read_text(encoding="utf-8"))
    if not match:
        logger.warning("Malformed improvements file %s, starting a new list", path)
        return []
    try:
        return [ImprovementEntry.model_validate(it) for it in json.loads(match.group(1))]
    except (ValueError, TypeError):
        logger.warning("Malformed improvements file %s, starting a new list", path)
        return []


def append_improvement(path: Path, entry: ImprovementEntry) -> List[ImprovementEntry]:
    """
    Ajoute un exercice à revoir et réécrit le module JS complet.
    """
    items = read_improvements(path)
    items.append(entry)

    path.parent.mkdir(parents=True, exist_ok=True)
    body = json.dumps([it.model_dump() for it in items], indent=2, ensure_ascii=False)
    path.write_text(f"export const ejercicios = {body};\n", encoding="utf-8")
    return items
