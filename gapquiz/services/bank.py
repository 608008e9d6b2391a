import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from gapquiz.core.config import DEFAULT_QUESTIONS_PATH
from gapquiz.models.quiz import Question, QuestionGroup

logger = logging.getLogger(__name__)


class LoadFailure(Exception):
    """Échec du chargement ou du parsing de la banque de questions."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class QuestionBank:
    """
    Accès en lecture aux groupes chargés.
    Une clé inconnue donne un groupe vide plutôt qu'une erreur.
    """

    def __init__(self, groups: Iterable[QuestionGroup] = ()):
        self._groups: Dict[str, QuestionGroup] = {g.key: g for g in groups}

    def keys(self) -> List[str]:
        return list(self._groups)

    def group(self, key: str) -> QuestionGroup:
        return self._groups.get(key) or QuestionGroup(key=key)

    def questions(self, key: str) -> Tuple[Question, ...]:
        return self.group(key).questions

    @property
    def is_empty(self) -> bool:
        return not any(g.questions for g in self._groups.values())

    def __contains__(self, key: object) -> bool:
        return key in self._groups

    def __iter__(self) -> Iterator[QuestionGroup]:
        return iter(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)


def parse_bank(data: Any) -> QuestionBank:
    """
    Convertit le JSON brut {clé: {"questions": [...]}} en QuestionBank.
    """
    if not isinstance(data, Mapping):
        raise LoadFailure("Format de banque invalide : objet JSON attendu à la racine.")

    groups: List[QuestionGroup] = []
    for key, raw in data.items():
        if not isinstance(raw, Mapping):
            raise LoadFailure(f"Groupe {key!r} invalide : objet attendu.")
        if "questions" not in raw:
            raise LoadFailure(f"Groupe {key!r} invalide : clé \"questions\" absente.")
        try:
            groups.append(QuestionGroup(key=key, questions=raw["questions"]))
        except ValidationError as e:
            raise LoadFailure(f"Groupe {key!r} invalide : {e.error_count()} erreur(s) de validation.") from e
    return QuestionBank(groups)


def load_bank(path: Path) -> QuestionBank:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise LoadFailure(f"Fichier de questions introuvable : {path}") from e
    except OSError as e:
        raise LoadFailure(f"Lecture impossible de {path} : {e}") from e
    except json.JSONDecodeError as e:
        raise LoadFailure(f"JSON invalide dans {path} (ligne {e.lineno}) : {e.msg}") from e
    return parse_bank(data)


class JsonBankLoader:
    """
    Chargeur asynchrone d'un fichier JSON local.
    Pas de retry ici : un échec remonte tel quel en LoadFailure.
    """

    def __init__(self, path: Optional[str | Path] = None):
        self.path = Path(path) if path is not None else DEFAULT_QUESTIONS_PATH

    async def load(self) -> QuestionBank:
        bank = await asyncio.to_thread(load_bank, self.path)
        logger.info("banque chargée depuis %s (%d groupes)", self.path, len(bank))
        return bank
