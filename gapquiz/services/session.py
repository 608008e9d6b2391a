import asyncio
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol, Sequence

from gapquiz.models.quiz import ActiveSet, AnswerState, Outcome, Question, Score
from gapquiz.services.bank import LoadFailure, QuestionBank
from gapquiz.services.evaluator import evaluate
from gapquiz.services.scoring import score as score_active
from gapquiz.services.selector import DEFAULT_ACTIVE_SET_SIZE, select_active

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    unloaded = "unloaded"
    loaded = "loaded"
    active = "active"


class BankLoader(Protocol):
    async def load(self) -> QuestionBank: ...


class UnknownGroup(LookupError):
    pass


class UnknownQuestion(LookupError):
    pass


@dataclass
class Session:
    bank: QuestionBank
    active: Dict[str, ActiveSet] = field(default_factory=dict)
    answers: AnswerState = field(default_factory=dict)
    selected_group: Optional[str] = None


class SessionController:
    """
    Orchestration chargement -> tirage -> rafraîchissement.

    Unloaded --start()--> Loaded --tirage--> Active --refresh()--> Active
    Le chargement n'a lieu qu'une fois par processus ; après un échec on reste
    Unloaded jusqu'à ce qu'un nouvel appel explicite à start() réussisse.
    """

    def __init__(
        self,
        loader: BankLoader,
        size: int = DEFAULT_ACTIVE_SET_SIZE,
        group_keys: Optional[Sequence[str]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._loader = loader
        self._size = size
        self._configured_keys: List[str] = list(group_keys or [])
        self._rng = rng
        self._session: Optional[Session] = None
        self._state = SessionState.unloaded
        self.last_error: Optional[str] = None
        self._start_lock = asyncio.Lock()

    # ---------- état ----------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def group_keys(self) -> List[str]:
        """Clés configurées (ordre des onglets), puis les clés en plus trouvées dans la banque."""
        keys = list(self._configured_keys)
        if self._session is not None:
            keys += [k for k in self._session.bank.keys() if k not in keys]
        return keys

    @property
    def selected_group(self) -> Optional[str]:
        return self._session.selected_group if self._session else None

    # ---------- transitions ----------

    async def start(self) -> bool:
        """
        Charge la banque puis fait le premier tirage. Renvoie True si cet appel a chargé.
        Les appels concurrents attendent le premier ; un seul appel au loader.
        """
        async with self._start_lock:
            if self._state != SessionState.unloaded:
                return False

            try:
                bank = await self._loader.load()
            except LoadFailure as e:
                self.last_error = e.message
                logger.error("chargement de la banque échoué : %s", e.message)
                raise

            self.last_error = None
            keys = self._configured_keys or bank.keys()
            self._session = Session(bank=bank, selected_group=keys[0] if keys else None)
            self._state = SessionState.loaded
            self._draw()
            return True

    def refresh(self) -> bool:
        """
        Nouveau tirage pour chaque groupe et remise à zéro des réponses.
        Sans données (non chargé ou banque vide) : ne fait rien et renvoie False.
        """
        if self._session is None or self._session.bank.is_empty:
            logger.info("refresh ignoré : aucune question chargée")
            return False
        self._draw()
        return True

    def _draw(self) -> None:
        sess = self._require_session()
        active = {
            key: select_active(sess.bank.group(key), size=self._size, rng=self._rng)
            for key in self.group_keys
        }
        # jeu actif et réponses remplacés ensemble
        sess.active, sess.answers = active, {}
        self._state = SessionState.active
        logger.info(
            "nouveau tirage : %s",
            ", ".join(f"{k}={len(v)}" for k, v in active.items()) or "aucun groupe",
        )

    # ---------- requêtes ----------

    def _require_session(self) -> Session:
        if self._session is None:
            raise LoadFailure(self.last_error or "Banque de questions non chargée.")
        return self._session

    def _require_group(self, key: str) -> str:
        if key not in self.group_keys:
            raise UnknownGroup(key)
        return key

    def active_set(self, key: str) -> ActiveSet:
        sess = self._require_session()
        return sess.active.get(self._require_group(key), ())

    def find_question(self, key: str, question_id: str) -> Question:
        for q in self.active_set(key):
            if q.id == question_id:
                return q
        raise UnknownQuestion(question_id)

    def select_group(self, key: str) -> None:
        sess = self._require_session()
        sess.selected_group = self._require_group(key)

    def submit(self, key: str, question_id: str, submitted: str) -> Outcome:
        sess = self._require_session()
        question = self.find_question(key, question_id)
        return evaluate(question, submitted, sess.answers)

    def score(self, key: Optional[str] = None) -> Score:
        sess = self._require_session()
        key = key if key is not None else sess.selected_group
        if key is None:
            return score_active((), sess.answers)
        return score_active(self.active_set(key), sess.answers)
