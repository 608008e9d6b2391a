import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from gapquiz.models.quiz import Outcome, Question, Score
from gapquiz.presentation.render import plain_sentence, render_sentence
from gapquiz.services.session import SessionController

logger = logging.getLogger(__name__)

FEEDBACK_CORRECT = "✅ 答對了！"
FEEDBACK_INCORRECT = "❌ 答錯了！"


class AlreadyAnswered(Exception):
    pass


class InvalidOption(ValueError):
    pass


@dataclass
class QuizItem:
    number: int  # à partir de 1
    question: Question
    chosen: Optional[str]
    html: str

    @property
    def answered(self) -> bool:
        return self.chosen is not None


@dataclass
class AnswerFeedback:
    outcome: Outcome
    feedback: str
    html: str
    score: Score


class QuizView:
    """
    État propre à l'affichage : onglet courant et verrou "déjà répondu" par question.
    Le verrou vit ici, pas dans l'AnswerState du contrôleur.
    """

    def __init__(self, controller: SessionController) -> None:
        self.controller = controller
        # (groupe, questionId) -> option choisie ; un verrou par question affichée
        self._answered: Dict[Tuple[str, str], str] = {}

    async def start(self) -> None:
        if await self.controller.start():
            self._answered.clear()

    def is_answered(self, key: str, question_id: str) -> bool:
        return (key, question_id) in self._answered

    def _html_for(self, key: str, question: Question) -> str:
        chosen = self._answered.get((key, question.id))
        if chosen is None:
            return render_sentence(question)
        css = "correct-highlight" if chosen == question.answer else "incorrect-highlight"
        return render_sentence(question, fill=question.answer, css_class=css)

    def items(self, key: str) -> List[QuizItem]:
        return [
            QuizItem(number=i, question=q, chosen=self._answered.get((key, q.id)), html=self._html_for(key, q))
            for i, q in enumerate(self.controller.active_set(key), start=1)
        ]

    def answer(self, key: str, question_id: str, option: str) -> AnswerFeedback:
        question = self.controller.find_question(key, question_id)
        if self.is_answered(key, question.id):
            raise AlreadyAnswered(question.id)
        if option not in question.options:
            raise InvalidOption(option)

        outcome = self.controller.submit(key, question.id, option)
        self._answered[(key, question.id)] = option
        logger.debug("%s: %s -> %s", key, plain_sentence(question, fill=option), outcome.is_correct)

        return AnswerFeedback(
            outcome=outcome,
            feedback=FEEDBACK_CORRECT if outcome.is_correct else FEEDBACK_INCORRECT,
            html=self._html_for(key, question),
            score=self.controller.score(),
        )

    def switch_group(self, key: str) -> Score:
        self.controller.select_group(key)
        return self.controller.score()

    def refresh(self) -> bool:
        refreshed = self.controller.refresh()
        if refreshed:
            self._answered.clear()
        return refreshed

    def score(self, key: Optional[str] = None) -> Score:
        return self.controller.score(key)
