import math
from typing import Iterable

from gapquiz.models.quiz import AnswerState, Question, Score


def percent_of(correct: int, total: int) -> int:
    # arrondi "au demi supérieur" (12.5 -> 13), pas l'arrondi bancaire de round()
    if total <= 0:
        return 0
    return int(math.floor(correct * 100 / total + 0.5))


def score(active: Iterable[Question], answers: AnswerState) -> Score:
    """
    Recalcule le score d'un jeu actif à partir de zéro.
    Une question sans entrée dans `answers` compte comme non juste.
    """
    questions = list(active)
    total = len(questions)
    correct = sum(1 for q in questions if answers.get(q.id) is True)
    return Score(correct=correct, total=total, percent=percent_of(correct, total))
