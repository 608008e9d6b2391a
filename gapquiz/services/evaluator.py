import logging

from gapquiz.models.quiz import AnswerState, Outcome, Question

logger = logging.getLogger(__name__)


def evaluate(question: Question, submitted: str, answers: AnswerState) -> Outcome:
    """
    Corrige une réponse et l'enregistre dans `answers`.

    Aucune protection contre une seconde soumission pour la même question :
    c'est à l'appelant (la couche de présentation) de bloquer les doublons.
    """
    is_correct = submitted == question.answer
    answers[question.id] = is_correct
    logger.debug("question %s: %r -> %s", question.id, submitted, "ok" if is_correct else "ko")

    return Outcome(
        is_correct=is_correct,
        correct_answer=question.answer,
        explanation=None if is_correct else question.explanation,
    )
