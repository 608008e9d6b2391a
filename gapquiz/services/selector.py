import random
from typing import Optional

from gapquiz.models.quiz import ActiveSet, QuestionGroup
from gapquiz.services.shuffler import shuffle

DEFAULT_ACTIVE_SET_SIZE = 10


def select_active(
    group: QuestionGroup,
    size: int = DEFAULT_ACTIVE_SET_SIZE,
    rng: Optional[random.Random] = None,
) -> ActiveSet:
    """
    Tire le jeu actif d'un groupe : mélange puis tronque à min(size, n).
    Groupe vide -> tuple vide (pas une erreur, le score affichera 0 / 0).
    """
    if not group.questions:
        return ()
    drawn = shuffle(group.questions, rng=rng)
    return tuple(drawn[: max(0, min(size, len(drawn)))])
