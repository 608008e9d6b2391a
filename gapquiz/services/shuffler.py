import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


def shuffle(seq: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Permutation aléatoire uniforme (Fisher-Yates) sur une copie privée.
    La séquence d'entrée n'est jamais modifiée.
    """
    rng = rng or random
    out = list(seq)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out
