from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RubyToken(BaseModel):
    """Unité de texte affichée avec son annotation (注音)."""

    model_config = ConfigDict(frozen=True)

    word: str
    bopomo: str = ""


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    sentence_before_ruby: Tuple[RubyToken, ...] = Field(default=(), description="Texte avant le trou")
    sentence_after_ruby: Tuple[RubyToken, ...] = Field(default=(), description="Texte après le trou")
    gap_options: Tuple[str, ...] = Field(..., min_length=1, description="Propositions pour le trou")
    answer: str
    explanation: str = ""

    @model_validator(mode="after")
    def _answer_is_an_option(self) -> "Question":
        if self.answer not in self.gap_options:
            raise ValueError(f"la réponse {self.answer!r} n'est pas parmi les options de {self.id!r}")
        return self

    @property
    def prompt_segments(self) -> Tuple[Tuple[RubyToken, ...], Tuple[RubyToken, ...]]:
        return self.sentence_before_ruby, self.sentence_after_ruby

    @property
    def options(self) -> Tuple[str, ...]:
        return self.gap_options

    @property
    def correct_answer(self) -> str:
        return self.answer


class QuestionGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    questions: Tuple[Question, ...] = ()


# id de question -> True (juste) / False (faux), seulement pour les questions répondues
AnswerState = Dict[str, bool]

ActiveSet = Tuple[Question, ...]


class Outcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_correct: bool
    correct_answer: str
    explanation: Optional[str] = None  # uniquement si faux


class Score(BaseModel):
    model_config = ConfigDict(frozen=True)

    correct: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    percent: int = Field(..., ge=0, le=100)

    @property
    def display(self) -> str:
        return f"{self.correct} / {self.total} ({self.percent}%)"
