from typing import List, Optional
from pydantic import BaseModel, Field

from gapquiz.models.quiz import RubyToken, Score


class ScoreOut(BaseModel):
    group: Optional[str] = None
    correct: int
    total: int
    percent: int
    display: str = Field(..., description="« correct / total (percent%) »")

    @classmethod
    def build(cls, s: Score, group: Optional[str] = None) -> "ScoreOut":
        return cls(group=group, correct=s.correct, total=s.total, percent=s.percent, display=s.display)


class GroupSummary(BaseModel):
    key: str
    total: int
    available: int = Field(..., description="Nombre de questions dans la banque")


class GroupListResponse(BaseModel):
    selected: Optional[str] = None
    groups: List[GroupSummary]


class QuizItemOut(BaseModel):
    id: str
    number: int
    before: List[RubyToken]
    after: List[RubyToken]
    options: List[str]
    html: str
    answered: bool = False
    chosen: Optional[str] = None


class ActiveSetResponse(BaseModel):
    group: str
    items: List[QuizItemOut]
    score: ScoreOut


class AnswerRequest(BaseModel):
    questionId: str
    answer: str = Field(..., min_length=1)


class AnswerResponse(BaseModel):
    isCorrect: bool
    correctAnswer: str
    explanation: Optional[str] = None  # seulement si faux
    feedback: str
    html: str
    score: ScoreOut


class RefreshResponse(BaseModel):
    refreshed: bool
    score: Optional[ScoreOut] = None
