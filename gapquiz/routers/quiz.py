import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from gapquiz.core.deps import get_quiz_view
from gapquiz.presentation.view import AlreadyAnswered, InvalidOption, QuizView
from gapquiz.schemas.quiz import (
    ActiveSetResponse,
    AnswerRequest,
    AnswerResponse,
    GroupListResponse,
    GroupSummary,
    QuizItemOut,
    RefreshResponse,
    ScoreOut,
)
from gapquiz.services.bank import LoadFailure
from gapquiz.services.session import UnknownGroup, UnknownQuestion

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/quiz", tags=["quiz"])

# Les handlers sont async : exécutés sur la boucle, un événement à la fois, jusqu'au bout.


def _require_loaded(view: QuizView) -> None:
    if view.controller.session is None:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Chargement des questions échoué : {view.controller.last_error or 'banque non chargée'}",
        )


def _unknown_group(key: str) -> HTTPException:
    return HTTPException(status_code=HTTP_404_NOT_FOUND, detail=f"Groupe inconnu : {key}")


@router.get("/groups", response_model=GroupListResponse)
async def list_groups(view: QuizView = Depends(get_quiz_view)):
    _require_loaded(view)
    ctrl = view.controller
    bank = ctrl.session.bank
    return GroupListResponse(
        selected=ctrl.selected_group,
        groups=[
            GroupSummary(key=k, total=len(ctrl.active_set(k)), available=len(bank.questions(k)))
            for k in ctrl.group_keys
        ],
    )


@router.get("/groups/{key}", response_model=ActiveSetResponse)
async def get_group(key: str, view: QuizView = Depends(get_quiz_view)):
    _require_loaded(view)
    try:
        items = view.items(key)
        s = view.score(key)
    except UnknownGroup:
        raise _unknown_group(key)

    return ActiveSetResponse(
        group=key,
        items=[
            QuizItemOut(
                id=it.question.id,
                number=it.number,
                before=list(it.question.sentence_before_ruby),
                after=list(it.question.sentence_after_ruby),
                options=list(it.question.options),
                html=it.html,
                answered=it.answered,
                chosen=it.chosen,
            )
            for it in items
        ],
        score=ScoreOut.build(s, group=key),
    )


@router.post("/groups/{key}/select", response_model=ScoreOut)
async def select_group(key: str, view: QuizView = Depends(get_quiz_view)):
    _require_loaded(view)
    try:
        s = view.switch_group(key)
    except UnknownGroup:
        raise _unknown_group(key)
    return ScoreOut.build(s, group=key)


@router.post("/groups/{key}/answer", response_model=AnswerResponse)
async def answer_question(key: str, body: AnswerRequest, view: QuizView = Depends(get_quiz_view)):
    _require_loaded(view)
    try:
        fb = view.answer(key, body.questionId, body.answer)
    except UnknownGroup:
        raise _unknown_group(key)
    except UnknownQuestion:
        raise HTTPException(
            status_code=HTTP_404_NOT_FOUND,
            detail=f"Question {body.questionId} absente du tirage actuel de {key}.",
        )
    except AlreadyAnswered:
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail="Question déjà répondue.")
    except InvalidOption:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Réponse hors des options proposées.")

    return AnswerResponse(
        isCorrect=fb.outcome.is_correct,
        correctAnswer=fb.outcome.correct_answer,
        explanation=fb.outcome.explanation,
        feedback=fb.feedback,
        html=fb.html,
        score=ScoreOut.build(fb.score, group=view.controller.selected_group),
    )


@router.get("/score", response_model=ScoreOut)
async def get_score(
    group: Optional[str] = Query(default=None, description="Groupe (par défaut : onglet courant)"),
    view: QuizView = Depends(get_quiz_view),
):
    _require_loaded(view)
    try:
        s = view.score(group)
    except UnknownGroup:
        raise _unknown_group(group or "")
    return ScoreOut.build(s, group=group or view.controller.selected_group)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(view: QuizView = Depends(get_quiz_view)):
    # sans données : no-op, pas une erreur
    if view.controller.session is None:
        return RefreshResponse(refreshed=False)
    refreshed = view.refresh()
    return RefreshResponse(
        refreshed=refreshed,
        score=ScoreOut.build(view.score(), group=view.controller.selected_group),
    )


@router.post("/reload", response_model=GroupListResponse)
async def reload(view: QuizView = Depends(get_quiz_view)):
    """
    Relance explicite du chargement après un échec. Sans effet si déjà chargé.
    """
    try:
        await view.start()
    except LoadFailure as e:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Chargement des questions échoué : {e.message}",
        )
    return await list_groups(view)
