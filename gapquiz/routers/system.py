from fastapi import APIRouter, Depends

from gapquiz.core.config import get_settings
from gapquiz.core.deps import get_quiz_view
from gapquiz.presentation.view import QuizView

router = APIRouter(tags=["system"])


@router.get("/health")
def health(view: QuizView = Depends(get_quiz_view)):
    # "ok" même sans questions : l'échec de chargement est rapporté, pas fatal
    s = get_settings()
    ctrl = view.controller
    return {
        "status": "ok",
        "version": s.APP_VERSION,
        "quiz": ctrl.state.value,
        "loadError": ctrl.last_error,
    }


@router.get("/version")
def version():
    s = get_settings()
    return {"name": s.APP_NAME, "version": s.APP_VERSION, "env": s.APP_ENV}
