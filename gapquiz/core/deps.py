from fastapi import Request

from gapquiz.presentation.view import QuizView


def get_quiz_view(request: Request) -> QuizView:
    """
    Fournit la vue du quiz (une seule session par processus) en dépendance (DI).
    """
    return request.app.state.quiz
