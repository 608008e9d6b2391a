import logging
import random
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from gapquiz.core.config import get_settings
from gapquiz.core.logging import setup_logging
from gapquiz.presentation.view import QuizView
from gapquiz.routers import quiz, system
from gapquiz.services.bank import JsonBankLoader, LoadFailure
from gapquiz.services.session import SessionController

logger = logging.getLogger(__name__)


def build_view(settings) -> QuizView:
    rng = random.Random(settings.SHUFFLE_SEED) if settings.SHUFFLE_SEED is not None else None
    controller = SessionController(
        loader=JsonBankLoader(settings.QUESTIONS_PATH),
        size=settings.ACTIVE_SET_SIZE,
        group_keys=settings.group_keys,
        rng=rng,
    )
    return QuizView(controller)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # chargement unique au démarrage ; un échec n'empêche pas l'app de servir (503 + message)
    try:
        await app.state.quiz.start()
    except LoadFailure as e:
        logger.error("démarrage sans questions : %s", e.message)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="API du quiz à trous (的/得, 在/再) : tirage, correction et score par groupe",
        lifespan=lifespan,
    )
    app.state.quiz = build_view(settings)

    # Middleware CORS
    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],  # fallback si mal configuré
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(system.router)
    app.include_router(quiz.router)

    # Redirect root → docs
    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse(url="/docs")

    return app


app = create_app()
