import uvicorn

from gapquiz.core.config import get_settings


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run("gapquiz.main:app", host="127.0.0.1", port=8000, log_level=settings.LOG_LEVEL.lower())
