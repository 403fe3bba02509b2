# app/core/middleware.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import time
import logging

from app.config.settings import settings

logger = logging.getLogger(__name__)


def _cors_origins() -> list:
    if not settings.cors_origins:
        return ["*"]
    return [o.strip() for o in settings.cors_origins.split(",") if o.strip()]


def setup_middleware(app: FastAPI):
    """CORS y log de cada petición con su tiempo de respuesta"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        inicio = time.perf_counter()

        response = await call_next(request)

        duracion = time.perf_counter() - inicio
        response.headers["X-Process-Time"] = f"{duracion:.4f}"
        nivel = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            nivel,
            f"{request.method} {request.url.path} -> {response.status_code} ({duracion:.4f}s)"
        )

        return response
