# app/main.py
import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from app.config.settings import settings
from app.config.database import engine
from app.core.exceptions import (
    DomainError, ResourceNotFoundError, ValidationConflictError,
    CapacityExceededError, IntegrityConflictError, PermissionDeniedError
)
from app.core.middleware import setup_middleware
from app.shared.database.models import Base
from app.shared.schemas.common import ErrorResponse
from app.api.v1.router import api_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"{settings.app_name} iniciando - versión {settings.version}")
    logger.info(f"Entorno: {'Development' if settings.debug else 'Production'}")
    logger.info(f"Base de datos: {settings.database_url.split('@')[1] if '@' in settings.database_url else settings.database_url}")
    Base.metadata.create_all(bind=engine)

    yield

    # Shutdown
    logger.info(f"{settings.app_name} detenido")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Gestión de pedidos de transporte urbano: clientes, conductores, vehículos y auditoría",
    docs_url="/docs",
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)

# ==================== ERRORES DE DOMINIO ====================

STATUS_POR_ERROR = {
    ResourceNotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationConflictError: status.HTTP_400_BAD_REQUEST,
    CapacityExceededError: status.HTTP_409_CONFLICT,
    IntegrityConflictError: status.HTTP_409_CONFLICT,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
}

@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    status_code = STATUS_POR_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    body = ErrorResponse(message=exc.message, error_code=type(exc).__name__)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

# Include routers
app.include_router(api_router, prefix="/api/v1")

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "UrbanBack API - Gestión de pedidos de transporte",
        "version": settings.version,
        "status": "running",
        "environment": "production" if not settings.debug else "development",
        "docs": "/docs",
        "api": "/api/v1"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.version,
        "app": settings.app_name,
        "environment": "production" if not settings.debug else "development"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
