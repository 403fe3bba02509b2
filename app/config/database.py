# app/config/database.py
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from .settings import Settings, settings

logger = logging.getLogger(__name__)

def engine_options(config: Settings) -> dict:
    """Argumentos de create_engine según el motor configurado"""
    opciones = {
        "pool_pre_ping": True,
        "echo": config.debug
    }

    if config.is_sqlite:
        opciones["connect_args"] = {"check_same_thread": False}
        return opciones

    opciones["pool_recycle"] = 300
    if config.db_sslmode:
        opciones["connect_args"] = {"sslmode": config.db_sslmode}
    return opciones


# Create engine
engine = create_engine(settings.database_url, **engine_options(settings))

def enable_sqlite_foreign_keys(target_engine):
    """Activar la validación de foreign keys en cada conexión SQLite"""
    @event.listens_for(target_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

if settings.is_sqlite:
    enable_sqlite_foreign_keys(engine)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Database dependency
def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """
    Frontera transaccional de una operación de servicio.

    Los repositorios solo hacen add/flush; aquí se hace el commit único
    (mutación + auditoría) o el rollback completo si algo falla.
    """
    try:
        yield db
        db.commit()
    except Exception as e:
        logger.debug(f"Rollback por {type(e).__name__}: {e}")
        db.rollback()
        raise
