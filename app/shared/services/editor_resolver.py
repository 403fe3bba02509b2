# app/shared/services/editor_resolver.py
from abc import ABC, abstractmethod
from sqlalchemy.orm import Session

from app.core.exceptions import ResourceNotFoundError
from app.shared.database.models import Usuario


class EditorResolver(ABC):
    """Contrato para obtener el Usuario que ejecuta una operación a partir de su username."""

    @abstractmethod
    def resolve(self, username: str) -> Usuario:
        """Retorna el Usuario o lanza ResourceNotFoundError."""
        pass


class DatabaseEditorResolver(EditorResolver):
    """Resuelve el editor contra la tabla de usuarios de la misma sesión"""

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, username: str) -> Usuario:
        usuario = self.db.query(Usuario).filter(Usuario.username == username).first()
        if usuario is None:
            raise ResourceNotFoundError(f"Usuario editor no encontrado: {username}")
        return usuario
