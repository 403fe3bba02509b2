# app/modules/auditoria/repository.py
from sqlalchemy.orm import Session
from typing import List, Type

from app.shared.database.models import AuditoriaMixin, Usuario


class AuditoriaRepository:
    """
    Acceso append-only a una tabla de auditoría.

    Una instancia por tabla: ClienteAudit, ConductorAudit, VehiculoAudit o PedidoAudit.
    No expone update ni delete.
    """

    def __init__(self, db: Session, modelo_audit: Type[AuditoriaMixin]):
        self.db = db
        self.modelo = modelo_audit

    def save(self, registro: AuditoriaMixin) -> AuditoriaMixin:
        self.db.add(registro)
        self.db.flush()
        return registro

    def _query_ordenada(self):
        return self.db.query(self.modelo).order_by(
            self.modelo.fecha_cambio.desc(),
            self.modelo.id.desc()
        )

    def get_by_entidad_id(self, entidad_id: int) -> List[AuditoriaMixin]:
        """Historial de una entidad, más reciente primero"""
        return self._query_ordenada().filter(
            self.modelo.entidad_id == entidad_id
        ).all()

    def get_by_clave_natural(self, clave_natural: str) -> List[AuditoriaMixin]:
        """Historial por identificación o placa copiada al momento del cambio"""
        return self._query_ordenada().filter(
            self.modelo.clave_natural == clave_natural
        ).all()

    def get_by_editor_id(self, usuario_id: int) -> List[AuditoriaMixin]:
        return self._query_ordenada().filter(
            self.modelo.usuario_editor_id == usuario_id
        ).all()

    def get_by_editor_username(self, username: str) -> List[AuditoriaMixin]:
        return self._query_ordenada().join(
            Usuario, self.modelo.usuario_editor_id == Usuario.id
        ).filter(Usuario.username == username).all()

    def get_by_nombre_containing(self, texto: str) -> List[AuditoriaMixin]:
        """Búsqueda case-insensitive sobre el nombre copiado de la entidad"""
        return self._query_ordenada().filter(
            self.modelo.nombre_entidad.ilike(f"%{texto}%")
        ).all()
