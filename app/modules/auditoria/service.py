# app/modules/auditoria/service.py
from sqlalchemy.orm import Session
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Type
from datetime import datetime
import logging

from app.core.exceptions import SnapshotSerializationError
from app.shared.database.models import (
    AuditoriaMixin, Cliente, ClienteAudit, Conductor, ConductorAudit,
    Vehiculo, VehiculoAudit, Pedido, PedidoAudit, TipoOperacion, Usuario
)
from app.shared.schemas.snapshots import (
    SNAPSHOT_VERSION, ClienteSnapshot, ConductorSnapshot,
    VehiculoSnapshot, PedidoSnapshot
)
from .repository import AuditoriaRepository

logger = logging.getLogger(__name__)

PLACEHOLDER_ERROR_SERIALIZACION = {"error": "No se pudo serializar el objeto"}


class EntidadAuditada(NamedTuple):
    modelo_audit: Type[AuditoriaMixin]
    snapshot: Any
    clave_natural: Callable[[Any], Optional[str]]
    nombre: Callable[[Any], Optional[str]]


REGISTRO_AUDITORIA: Dict[type, EntidadAuditada] = {
    Cliente: EntidadAuditada(
        ClienteAudit, ClienteSnapshot,
        lambda c: c.identificacion, lambda c: c.nombre_completo
    ),
    Conductor: EntidadAuditada(
        ConductorAudit, ConductorSnapshot,
        lambda c: c.identificacion, lambda c: c.nombre_completo
    ),
    Vehiculo: EntidadAuditada(
        VehiculoAudit, VehiculoSnapshot,
        lambda v: v.placa, lambda v: f"{v.marca} {v.modelo}"
    ),
    Pedido: EntidadAuditada(
        PedidoAudit, PedidoSnapshot,
        lambda p: None, lambda p: None
    ),
}


class AuditoriaService:
    """
    Registrador de auditoría append-only.

    Cada operación mutante de los servicios llama a registrar() exactamente una
    vez dentro de su transacción; el registro se confirma o se descarta junto
    con la mutación.
    """

    def __init__(self, db: Session):
        self.db = db

    def _config(self, tipo_entidad: type) -> EntidadAuditada:
        config = REGISTRO_AUDITORIA.get(tipo_entidad)
        if config is None:
            raise TypeError(f"Entidad sin auditoría configurada: {tipo_entidad.__name__}")
        return config

    def _repository(self, tipo_entidad: type) -> AuditoriaRepository:
        return AuditoriaRepository(self.db, self._config(tipo_entidad).modelo_audit)

    def _serializar(self, entidad: Any, config: EntidadAuditada) -> Dict[str, Any]:
        try:
            datos = config.snapshot.model_validate(entidad).model_dump(mode="json")
        except Exception as e:
            raise SnapshotSerializationError(str(e)) from e
        return {
            "version": SNAPSHOT_VERSION,
            "entidad": type(entidad).__name__,
            "datos": datos,
        }

    def registrar(
        self,
        entidad: Any,
        tipo_operacion: TipoOperacion,
        editor: Usuario
    ) -> AuditoriaMixin:
        """
        Agregar un registro de auditoría para la entidad.

        ELIMINAR guarda una instantánea vacía; el resto guarda la entidad
        completa. Un fallo de serialización se registra en el log y se guarda
        un marcador fijo en lugar de abortar la operación.
        """
        config = self._config(type(entidad))

        if tipo_operacion == TipoOperacion.ELIMINAR:
            detalles: Dict[str, Any] = {}
        else:
            try:
                detalles = self._serializar(entidad, config)
            except SnapshotSerializationError as e:
                logger.error(
                    f"Error serializando {type(entidad).__name__} {entidad.id} "
                    f"para auditoría: {e.message}"
                )
                detalles = dict(PLACEHOLDER_ERROR_SERIALIZACION)

        registro = config.modelo_audit(
            entidad_id=entidad.id,
            clave_natural=config.clave_natural(entidad),
            nombre_entidad=config.nombre(entidad),
            tipo_operacion=tipo_operacion,
            usuario_editor_id=editor.id,
            fecha_cambio=datetime.now(),
            detalles_cambio=detalles
        )

        self._repository(type(entidad)).save(registro)
        logger.info(
            f"Auditoría {tipo_operacion.value} de {type(entidad).__name__} "
            f"{entidad.id} por {editor.username}"
        )
        return registro

    # ==================== CONSULTAS ====================

    def historial_por_entidad_id(self, tipo_entidad: type, entidad_id: int) -> List[AuditoriaMixin]:
        return self._repository(tipo_entidad).get_by_entidad_id(entidad_id)

    def historial_por_clave_natural(self, tipo_entidad: type, clave_natural: str) -> List[AuditoriaMixin]:
        return self._repository(tipo_entidad).get_by_clave_natural(clave_natural)

    def historial_por_editor(self, tipo_entidad: type, username: str) -> List[AuditoriaMixin]:
        return self._repository(tipo_entidad).get_by_editor_username(username)

    def historial_por_editor_id(self, tipo_entidad: type, usuario_id: int) -> List[AuditoriaMixin]:
        return self._repository(tipo_entidad).get_by_editor_id(usuario_id)

    def historial_por_nombre(self, tipo_entidad: type, texto: str) -> List[AuditoriaMixin]:
        return self._repository(tipo_entidad).get_by_nombre_containing(texto)
