# app/modules/clientes/service.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Tuple
import logging

from app.config.database import atomic
from app.core.exceptions import (
    ResourceNotFoundError, ValidationConflictError, IntegrityConflictError
)
from app.shared.database.models import Cliente, ClienteAudit, TipoOperacion
from app.shared.services.editor_resolver import EditorResolver
from app.modules.auditoria.service import AuditoriaService
from .repository import ClienteRepository
from .schemas import ClienteCreate, ClienteUpdate

logger = logging.getLogger(__name__)


class ClienteService:
    def __init__(self, db: Session, editor_resolver: EditorResolver):
        self.db = db
        self.repository = ClienteRepository(db)
        self.auditoria = AuditoriaService(db)
        self.editor_resolver = editor_resolver

    def _get_or_404(self, cliente_id: int) -> Cliente:
        cliente = self.repository.get_by_id(cliente_id)
        if cliente is None:
            raise ResourceNotFoundError(f"Cliente no encontrado con ID: {cliente_id}")
        return cliente

    # ==================== ESCRITURA ====================

    def create_cliente(self, datos: ClienteCreate, username_editor: str) -> Cliente:
        with atomic(self.db):
            if self.repository.get_by_identificacion(datos.identificacion):
                raise ValidationConflictError(
                    f"Ya existe un cliente con la identificación: {datos.identificacion}"
                )
            editor = self.editor_resolver.resolve(username_editor)

            cliente = Cliente(**datos.model_dump())
            self.repository.save(cliente)
            self.auditoria.registrar(cliente, TipoOperacion.CREAR, editor)

        logger.info(f"Cliente {cliente.id} creado por {username_editor}")
        return cliente

    def update_cliente(self, cliente_id: int, datos: ClienteUpdate, username_editor: str) -> Cliente:
        """Actualizar los campos enviados; una nueva identificación debe seguir siendo única"""
        with atomic(self.db):
            cliente = self._get_or_404(cliente_id)
            editor = self.editor_resolver.resolve(username_editor)

            cambios = {k: v for k, v in datos.model_dump(exclude_unset=True).items() if v is not None}
            nueva_identificacion = cambios.pop("identificacion", None)
            if nueva_identificacion and nueva_identificacion.lower() != cliente.identificacion.lower():
                if self.repository.get_by_identificacion(nueva_identificacion):
                    raise ValidationConflictError(
                        "La nueva identificación ya está registrada en otro cliente."
                    )
                cliente.identificacion = nueva_identificacion

            for campo, valor in cambios.items():
                setattr(cliente, campo, valor)

            self.repository.save(cliente)
            self.auditoria.registrar(cliente, TipoOperacion.ACTUALIZAR, editor)

        logger.info(f"Cliente {cliente_id} actualizado por {username_editor}")
        return cliente

    def delete_cliente(self, cliente_id: int, username_editor: str) -> None:
        with atomic(self.db):
            cliente = self._get_or_404(cliente_id)
            editor = self.editor_resolver.resolve(username_editor)

            try:
                self.repository.delete(cliente)
            except IntegrityError as e:
                logger.warning(f"Cliente {cliente_id} tiene registros relacionados: {e.orig}")
                raise IntegrityConflictError(
                    f"No se puede eliminar el cliente con ID {cliente_id} porque tiene "
                    f"registros relacionados (ej. pedidos). Considere inactivarlo en su lugar."
                ) from e

            self.auditoria.registrar(cliente, TipoOperacion.ELIMINAR, editor)

        logger.info(f"Cliente {cliente_id} eliminado por {username_editor}")

    def change_activo(self, cliente_id: int, activo: bool, username_editor: str) -> Cliente:
        """Activar o inactivar; sin cambio real no se escribe auditoría"""
        with atomic(self.db):
            cliente = self._get_or_404(cliente_id)
            editor = self.editor_resolver.resolve(username_editor)

            if cliente.activo == activo:
                return cliente

            if self.repository.update_activo_status(cliente_id, activo) == 0:
                raise ValidationConflictError(
                    f"No se pudo actualizar el estado del cliente con ID: {cliente_id}"
                )
            cliente.activo = activo
            self.auditoria.registrar(cliente, TipoOperacion.CAMBIO_ESTADO, editor)

        logger.info(f"Cliente {cliente_id} activo={activo} por {username_editor}")
        return cliente

    # ==================== CONSULTAS ====================

    def get_cliente(self, cliente_id: int) -> Cliente:
        return self._get_or_404(cliente_id)

    def get_all_clientes(self) -> List[Cliente]:
        return self.repository.get_all()

    def get_clientes_page(self, page: int, size: int) -> Tuple[List[Cliente], int]:
        return self.repository.get_page(page, size)

    def get_clientes_by_activo(self, activo: bool) -> List[Cliente]:
        return self.repository.get_by_activo(activo)

    def get_historial(self, cliente_id: int) -> List[ClienteAudit]:
        return self.auditoria.historial_por_entidad_id(Cliente, cliente_id)

    def get_historial_by_identificacion(self, identificacion: str) -> List[ClienteAudit]:
        cliente = self.repository.get_by_identificacion(identificacion)
        if cliente is None:
            raise ResourceNotFoundError(f"Identificación no encontrada: {identificacion}")
        return self.auditoria.historial_por_entidad_id(Cliente, cliente.id)
