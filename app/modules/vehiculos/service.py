# app/modules/vehiculos/service.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Tuple
import logging

from app.config.database import atomic
from app.core.exceptions import (
    ResourceNotFoundError, ValidationConflictError,
    IntegrityConflictError, PermissionDeniedError
)
from app.shared.database.models import Vehiculo, VehiculoAudit, TipoOperacion
from app.shared.services.editor_resolver import EditorResolver
from app.modules.auditoria.service import AuditoriaService
from .repository import VehiculoRepository
from .schemas import VehiculoCreate, VehiculoUpdate

logger = logging.getLogger(__name__)


class VehiculoService:
    """CRUD de vehículos; el vínculo con el conductor lo escribe AsignacionService"""

    def __init__(self, db: Session, editor_resolver: EditorResolver):
        self.db = db
        self.repository = VehiculoRepository(db)
        self.auditoria = AuditoriaService(db)
        self.editor_resolver = editor_resolver

    def _get_or_404(self, vehiculo_id: int) -> Vehiculo:
        vehiculo = self.repository.get_by_id(vehiculo_id)
        if vehiculo is None:
            raise ResourceNotFoundError(f"Vehículo no encontrado con ID: {vehiculo_id}")
        return vehiculo

    def create_vehiculo(self, datos: VehiculoCreate, username_editor: str) -> Vehiculo:
        with atomic(self.db):
            editor = self.editor_resolver.resolve(username_editor)
            if self.repository.get_by_placa(datos.placa):
                raise ValidationConflictError(f"Ya existe un vehículo con la placa: {datos.placa}")

            vehiculo = Vehiculo(**datos.model_dump())
            self.repository.save(vehiculo)
            self.auditoria.registrar(vehiculo, TipoOperacion.CREAR, editor)

        logger.info(f"Vehículo {vehiculo.id} ({vehiculo.placa}) creado por {username_editor}")
        return vehiculo

    def update_vehiculo(self, vehiculo_id: int, datos: VehiculoUpdate, username_editor: str) -> Vehiculo:
        """Cambiar la placa requiere un editor ADMIN y que la placa nueva esté libre"""
        with atomic(self.db):
            vehiculo = self._get_or_404(vehiculo_id)
            editor = self.editor_resolver.resolve(username_editor)

            cambios = {k: v for k, v in datos.model_dump(exclude_unset=True).items() if v is not None}
            nueva_placa = cambios.pop("placa", None)
            if nueva_placa and nueva_placa.upper() != vehiculo.placa.upper():
                if not editor.is_admin:
                    logger.warning(f"{username_editor} intentó cambiar la placa del vehículo {vehiculo_id}")
                    raise PermissionDeniedError("Solo un administrador puede cambiar la placa de un vehículo.")
                if self.repository.get_by_placa(nueva_placa):
                    raise ValidationConflictError("La nueva placa ya está registrada en otro vehículo.")
                vehiculo.placa = nueva_placa

            for campo, valor in cambios.items():
                setattr(vehiculo, campo, valor)

            self.repository.save(vehiculo)
            self.auditoria.registrar(vehiculo, TipoOperacion.ACTUALIZAR, editor)

        logger.info(f"Vehículo {vehiculo_id} actualizado por {username_editor}")
        return vehiculo

    def delete_vehiculo(self, vehiculo_id: int, username_editor: str) -> None:
        with atomic(self.db):
            vehiculo = self._get_or_404(vehiculo_id)
            editor = self.editor_resolver.resolve(username_editor)

            try:
                self.repository.delete(vehiculo)
            except IntegrityError as e:
                logger.warning(f"Vehículo {vehiculo_id} tiene registros relacionados: {e.orig}")
                raise IntegrityConflictError(
                    f"No se puede eliminar el vehículo con ID {vehiculo_id} porque tiene "
                    f"registros relacionados. Considere inactivarlo en su lugar o desvincularlo primero."
                ) from e

            self.auditoria.registrar(vehiculo, TipoOperacion.ELIMINAR, editor)

        logger.info(f"Vehículo {vehiculo_id} eliminado por {username_editor}")

    def change_activo(self, vehiculo_id: int, activo: bool, username_editor: str) -> Vehiculo:
        """Activar o inactivar; se audita como ACTUALIZAR"""
        with atomic(self.db):
            vehiculo = self._get_or_404(vehiculo_id)
            editor = self.editor_resolver.resolve(username_editor)

            if vehiculo.activo == activo:
                return vehiculo

            if self.repository.update_activo_status(vehiculo_id, activo) == 0:
                raise ValidationConflictError(
                    f"No se pudo actualizar el estado del vehículo con ID: {vehiculo_id}"
                )
            vehiculo.activo = activo
            self.auditoria.registrar(vehiculo, TipoOperacion.ACTUALIZAR, editor)

        logger.info(f"Vehículo {vehiculo_id} activo={activo} por {username_editor}")
        return vehiculo

    # ==================== CONSULTAS ====================

    def get_vehiculo(self, vehiculo_id: int) -> Vehiculo:
        return self._get_or_404(vehiculo_id)

    def get_vehiculo_by_placa(self, placa: str) -> Vehiculo:
        vehiculo = self.repository.get_by_placa(placa)
        if vehiculo is None:
            raise ResourceNotFoundError(f"Vehículo no encontrado con placa: {placa}")
        return vehiculo

    def get_all_vehiculos(self) -> List[Vehiculo]:
        return self.repository.get_all()

    def get_vehiculos_page(self, page: int, size: int) -> Tuple[List[Vehiculo], int]:
        return self.repository.get_page(page, size)

    def get_vehiculos_by_activo(self, activo: bool) -> List[Vehiculo]:
        return self.repository.get_by_activo(activo)

    def get_historial(self, vehiculo_id: int) -> List[VehiculoAudit]:
        return self.auditoria.historial_por_entidad_id(Vehiculo, vehiculo_id)

    def get_historial_by_placa(self, placa: str) -> List[VehiculoAudit]:
        """Historial por placa; lista vacía si la placa nunca se registró"""
        return self.auditoria.historial_por_clave_natural(Vehiculo, placa)
