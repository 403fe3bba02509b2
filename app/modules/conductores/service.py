# app/modules/conductores/service.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Tuple
import logging

from app.config.database import atomic
from app.core.exceptions import (
    ResourceNotFoundError, ValidationConflictError,
    IntegrityConflictError, PermissionDeniedError
)
from app.shared.database.models import Conductor, ConductorAudit, Vehiculo, TipoOperacion
from app.shared.services.editor_resolver import EditorResolver
from app.modules.auditoria.service import AuditoriaService
from app.modules.vehiculos.repository import VehiculoRepository
from .repository import ConductorRepository
from .schemas import ConductorCreate, ConductorUpdate

logger = logging.getLogger(__name__)


class ConductorService:
    def __init__(self, db: Session, editor_resolver: EditorResolver):
        self.db = db
        self.repository = ConductorRepository(db)
        self.vehiculo_repository = VehiculoRepository(db)
        self.auditoria = AuditoriaService(db)
        self.editor_resolver = editor_resolver

    def _get_or_404(self, conductor_id: int) -> Conductor:
        conductor = self.repository.get_by_id(conductor_id)
        if conductor is None:
            raise ResourceNotFoundError(f"Conductor no encontrado con ID: {conductor_id}")
        return conductor

    # ==================== ESCRITURA ====================

    def create_conductor(self, datos: ConductorCreate, username_editor: str) -> Conductor:
        with atomic(self.db):
            editor = self.editor_resolver.resolve(username_editor)
            if self.repository.get_by_identificacion(datos.identificacion):
                raise ValidationConflictError(
                    f"Ya existe un conductor con la identificación: {datos.identificacion}"
                )

            conductor = Conductor(**datos.model_dump())
            self.repository.save(conductor)
            self.auditoria.registrar(conductor, TipoOperacion.CREAR, editor)

        logger.info(f"Conductor {conductor.id} creado por {username_editor}")
        return conductor

    def update_conductor(self, conductor_id: int, datos: ConductorUpdate, username_editor: str) -> Conductor:
        """
        Actualizar datos del conductor.

        Cambiar la identificación requiere un editor ADMIN y que la nueva
        identificación no esté registrada en otro conductor.
        """
        with atomic(self.db):
            conductor = self._get_or_404(conductor_id)
            editor = self.editor_resolver.resolve(username_editor)

            cambios = {k: v for k, v in datos.model_dump(exclude_unset=True).items() if v is not None}
            nueva_identificacion = cambios.pop("identificacion", None)
            if nueva_identificacion and nueva_identificacion.lower() != conductor.identificacion.lower():
                if not editor.is_admin:
                    logger.warning(
                        f"{username_editor} intentó cambiar la identificación del conductor {conductor_id}"
                    )
                    raise PermissionDeniedError(
                        "Solo un administrador puede cambiar la identificación de un conductor."
                    )
                if self.repository.get_by_identificacion(nueva_identificacion):
                    raise ValidationConflictError(
                        "La nueva identificación ya está registrada en otro conductor."
                    )
                conductor.identificacion = nueva_identificacion

            for campo, valor in cambios.items():
                setattr(conductor, campo, valor)

            self.repository.save(conductor)
            self.auditoria.registrar(conductor, TipoOperacion.ACTUALIZAR, editor)

        logger.info(f"Conductor {conductor_id} actualizado por {username_editor}")
        return conductor

    def delete_conductor(self, conductor_id: int, username_editor: str) -> None:
        """Eliminación física; bloqueada mientras tenga vehículos vinculados"""
        with atomic(self.db):
            conductor = self._get_or_404(conductor_id)
            editor = self.editor_resolver.resolve(username_editor)

            asignados = self.vehiculo_repository.count_by_conductor(conductor_id)
            if asignados > 0:
                logger.warning(f"Conductor {conductor_id} tiene {asignados} vehículos; no se elimina")
                raise IntegrityConflictError(
                    f"No se puede eliminar el conductor con ID {conductor_id} porque tiene "
                    f"{asignados} vehículos asignados. Desasígnelos primero o considere "
                    f"inactivarlo lógicamente."
                )

            try:
                self.repository.delete(conductor)
            except IntegrityError as e:
                logger.warning(f"Conductor {conductor_id} tiene registros relacionados: {e.orig}")
                raise IntegrityConflictError(
                    f"No se puede eliminar el conductor con ID {conductor_id} debido a una "
                    f"violación de integridad referencial."
                ) from e

            self.auditoria.registrar(conductor, TipoOperacion.ELIMINAR, editor)

        logger.info(f"Conductor {conductor_id} eliminado por {username_editor}")

    def change_activo(self, conductor_id: int, activo: bool, username_editor: str) -> Conductor:
        with atomic(self.db):
            conductor = self._get_or_404(conductor_id)
            editor = self.editor_resolver.resolve(username_editor)

            if conductor.activo == activo:
                return conductor

            if self.repository.update_activo_status(conductor_id, activo) == 0:
                raise ValidationConflictError(
                    f"No se pudo actualizar el estado del conductor con ID: {conductor_id}"
                )
            conductor.activo = activo
            self.auditoria.registrar(conductor, TipoOperacion.CAMBIO_ESTADO, editor)

        logger.info(f"Conductor {conductor_id} activo={activo} por {username_editor}")
        return conductor

    # ==================== CONSULTAS ====================

    def get_conductor(self, conductor_id: int) -> Conductor:
        return self._get_or_404(conductor_id)

    def get_conductor_by_identificacion(self, identificacion: str) -> Conductor:
        conductor = self.repository.get_by_identificacion(identificacion)
        if conductor is None:
            raise ResourceNotFoundError(
                f"Conductor no encontrado con identificación: {identificacion}"
            )
        return conductor

    def get_all_conductores(self) -> List[Conductor]:
        return self.repository.get_all()

    def get_conductores_page(self, page: int, size: int) -> Tuple[List[Conductor], int]:
        return self.repository.get_page(page, size)

    def get_conductores_by_activo(self, activo: bool) -> List[Conductor]:
        return self.repository.get_by_activo(activo)

    def get_vehiculos(self, conductor_id: int) -> List[Vehiculo]:
        self._get_or_404(conductor_id)
        return self.vehiculo_repository.get_by_conductor(conductor_id)

    def get_historial(self, conductor_id: int) -> List[ConductorAudit]:
        return self.auditoria.historial_por_entidad_id(Conductor, conductor_id)

    def get_historial_by_identificacion(self, identificacion: str) -> List[ConductorAudit]:
        """Historial por identificación; lista vacía si no existe el conductor"""
        if self.repository.get_by_identificacion(identificacion) is None:
            return []
        return self.auditoria.historial_por_clave_natural(Conductor, identificacion)

    def get_historial_by_nombre(self, nombre: str) -> List[ConductorAudit]:
        return self.auditoria.historial_por_nombre(Conductor, nombre)
