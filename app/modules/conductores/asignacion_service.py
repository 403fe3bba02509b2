# app/modules/conductores/asignacion_service.py
from sqlalchemy.orm import Session
import logging

from app.config.database import atomic
from app.core.exceptions import ValidationConflictError
from app.shared.database.models import Conductor, TipoOperacion
from app.shared.services.editor_resolver import EditorResolver
from app.modules.auditoria.service import AuditoriaService
from app.modules.vehiculos.repository import VehiculoRepository
from .asignacion_rules import ReglasAsignacion

logger = logging.getLogger(__name__)


class AsignacionService:
    """
    Único escritor del vínculo Vehiculo.conductor_id.

    Cada operación bloquea conductor y vehículo, valida con ReglasAsignacion,
    escribe el vínculo y registra una auditoría ACTUALIZAR del conductor.
    Nunca modifica pedidos.
    """

    def __init__(self, db: Session, editor_resolver: EditorResolver):
        self.db = db
        self.vehiculo_repository = VehiculoRepository(db)
        self.auditoria = AuditoriaService(db)
        self.editor_resolver = editor_resolver

    def assign_vehiculo(self, conductor_id: int, vehiculo_id: int, username_editor: str) -> Conductor:
        with atomic(self.db):
            conductor, vehiculo = ReglasAsignacion.validar_vinculo(
                self.db, conductor_id, vehiculo_id
            )
            editor = self.editor_resolver.resolve(username_editor)

            vehiculo.conductor_id = conductor.id
            self.vehiculo_repository.save(vehiculo)

            # vehiculos es viewonly: recargar para que la instantánea incluya el nuevo vínculo
            self.db.refresh(conductor)
            self.auditoria.registrar(conductor, TipoOperacion.ACTUALIZAR, editor)

        logger.info(f"Vehículo {vehiculo_id} asignado al conductor {conductor_id} por {username_editor}")
        return conductor

    def unassign_vehiculo(self, conductor_id: int, vehiculo_id: int, username_editor: str) -> Conductor:
        with atomic(self.db):
            conductor, vehiculo = ReglasAsignacion.bloquear_conductor_y_vehiculo(
                self.db, conductor_id, vehiculo_id
            )
            editor = self.editor_resolver.resolve(username_editor)

            if vehiculo.conductor_id != conductor.id:
                logger.warning(
                    f"Vehículo {vehiculo_id} no está vinculado al conductor {conductor_id}"
                )
                raise ValidationConflictError(
                    f"El vehículo con ID {vehiculo_id} no está asignado al conductor "
                    f"con ID {conductor_id}."
                )

            vehiculo.conductor_id = None
            self.vehiculo_repository.save(vehiculo)

            self.db.refresh(conductor)
            self.auditoria.registrar(conductor, TipoOperacion.ACTUALIZAR, editor)

        logger.info(f"Vehículo {vehiculo_id} desasignado del conductor {conductor_id} por {username_editor}")
        return conductor
