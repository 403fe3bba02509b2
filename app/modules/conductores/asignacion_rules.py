# app/modules/conductores/asignacion_rules.py
from typing import Tuple
from sqlalchemy.orm import Session
import logging

from app.core.exceptions import (
    ResourceNotFoundError, ValidationConflictError, CapacityExceededError
)
from app.shared.constants import MAX_VEHICULOS_POR_CONDUCTOR
from app.shared.database.models import Conductor, Vehiculo
from app.modules.vehiculos.repository import VehiculoRepository
from .repository import ConductorRepository

logger = logging.getLogger(__name__)


class ReglasAsignacion:
    """
    Punto único de validación del vínculo Conductor ↔ Vehículo.

    Lo usan la asignación de vehículos a conductores y la asignación de
    conductor + vehículo a un pedido.
    """

    @staticmethod
    def bloquear_conductor_y_vehiculo(
        db: Session,
        conductor_id: int,
        vehiculo_id: int
    ) -> Tuple[Conductor, Vehiculo]:
        """
        Cargar conductor y vehículo con SELECT FOR UPDATE.

        Orden fijo: primero el conductor, luego el vehículo. El conteo de
        vehículos se hace con el conductor ya bloqueado.
        """
        conductor = ConductorRepository(db).lock_by_id(conductor_id)
        if not conductor:
            raise ResourceNotFoundError(f"Conductor no encontrado con ID: {conductor_id}")

        vehiculo = VehiculoRepository(db).lock_by_id(vehiculo_id)
        if not vehiculo:
            raise ResourceNotFoundError(f"Vehículo no encontrado con ID: {vehiculo_id}")

        return conductor, vehiculo

    @staticmethod
    def validar_vinculo(
        db: Session,
        conductor_id: int,
        vehiculo_id: int,
        exigir_conductor_activo: bool = False,
        permitir_mismo_conductor: bool = False
    ) -> Tuple[Conductor, Vehiculo]:
        """
        Validar que el vehículo pueda quedar vinculado al conductor.

        Args:
            exigir_conductor_activo: también rechaza conductores inactivos
            permitir_mismo_conductor: un vehículo ya vinculado a este mismo
                conductor no se rechaza; la capacidad se valida igual

        Returns:
            (Conductor, Vehiculo) bloqueados

        Raises:
            ResourceNotFoundError, ValidationConflictError, CapacityExceededError
        """
        conductor, vehiculo = ReglasAsignacion.bloquear_conductor_y_vehiculo(
            db, conductor_id, vehiculo_id
        )

        if exigir_conductor_activo and not conductor.activo:
            logger.warning(f"Conductor {conductor_id} inactivo")
            raise ValidationConflictError(f"El conductor con ID {conductor_id} no está activo.")

        if not vehiculo.activo:
            logger.warning(f"Vehículo {vehiculo_id} inactivo")
            raise ValidationConflictError(
                f"El vehículo con ID {vehiculo_id} está inactivo y no puede ser asignado."
            )

        if vehiculo.conductor_id == conductor.id:
            if not permitir_mismo_conductor:
                raise ValidationConflictError(
                    f"El vehículo con ID {vehiculo_id} ya está asignado a este conductor."
                )
        elif vehiculo.conductor_id is not None:
            logger.warning(
                f"Vehículo {vehiculo_id} ya vinculado al conductor {vehiculo.conductor_id}"
            )
            raise ValidationConflictError(
                f"El vehículo con ID {vehiculo_id} ya está asignado a otro conductor "
                f"(ID: {vehiculo.conductor_id})."
            )

        asignados = VehiculoRepository(db).count_by_conductor(conductor.id)
        if asignados >= MAX_VEHICULOS_POR_CONDUCTOR:
            logger.warning(f"Conductor {conductor_id} en capacidad máxima ({asignados})")
            raise CapacityExceededError(
                f"El conductor con ID {conductor_id} ya tiene el máximo de "
                f"{MAX_VEHICULOS_POR_CONDUCTOR} vehículos asignados."
            )

        return conductor, vehiculo
