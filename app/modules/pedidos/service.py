# app/modules/pedidos/service.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple
from datetime import datetime
import logging

from app.config.database import atomic
from app.core.exceptions import (
    ResourceNotFoundError, ValidationConflictError, IntegrityConflictError
)
from app.shared.database.models import (
    Pedido, PedidoAudit, Cliente, Conductor, Vehiculo, EstadoPedido, TipoOperacion
)
from app.shared.schemas.common import ReferenciaId
from app.shared.services.editor_resolver import EditorResolver
from app.modules.auditoria.service import AuditoriaService
from app.modules.clientes.repository import ClienteRepository
from app.modules.conductores.repository import ConductorRepository
from app.modules.conductores.asignacion_rules import ReglasAsignacion
from app.modules.vehiculos.repository import VehiculoRepository
from .repository import PedidoRepository
from .schemas import PedidoCreate, PedidoUpdate

logger = logging.getLogger(__name__)

CAMPOS_ESCALARES_ACTUALIZABLES = (
    "direccion_origen",
    "direccion_destino",
    "fecha_recogida_estimada",
    "fecha_recogida_real",
    "fecha_entrega_estimada",
    "fecha_entrega_real",
    "peso_kg",
    "notas",
)


class PedidoService:
    """
    Ciclo de vida de los pedidos.

    Único escritor de Pedido.estado, Pedido.conductor_id y Pedido.vehiculo_id.
    Cada operación mutante registra exactamente una auditoría en la misma
    transacción.
    """

    def __init__(self, db: Session, editor_resolver: EditorResolver):
        self.db = db
        self.repository = PedidoRepository(db)
        self.cliente_repository = ClienteRepository(db)
        self.conductor_repository = ConductorRepository(db)
        self.vehiculo_repository = VehiculoRepository(db)
        self.auditoria = AuditoriaService(db)
        self.editor_resolver = editor_resolver

    # ==================== HELPERS ====================

    def _get_or_404(self, pedido_id: int, bloquear: bool = False) -> Pedido:
        if bloquear:
            pedido = self.repository.lock_by_id(pedido_id)
        else:
            pedido = self.repository.get_by_id(pedido_id)
        if pedido is None:
            raise ResourceNotFoundError(f"Pedido no encontrado con ID: {pedido_id}")
        return pedido

    def _resolver_cliente(self, cliente_id: int) -> Cliente:
        cliente = self.cliente_repository.get_by_id(cliente_id)
        if cliente is None:
            raise ResourceNotFoundError(f"Cliente no encontrado con ID: {cliente_id}")
        return cliente

    def _resolver_conductor(self, conductor_id: int) -> Conductor:
        conductor = self.conductor_repository.get_by_id(conductor_id)
        if conductor is None:
            raise ResourceNotFoundError(f"Conductor no encontrado con ID: {conductor_id}")
        return conductor

    def _resolver_vehiculo(self, vehiculo_id: int) -> Vehiculo:
        vehiculo = self.vehiculo_repository.get_by_id(vehiculo_id)
        if vehiculo is None:
            raise ResourceNotFoundError(f"Vehículo no encontrado con ID: {vehiculo_id}")
        return vehiculo

    # ==================== ESCRITURA ====================

    def create_pedido(self, datos: PedidoCreate, username_editor: str) -> Pedido:
        """
        Crear pedido.

        Sin fecha_creacion se usa el momento actual; sin estado queda PENDIENTE.
        Conductor y vehículo opcionales deben existir si se envían.
        """
        with atomic(self.db):
            editor = self.editor_resolver.resolve(username_editor)
            cliente = self._resolver_cliente(datos.cliente.id)

            pedido = Pedido(
                cliente_id=cliente.id,
                direccion_origen=datos.direccion_origen,
                direccion_destino=datos.direccion_destino,
                fecha_creacion=datos.fecha_creacion or datetime.now(),
                fecha_recogida_estimada=datos.fecha_recogida_estimada,
                fecha_entrega_estimada=datos.fecha_entrega_estimada,
                estado=datos.estado or EstadoPedido.PENDIENTE,
                peso_kg=datos.peso_kg,
                notas=datos.notas
            )

            if datos.conductor is not None and datos.conductor.id is not None:
                pedido.conductor_id = self._resolver_conductor(datos.conductor.id).id
            if datos.vehiculo is not None and datos.vehiculo.id is not None:
                pedido.vehiculo_id = self._resolver_vehiculo(datos.vehiculo.id).id

            self.repository.save(pedido)
            self.auditoria.registrar(pedido, TipoOperacion.CREAR, editor)

        logger.info(f"Pedido {pedido.id} creado por {username_editor}")
        return pedido

    def update_pedido(self, pedido_id: int, datos: PedidoUpdate, username_editor: str) -> Pedido:
        """
        Actualización parcial del pedido.

        conductor y vehiculo distinguen tres casos: campo ausente (sin cambio),
        null o {"id": null} (desasigna) y {"id": n} (reemplaza).
        """
        with atomic(self.db):
            editor = self.editor_resolver.resolve(username_editor)
            pedido = self._get_or_404(pedido_id)
            enviados = datos.model_fields_set

            for campo in CAMPOS_ESCALARES_ACTUALIZABLES:
                valor = getattr(datos, campo)
                if valor is not None:
                    setattr(pedido, campo, valor)

            if datos.cliente is not None and datos.cliente.id is not None:
                pedido.cliente_id = self._resolver_cliente(datos.cliente.id).id

            if "conductor" in enviados:
                pedido.conductor_id = self._id_referencia(datos.conductor, self._resolver_conductor)
            if "vehiculo" in enviados:
                pedido.vehiculo_id = self._id_referencia(datos.vehiculo, self._resolver_vehiculo)

            self.repository.save(pedido)
            self.auditoria.registrar(pedido, TipoOperacion.ACTUALIZAR, editor)

        logger.info(f"Pedido {pedido_id} actualizado por {username_editor}")
        return pedido

    @staticmethod
    def _id_referencia(referencia: Optional[ReferenciaId], resolver) -> Optional[int]:
        if referencia is None or referencia.id is None:
            return None
        return resolver(referencia.id).id

    def delete_pedido(self, pedido_id: int, username_editor: str) -> None:
        with atomic(self.db):
            pedido = self._get_or_404(pedido_id)
            editor = self.editor_resolver.resolve(username_editor)

            try:
                self.repository.delete(pedido)
            except IntegrityError as e:
                logger.warning(f"Pedido {pedido_id} tiene registros relacionados: {e.orig}")
                raise IntegrityConflictError(
                    f"No se puede eliminar el pedido con ID {pedido_id} debido a una "
                    f"restricción de integridad de datos."
                ) from e

            self.auditoria.registrar(pedido, TipoOperacion.ELIMINAR, editor)

        logger.info(f"Pedido {pedido_id} eliminado por {username_editor}")

    def assign_conductor_and_vehiculo(
        self,
        pedido_id: int,
        conductor_id: int,
        vehiculo_id: int,
        username_editor: str
    ) -> Pedido:
        """
        Asignar conductor y vehículo al pedido.

        Aplica las mismas reglas que la asignación de vehículos a conductores
        (activo, exclusividad, capacidad) y además exige conductor activo. Un
        vehículo ya vinculado a este conductor se acepta si el conductor no
        está en su capacidad máxima. No modifica el vínculo
        Vehiculo.conductor_id. Un pedido PENDIENTE pasa a ASIGNADO.
        """
        with atomic(self.db):
            editor = self.editor_resolver.resolve(username_editor)
            pedido = self._get_or_404(pedido_id, bloquear=True)
            conductor, vehiculo = ReglasAsignacion.validar_vinculo(
                self.db,
                conductor_id,
                vehiculo_id,
                exigir_conductor_activo=True,
                permitir_mismo_conductor=True
            )

            pedido.conductor_id = conductor.id
            pedido.vehiculo_id = vehiculo.id
            if pedido.estado == EstadoPedido.PENDIENTE:
                pedido.estado = EstadoPedido.ASIGNADO

            self.repository.save(pedido)
            self.auditoria.registrar(pedido, TipoOperacion.ACTUALIZAR, editor)

        logger.info(
            f"Pedido {pedido_id} asignado a conductor {conductor_id} / vehículo {vehiculo_id} "
            f"por {username_editor}"
        )
        return pedido

    def change_estado_pedido(self, pedido_id: int, nuevo_estado: EstadoPedido, username_editor: str) -> Pedido:
        """Un pedido COMPLETADO solo puede pasar a CANCELADO; el resto de transiciones se permite"""
        with atomic(self.db):
            editor = self.editor_resolver.resolve(username_editor)
            pedido = self._get_or_404(pedido_id, bloquear=True)

            if pedido.estado == EstadoPedido.COMPLETADO and nuevo_estado != EstadoPedido.CANCELADO:
                logger.warning(f"Transición inválida del pedido {pedido_id}: COMPLETADO -> {nuevo_estado.value}")
                raise ValidationConflictError(
                    f"No se puede cambiar el estado de un pedido completado a "
                    f"{nuevo_estado.value} (solo CANCELADO)."
                )

            pedido.estado = nuevo_estado
            self.repository.save(pedido)
            self.auditoria.registrar(pedido, TipoOperacion.ACTUALIZAR, editor)

        logger.info(f"Pedido {pedido_id} -> {nuevo_estado.value} por {username_editor}")
        return pedido

    # ==================== CONSULTAS ====================

    def get_pedido(self, pedido_id: int) -> Pedido:
        return self._get_or_404(pedido_id)

    def get_all_pedidos(self) -> List[Pedido]:
        return self.repository.get_all()

    def get_pedidos_page(self, page: int, size: int) -> Tuple[List[Pedido], int]:
        return self.repository.get_page(page, size)

    def get_pedidos_by_cliente(self, cliente_id: int) -> List[Pedido]:
        return self.repository.get_by_cliente_id(cliente_id)

    def get_pedidos_by_conductor(self, conductor_id: int) -> List[Pedido]:
        return self.repository.get_by_conductor_id(conductor_id)

    def get_pedidos_by_estado(self, estado: EstadoPedido) -> List[Pedido]:
        return self.repository.get_by_estado(estado)

    def get_pedidos_by_fecha_creacion(self, inicio: datetime, fin: datetime) -> List[Pedido]:
        return self.repository.get_by_fecha_creacion_between(inicio, fin)

    def get_pedidos_by_conductor_and_estado(self, conductor_id: int, estado: EstadoPedido) -> List[Pedido]:
        return self.repository.get_by_conductor_id_and_estado(conductor_id, estado)

    def get_pedidos_by_cliente_and_estado(self, cliente_id: int, estado: EstadoPedido) -> List[Pedido]:
        return self.repository.get_by_cliente_id_and_estado(cliente_id, estado)

    def is_pedido_of_cliente(self, pedido_id: int, cliente_id: int) -> bool:
        pedido = self.repository.get_by_id(pedido_id)
        return pedido is not None and pedido.cliente_id == cliente_id

    def is_pedido_assigned_to_conductor(self, pedido_id: int, conductor_id: int) -> bool:
        pedido = self.repository.get_by_id(pedido_id)
        return pedido is not None and pedido.conductor_id == conductor_id

    @staticmethod
    def get_estados() -> List[EstadoPedido]:
        return list(EstadoPedido)

    def get_historial(self, pedido_id: int) -> List[PedidoAudit]:
        return self.auditoria.historial_por_entidad_id(Pedido, pedido_id)

    def get_historial_by_editor(self, username_editor: str) -> List[PedidoAudit]:
        """Cambios de pedidos hechos por un usuario; NotFound si el usuario no existe"""
        editor = self.editor_resolver.resolve(username_editor)
        return self.auditoria.historial_por_editor_id(Pedido, editor.id)
