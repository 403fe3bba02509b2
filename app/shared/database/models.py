# app/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date, Text,
    Numeric, ForeignKey, JSON, Enum as SAEnum, func
)
from sqlalchemy.orm import relationship, declarative_base, declared_attr
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime
import enum

Base = declarative_base()

# JSONB en PostgreSQL, JSON genérico en el resto (SQLite en tests)
JsonType = JSON().with_variant(JSONB(), "postgresql")


# =====================================================
# ENUMS
# =====================================================

class EstadoPedido(str, enum.Enum):
    PENDIENTE = "PENDIENTE"
    ASIGNADO = "ASIGNADO"
    EN_CAMINO = "EN_CAMINO"
    COMPLETADO = "COMPLETADO"
    CANCELADO = "CANCELADO"


class TipoOperacion(str, enum.Enum):
    CREAR = "CREAR"
    ACTUALIZAR = "ACTUALIZAR"
    CAMBIO_ESTADO = "CAMBIO_ESTADO"  # inactivación lógica o reactivación
    ELIMINAR = "ELIMINAR"


class Rol(str, enum.Enum):
    ADMIN = "ADMIN"
    CONDUCTOR = "CONDUCTOR"
    CLIENTE = "CLIENTE"


# =====================================================
# USUARIOS
# =====================================================

class Usuario(Base):
    """Usuario del sistema (editor de las operaciones auditadas)"""
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    rol = Column(SAEnum(Rol, name="rol_usuario"), nullable=False)
    activo = Column(Boolean, nullable=False, default=True)
    conductor_id = Column(Integer, ForeignKey("conductores.id"), unique=True, nullable=True)
    cliente_id = Column(Integer, ForeignKey("clientes.id"), unique=True, nullable=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    conductor = relationship("Conductor")
    cliente = relationship("Cliente")

    @property
    def is_admin(self) -> bool:
        return self.rol == Rol.ADMIN


# =====================================================
# CLIENTES, CONDUCTORES Y VEHÍCULOS
# =====================================================

class Cliente(Base):
    """Cliente que solicita pedidos"""
    __tablename__ = "clientes"

    id = Column(Integer, primary_key=True, index=True)
    identificacion = Column(String(20), unique=True, nullable=False, index=True)
    nombre_completo = Column(String(100), nullable=False)
    telefono = Column(String(15), nullable=False)
    direccion_residencia = Column(String(255), nullable=False)
    activo = Column(Boolean, nullable=False, default=True)

    pedidos = relationship("Pedido", back_populates="cliente")


class Conductor(Base):
    """Conductor; puede tener hasta MAX_VEHICULOS_POR_CONDUCTOR vehículos"""
    __tablename__ = "conductores"

    id = Column(Integer, primary_key=True, index=True)
    identificacion = Column(String(20), unique=True, nullable=False, index=True)
    nombre_completo = Column(String(100), nullable=False)
    fecha_nacimiento = Column(Date, nullable=False)
    telefono = Column(String(20), nullable=False)
    activo = Column(Boolean, nullable=False, default=True)

    # Solo lectura: el vínculo lo escribe Vehiculo.conductor_id
    vehiculos = relationship("Vehiculo", viewonly=True, order_by="Vehiculo.id")

    @property
    def vehiculos_ids(self):
        return [v.id for v in self.vehiculos]


class Vehiculo(Base):
    """Vehículo de transporte; a lo sumo un conductor a la vez"""
    __tablename__ = "vehiculos"

    id = Column(Integer, primary_key=True, index=True)
    placa = Column(String(7), unique=True, nullable=False, index=True)
    capacidad_kg = Column(Numeric(10, 3), nullable=False)
    marca = Column(String(100), nullable=False)
    modelo = Column(String(100), nullable=False)
    anio = Column(Integer)
    activo = Column(Boolean, nullable=False, default=True)
    conductor_id = Column(Integer, ForeignKey("conductores.id"), nullable=True, index=True)

    conductor = relationship("Conductor")


# =====================================================
# PEDIDOS
# =====================================================

class Pedido(Base):
    """Pedido de transporte: cliente + (opcional) conductor y vehículo"""
    __tablename__ = "pedidos"

    id = Column(Integer, primary_key=True, index=True)
    cliente_id = Column(Integer, ForeignKey("clientes.id"), nullable=False, index=True)
    direccion_origen = Column(String(255), nullable=False)
    direccion_destino = Column(String(255), nullable=False)
    fecha_creacion = Column(DateTime, nullable=False, default=datetime.now)
    fecha_recogida_estimada = Column(DateTime)
    fecha_recogida_real = Column(DateTime)
    fecha_entrega_estimada = Column(DateTime)
    fecha_entrega_real = Column(DateTime)
    estado = Column(SAEnum(EstadoPedido, name="estado_pedido"), nullable=False, default=EstadoPedido.PENDIENTE, index=True)
    vehiculo_id = Column(Integer, ForeignKey("vehiculos.id"), nullable=True, index=True)
    conductor_id = Column(Integer, ForeignKey("conductores.id"), nullable=True, index=True)
    peso_kg = Column(Numeric(10, 3))
    notas = Column(Text)

    # Relationships
    cliente = relationship("Cliente", back_populates="pedidos")
    vehiculo = relationship("Vehiculo")
    conductor = relationship("Conductor")


# =====================================================
# AUDITORÍA (append-only)
# =====================================================

class AuditoriaMixin:
    """
    Columnas comunes de los registros de auditoría.

    entidad_id no es FK: el historial sobrevive a la eliminación física de la entidad.
    clave_natural y nombre_entidad se copian al escribir para poder consultar por ellos.
    """
    id = Column(Integer, primary_key=True, index=True)
    entidad_id = Column(Integer, nullable=True, index=True)
    clave_natural = Column(String(50), index=True)
    nombre_entidad = Column(String(255))
    tipo_operacion = Column(SAEnum(TipoOperacion, name="tipo_operacion"), nullable=False)
    fecha_cambio = Column(DateTime, nullable=False, default=datetime.now, index=True)
    detalles_cambio = Column(JsonType, nullable=False, default=dict)

    @declared_attr
    def usuario_editor_id(cls):
        return Column(Integer, ForeignKey("usuarios.id"), nullable=False, index=True)

    @declared_attr
    def usuario_editor(cls):
        return relationship("Usuario")


class ClienteAudit(AuditoriaMixin, Base):
    """Historial de cambios de Cliente"""
    __tablename__ = "clientes_audit"


class ConductorAudit(AuditoriaMixin, Base):
    """Historial de cambios de Conductor"""
    __tablename__ = "conductores_audit"


class VehiculoAudit(AuditoriaMixin, Base):
    """Historial de cambios de Vehiculo"""
    __tablename__ = "vehiculos_audit"


class PedidoAudit(AuditoriaMixin, Base):
    """Historial de cambios de Pedido"""
    __tablename__ = "pedidos_audit"
