# app/shared/schemas/snapshots.py
"""
Vista plana de cada entidad auditada.

Se usa como instantánea en detalles_cambio y como base de los schemas
de respuesta de cada módulo.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

from app.shared.database.models import EstadoPedido

SNAPSHOT_VERSION = 1


class ClienteSnapshot(BaseModel):
    id: int
    identificacion: str
    nombre_completo: str
    telefono: str
    direccion_residencia: str
    activo: bool

    class Config:
        from_attributes = True


class ConductorSnapshot(BaseModel):
    id: int
    identificacion: str
    nombre_completo: str
    fecha_nacimiento: date
    telefono: str
    activo: bool
    vehiculos_ids: List[int] = []

    class Config:
        from_attributes = True


class VehiculoSnapshot(BaseModel):
    id: int
    placa: str
    capacidad_kg: Decimal
    marca: str
    modelo: str
    anio: Optional[int] = None
    activo: bool
    conductor_id: Optional[int] = None

    class Config:
        from_attributes = True


class PedidoSnapshot(BaseModel):
    id: int
    cliente_id: int
    direccion_origen: str
    direccion_destino: str
    fecha_creacion: datetime
    fecha_recogida_estimada: Optional[datetime] = None
    fecha_recogida_real: Optional[datetime] = None
    fecha_entrega_estimada: Optional[datetime] = None
    fecha_entrega_real: Optional[datetime] = None
    estado: EstadoPedido
    vehiculo_id: Optional[int] = None
    conductor_id: Optional[int] = None
    peso_kg: Optional[Decimal] = None
    notas: Optional[str] = None

    class Config:
        from_attributes = True
