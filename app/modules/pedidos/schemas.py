# app/modules/pedidos/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.shared.database.models import EstadoPedido
from app.shared.schemas.common import ReferenciaId
from app.shared.schemas.snapshots import PedidoSnapshot


class PedidoCreate(BaseModel):
    cliente: ReferenciaId
    direccion_origen: str = Field(..., min_length=1, max_length=255)
    direccion_destino: str = Field(..., min_length=1, max_length=255)
    fecha_creacion: Optional[datetime] = None
    fecha_recogida_estimada: Optional[datetime] = None
    fecha_entrega_estimada: Optional[datetime] = None
    estado: Optional[EstadoPedido] = None
    conductor: Optional[ReferenciaId] = None
    vehiculo: Optional[ReferenciaId] = None
    peso_kg: Optional[Decimal] = Field(None, gt=0, description="Debe ser mayor a cero")
    notas: Optional[str] = None

    @field_validator('cliente')
    @classmethod
    def validate_cliente(cls, v):
        if v.id is None:
            raise ValueError('El pedido requiere un cliente')
        return v


class PedidoUpdate(BaseModel):
    """
    Actualización parcial.

    Escalares: null o ausente deja el valor actual.
    conductor / vehiculo: ausente deja el valor, null o {"id": null} desasigna,
    {"id": n} reemplaza.
    """
    cliente: Optional[ReferenciaId] = None
    direccion_origen: Optional[str] = Field(None, min_length=1, max_length=255)
    direccion_destino: Optional[str] = Field(None, min_length=1, max_length=255)
    fecha_recogida_estimada: Optional[datetime] = None
    fecha_recogida_real: Optional[datetime] = None
    fecha_entrega_estimada: Optional[datetime] = None
    fecha_entrega_real: Optional[datetime] = None
    conductor: Optional[ReferenciaId] = None
    vehiculo: Optional[ReferenciaId] = None
    peso_kg: Optional[Decimal] = Field(None, gt=0)
    notas: Optional[str] = None


class PedidoResponse(PedidoSnapshot):
    pass
