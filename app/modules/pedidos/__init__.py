# app/modules/pedidos/__init__.py
"""
Módulo de Pedidos - Ciclo de vida de los pedidos de transporte

- Creación (PENDIENTE por defecto)
- Actualización parcial con desasignación explícita de conductor/vehículo
- Asignación de conductor + vehículo (PENDIENTE -> ASIGNADO)
- Cambios de estado (COMPLETADO solo puede pasar a CANCELADO)
- Historial de auditoría

Arquitectura:
- router.py: Endpoints de pedidos
- service.py: Lógica de negocio y auditoría
- repository.py: Acceso a datos de pedidos
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import PedidoService
from .repository import PedidoRepository

__all__ = [
    "router",
    "PedidoService",
    "PedidoRepository"
]
