# app/modules/vehiculos/__init__.py
"""
Módulo de Vehículos - Flota de transporte

Arquitectura:
- router.py: Endpoints de vehículos
- service.py: CRUD, estado activo e historial
- repository.py: Acceso a datos (incluye conteo por conductor y bloqueo de fila)
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import VehiculoService
from .repository import VehiculoRepository

__all__ = [
    "router",
    "VehiculoService",
    "VehiculoRepository"
]
