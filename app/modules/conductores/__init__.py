# app/modules/conductores/__init__.py
"""
Módulo de Conductores - Gestión de conductores y su flota

Incluye la asignación de vehículos a conductores (máximo
MAX_VEHICULOS_POR_CONDUCTOR por conductor).

Arquitectura:
- router.py: Endpoints de conductores y asignación
- service.py: CRUD, estado activo e historial
- asignacion_service.py: Vincular / desvincular vehículos
- repository.py: Acceso a datos de conductores
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import ConductorService
from .asignacion_service import AsignacionService
from .repository import ConductorRepository

__all__ = [
    "router",
    "ConductorService",
    "AsignacionService",
    "ConductorRepository"
]
