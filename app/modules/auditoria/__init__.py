# app/modules/auditoria/__init__.py
"""
Módulo de Auditoría - Historial append-only de cambios

Una tabla por entidad auditada (clientes, conductores, vehículos, pedidos).
Cada operación mutante agrega exactamente un registro con una instantánea
versionada de la entidad.

Arquitectura:
- service.py: Registrador y consultas de historial
- repository.py: Acceso a las tablas *_audit
- schemas.py: Modelo de respuesta
"""

from .service import AuditoriaService
from .repository import AuditoriaRepository

__all__ = [
    "AuditoriaService",
    "AuditoriaRepository"
]
