# app/modules/clientes/__init__.py
"""
Módulo de Clientes - Gestión de clientes que solicitan pedidos

Arquitectura:
- router.py: Endpoints de clientes
- service.py: Reglas de negocio y auditoría
- repository.py: Acceso a datos de clientes
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import ClienteService
from .repository import ClienteRepository

__all__ = [
    "router",
    "ClienteService",
    "ClienteRepository"
]
