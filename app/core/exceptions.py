# app/core/exceptions.py
"""
Errores de dominio del núcleo.

El núcleo no conoce HTTP: estas excepciones se lanzan desde los servicios
y app.main las traduce a códigos de estado.
"""


class DomainError(Exception):
    """Base de todas las violaciones de reglas de negocio"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResourceNotFoundError(DomainError):
    """Cliente, Conductor, Vehiculo, Pedido o Usuario inexistente"""


class ValidationConflictError(DomainError):
    """Dato duplicado, recurso inactivo, transición inválida o vehículo ya vinculado"""


class CapacityExceededError(DomainError):
    """El conductor ya tiene el máximo de vehículos asignados"""


class IntegrityConflictError(DomainError):
    """Eliminación bloqueada por registros que la referencian"""


class PermissionDeniedError(DomainError):
    """El editor no tiene el rol requerido para el cambio"""


class SnapshotSerializationError(DomainError):
    """No se pudo producir la instantánea de auditoría (nunca escapa del registrador)"""
