# app/modules/clientes/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.shared.schemas.snapshots import ClienteSnapshot


class ClienteCreate(BaseModel):
    identificacion: str = Field(..., min_length=1, max_length=20, description="Documento de identidad")
    nombre_completo: str = Field(..., min_length=1, max_length=100)
    telefono: str = Field(..., min_length=1, max_length=15)
    direccion_residencia: str = Field(..., min_length=1, max_length=255)
    activo: bool = True

    @field_validator('identificacion', 'nombre_completo', 'telefono', 'direccion_residencia')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('El campo no puede estar vacío')
        return v.strip()


class ClienteUpdate(BaseModel):
    identificacion: Optional[str] = Field(None, min_length=1, max_length=20)
    nombre_completo: Optional[str] = Field(None, min_length=1, max_length=100)
    telefono: Optional[str] = Field(None, min_length=1, max_length=15)
    direccion_residencia: Optional[str] = Field(None, min_length=1, max_length=255)
    activo: Optional[bool] = None

    @field_validator('identificacion', 'nombre_completo', 'telefono', 'direccion_residencia')
    @classmethod
    def validate_not_blank(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError('El campo no puede estar vacío')
        return v.strip()


class ClienteResponse(ClienteSnapshot):
    pass
