# app/modules/conductores/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date
import re

from app.shared.constants import REGEX_TELEFONO_COLOMBIA
from app.shared.schemas.snapshots import ConductorSnapshot


def _validar_telefono(v: Optional[str]) -> Optional[str]:
    if v is not None and not re.match(REGEX_TELEFONO_COLOMBIA, v):
        raise ValueError('Formato de teléfono no válido. Debe ser +57 seguido de 10 dígitos.')
    return v


def _validar_no_vacio(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError('El campo no puede estar vacío')
    return v.strip()


class ConductorCreate(BaseModel):
    identificacion: str = Field(..., min_length=1, max_length=20)
    nombre_completo: str = Field(..., min_length=1, max_length=100)
    fecha_nacimiento: date
    telefono: str = Field(..., description="+57 seguido de 10 dígitos")
    activo: bool = True

    @field_validator('identificacion', 'nombre_completo')
    @classmethod
    def validate_not_blank(cls, v):
        return _validar_no_vacio(v)

    @field_validator('telefono')
    @classmethod
    def validate_telefono(cls, v):
        return _validar_telefono(v)

    @field_validator('fecha_nacimiento')
    @classmethod
    def validate_fecha_nacimiento(cls, v):
        if v >= date.today():
            raise ValueError('La fecha de nacimiento debe estar en el pasado')
        return v


class ConductorUpdate(BaseModel):
    identificacion: Optional[str] = Field(None, min_length=1, max_length=20)
    nombre_completo: Optional[str] = Field(None, min_length=1, max_length=100)
    fecha_nacimiento: Optional[date] = None
    telefono: Optional[str] = None

    @field_validator('identificacion', 'nombre_completo')
    @classmethod
    def validate_not_blank(cls, v):
        return _validar_no_vacio(v)

    @field_validator('telefono')
    @classmethod
    def validate_telefono(cls, v):
        return _validar_telefono(v)


class ConductorResponse(ConductorSnapshot):
    pass
