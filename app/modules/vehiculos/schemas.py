# app/modules/vehiculos/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from decimal import Decimal
import re

from app.shared.constants import REGEX_PLACA
from app.shared.schemas.snapshots import VehiculoSnapshot


def _validar_placa(v: Optional[str]) -> Optional[str]:
    if v is not None and not re.match(REGEX_PLACA, v):
        raise ValueError('El formato de la placa debe ser XXX-NNN (ej. ABC-123)')
    return v


class VehiculoCreate(BaseModel):
    placa: str = Field(..., description="Formato XXX-NNN")
    capacidad_kg: Decimal = Field(..., gt=0)
    marca: str = Field(..., min_length=1, max_length=100)
    modelo: str = Field(..., min_length=1, max_length=100)
    anio: Optional[int] = Field(None, ge=1900, le=2100)
    activo: bool = True

    @field_validator('placa')
    @classmethod
    def validate_placa(cls, v):
        return _validar_placa(v)


class VehiculoUpdate(BaseModel):
    placa: Optional[str] = None
    capacidad_kg: Optional[Decimal] = Field(None, gt=0)
    marca: Optional[str] = Field(None, min_length=1, max_length=100)
    modelo: Optional[str] = Field(None, min_length=1, max_length=100)
    anio: Optional[int] = Field(None, ge=1900, le=2100)

    @field_validator('placa')
    @classmethod
    def validate_placa(cls, v):
        return _validar_placa(v)


class VehiculoResponse(VehiculoSnapshot):
    pass
