# app/modules/auditoria/schemas.py
from pydantic import BaseModel
from typing import Any, Dict, Optional
from datetime import datetime

from app.shared.database.models import TipoOperacion


class AuditoriaResponse(BaseModel):
    id: int
    entidad_id: Optional[int] = None
    clave_natural: Optional[str] = None
    nombre_entidad: Optional[str] = None
    tipo_operacion: TipoOperacion
    usuario_editor_id: int
    fecha_cambio: datetime
    detalles_cambio: Dict[str, Any]

    class Config:
        from_attributes = True
