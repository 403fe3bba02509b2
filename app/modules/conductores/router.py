# app/modules/conductores/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import get_current_username
from app.shared.schemas.common import PaginatedResponse
from app.shared.schemas.snapshots import VehiculoSnapshot
from app.shared.services.editor_resolver import DatabaseEditorResolver
from app.modules.auditoria.schemas import AuditoriaResponse
from .service import ConductorService
from .asignacion_service import AsignacionService
from .schemas import ConductorCreate, ConductorUpdate, ConductorResponse

router = APIRouter()


def _service(db: Session) -> ConductorService:
    return ConductorService(db, DatabaseEditorResolver(db))


@router.get("/todos", response_model=List[ConductorResponse])
async def get_all_conductores(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_all_conductores()


@router.get("/todos/paginado", response_model=PaginatedResponse)
async def get_conductores_paginados(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    items, total = _service(db).get_conductores_page(page, size)
    return PaginatedResponse(
        items=[ConductorResponse.model_validate(c) for c in items],
        total=total,
        page=page,
        size=size,
        pages=(total + size - 1) // size
    )


@router.get("/activos", response_model=List[ConductorResponse])
async def get_conductores_activos(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_conductores_by_activo(True)


@router.get("/inactivos", response_model=List[ConductorResponse])
async def get_conductores_inactivos(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_conductores_by_activo(False)


@router.get("/ident/{identificacion}", response_model=ConductorResponse)
async def get_conductor_by_identificacion(
    identificacion: str,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_conductor_by_identificacion(identificacion)


@router.post("", response_model=ConductorResponse, status_code=status.HTTP_201_CREATED)
async def create_conductor(
    datos: ConductorCreate,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).create_conductor(datos, username)


@router.put("/asignar/{conductor_id}/vehiculo/{vehiculo_id}", response_model=ConductorResponse)
async def asignar_vehiculo(
    conductor_id: int,
    vehiculo_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    """
    Vincular un vehículo al conductor

    **Reglas:**
    - El vehículo debe estar activo y libre
    - Máximo de vehículos por conductor (409 si se supera)
    """
    service = AsignacionService(db, DatabaseEditorResolver(db))
    return service.assign_vehiculo(conductor_id, vehiculo_id, username)


@router.put("/desasignar/{conductor_id}/vehiculo/{vehiculo_id}", response_model=ConductorResponse)
async def desasignar_vehiculo(
    conductor_id: int,
    vehiculo_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    service = AsignacionService(db, DatabaseEditorResolver(db))
    return service.unassign_vehiculo(conductor_id, vehiculo_id, username)


@router.get("/auditoria/identificacion/{identificacion}", response_model=List[AuditoriaResponse])
async def get_historial_by_identificacion(
    identificacion: str,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_historial_by_identificacion(identificacion)


@router.get("/auditoria/nombre/{nombre}", response_model=List[AuditoriaResponse])
async def get_historial_by_nombre(
    nombre: str,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    """Búsqueda por nombre (contiene, sin distinguir mayúsculas)"""
    return _service(db).get_historial_by_nombre(nombre)


@router.get("/auditoria/{conductor_id}", response_model=List[AuditoriaResponse])
async def get_historial_conductor(
    conductor_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_historial(conductor_id)


@router.get("/{conductor_id}", response_model=ConductorResponse)
async def get_conductor(
    conductor_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_conductor(conductor_id)


@router.get("/{conductor_id}/vehiculos", response_model=List[VehiculoSnapshot])
async def get_vehiculos_conductor(
    conductor_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_vehiculos(conductor_id)


@router.put("/{conductor_id}", response_model=ConductorResponse)
async def update_conductor(
    conductor_id: int,
    datos: ConductorUpdate,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).update_conductor(conductor_id, datos, username)


@router.delete("/{conductor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conductor(
    conductor_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    _service(db).delete_conductor(conductor_id, username)


@router.patch("/{conductor_id}/estado", response_model=ConductorResponse)
async def change_estado_conductor(
    conductor_id: int,
    nuevo_estado: bool = Query(..., alias="nuevoEstado"),
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).change_activo(conductor_id, nuevo_estado, username)
