# app/modules/vehiculos/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import get_current_username
from app.shared.schemas.common import PaginatedResponse
from app.shared.services.editor_resolver import DatabaseEditorResolver
from app.modules.auditoria.schemas import AuditoriaResponse
from .service import VehiculoService
from .schemas import VehiculoCreate, VehiculoUpdate, VehiculoResponse

router = APIRouter()


def _service(db: Session) -> VehiculoService:
    return VehiculoService(db, DatabaseEditorResolver(db))


@router.post("", response_model=VehiculoResponse, status_code=status.HTTP_201_CREATED)
async def create_vehiculo(
    datos: VehiculoCreate,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).create_vehiculo(datos, username)


@router.get("/todos", response_model=List[VehiculoResponse])
async def get_all_vehiculos(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_all_vehiculos()


@router.get("/todos/paginado", response_model=PaginatedResponse)
async def get_vehiculos_paginados(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    items, total = _service(db).get_vehiculos_page(page, size)
    return PaginatedResponse(
        items=[VehiculoResponse.model_validate(v) for v in items],
        total=total,
        page=page,
        size=size,
        pages=(total + size - 1) // size
    )


@router.get("/activos", response_model=List[VehiculoResponse])
async def get_vehiculos_activos(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_vehiculos_by_activo(True)


@router.get("/inactivos", response_model=List[VehiculoResponse])
async def get_vehiculos_inactivos(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_vehiculos_by_activo(False)


@router.get("/placa/{placa}", response_model=VehiculoResponse)
async def get_vehiculo_by_placa(
    placa: str,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_vehiculo_by_placa(placa)


@router.get("/auditoria/placa/{placa}", response_model=List[AuditoriaResponse])
async def get_historial_by_placa(
    placa: str,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_historial_by_placa(placa)


@router.get("/auditoria/{vehiculo_id}", response_model=List[AuditoriaResponse])
async def get_historial_vehiculo(
    vehiculo_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_historial(vehiculo_id)


@router.patch("/estado/{vehiculo_id}", response_model=VehiculoResponse)
async def change_estado_vehiculo(
    vehiculo_id: int,
    nuevo_estado: bool = Query(..., alias="nuevoEstado"),
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).change_activo(vehiculo_id, nuevo_estado, username)


@router.get("/{vehiculo_id}", response_model=VehiculoResponse)
async def get_vehiculo(
    vehiculo_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_vehiculo(vehiculo_id)


@router.put("/{vehiculo_id}", response_model=VehiculoResponse)
async def update_vehiculo(
    vehiculo_id: int,
    datos: VehiculoUpdate,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).update_vehiculo(vehiculo_id, datos, username)


@router.delete("/{vehiculo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehiculo(
    vehiculo_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    _service(db).delete_vehiculo(vehiculo_id, username)
