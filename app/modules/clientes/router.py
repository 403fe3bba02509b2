# app/modules/clientes/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from app.config.database import get_db
from app.core.auth.dependencies import get_current_username
from app.shared.schemas.common import PaginatedResponse
from app.shared.services.editor_resolver import DatabaseEditorResolver
from app.modules.auditoria.schemas import AuditoriaResponse
from .service import ClienteService
from .schemas import ClienteCreate, ClienteUpdate, ClienteResponse

router = APIRouter()


def _service(db: Session) -> ClienteService:
    return ClienteService(db, DatabaseEditorResolver(db))


@router.post("", response_model=ClienteResponse, status_code=status.HTTP_201_CREATED)
async def create_cliente(
    datos: ClienteCreate,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    """Registrar un nuevo cliente (identificación única)"""
    return _service(db).create_cliente(datos, username)


@router.get("/todos", response_model=List[ClienteResponse])
async def get_all_clientes(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_all_clientes()


@router.get("/todos/paginado", response_model=PaginatedResponse)
async def get_clientes_paginados(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    items, total = _service(db).get_clientes_page(page, size)
    return PaginatedResponse(
        items=[ClienteResponse.model_validate(c) for c in items],
        total=total,
        page=page,
        size=size,
        pages=(total + size - 1) // size
    )


@router.get("/activos", response_model=List[ClienteResponse])
async def get_clientes_activos(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_clientes_by_activo(True)


@router.get("/inactivos", response_model=List[ClienteResponse])
async def get_clientes_inactivos(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_clientes_by_activo(False)


@router.get("/auditoria/identificacion/{identificacion}", response_model=List[AuditoriaResponse])
async def get_historial_by_identificacion(
    identificacion: str,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_historial_by_identificacion(identificacion)


@router.get("/{cliente_id}", response_model=ClienteResponse)
async def get_cliente(
    cliente_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_cliente(cliente_id)


@router.put("/{cliente_id}", response_model=ClienteResponse)
async def update_cliente(
    cliente_id: int,
    datos: ClienteUpdate,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).update_cliente(cliente_id, datos, username)


@router.delete("/{cliente_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cliente(
    cliente_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    """Eliminación física; falla con 409 si el cliente tiene pedidos"""
    _service(db).delete_cliente(cliente_id, username)


@router.patch("/{cliente_id}/estado", response_model=ClienteResponse)
async def change_estado_cliente(
    cliente_id: int,
    nuevo_estado: bool = Query(..., alias="nuevoEstado"),
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    """Inactivación lógica o reactivación"""
    return _service(db).change_activo(cliente_id, nuevo_estado, username)


@router.get("/{cliente_id}/auditoria", response_model=List[AuditoriaResponse])
async def get_historial_cliente(
    cliente_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_historial(cliente_id)
