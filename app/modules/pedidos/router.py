# app/modules/pedidos/router.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime

from app.config.database import get_db
from app.core.auth.dependencies import get_current_username
from app.shared.database.models import EstadoPedido
from app.shared.schemas.common import PaginatedResponse
from app.shared.services.editor_resolver import DatabaseEditorResolver
from app.modules.auditoria.schemas import AuditoriaResponse
from .service import PedidoService
from .schemas import PedidoCreate, PedidoUpdate, PedidoResponse

router = APIRouter()


def _service(db: Session) -> PedidoService:
    return PedidoService(db, DatabaseEditorResolver(db))


@router.post("", response_model=PedidoResponse, status_code=status.HTTP_201_CREATED)
async def create_pedido(
    datos: PedidoCreate,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    """
    Crear pedido

    - `estado` por defecto PENDIENTE
    - `fecha_creacion` por defecto el momento actual
    """
    return _service(db).create_pedido(datos, username)


@router.get("/todos", response_model=List[PedidoResponse])
async def get_all_pedidos(
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_all_pedidos()


@router.get("/todos/paginado", response_model=PaginatedResponse)
async def get_pedidos_paginados(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    items, total = _service(db).get_pedidos_page(page, size)
    return PaginatedResponse(
        items=[PedidoResponse.model_validate(p) for p in items],
        total=total,
        page=page,
        size=size,
        pages=(total + size - 1) // size
    )


@router.get("/estados-de-pedido", response_model=List[EstadoPedido])
async def get_estados_de_pedido(username: str = Depends(get_current_username)):
    return PedidoService.get_estados()


@router.get("/por-cliente/{cliente_id}", response_model=List[PedidoResponse])
async def get_pedidos_por_cliente(
    cliente_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_pedidos_by_cliente(cliente_id)


@router.get("/por-cliente/{cliente_id}/estado/{estado}", response_model=List[PedidoResponse])
async def get_pedidos_por_cliente_y_estado(
    cliente_id: int,
    estado: EstadoPedido,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_pedidos_by_cliente_and_estado(cliente_id, estado)


@router.get("/por-conductor/{conductor_id}", response_model=List[PedidoResponse])
async def get_pedidos_por_conductor(
    conductor_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_pedidos_by_conductor(conductor_id)


@router.get("/por-conductor/{conductor_id}/estado/{estado}", response_model=List[PedidoResponse])
async def get_pedidos_por_conductor_y_estado(
    conductor_id: int,
    estado: EstadoPedido,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_pedidos_by_conductor_and_estado(conductor_id, estado)


@router.get("/por-estado/{estado}", response_model=List[PedidoResponse])
async def get_pedidos_por_estado(
    estado: EstadoPedido,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_pedidos_by_estado(estado)


@router.get("/por-fecha-creacion", response_model=List[PedidoResponse])
async def get_pedidos_por_fecha_creacion(
    fecha_inicio: datetime = Query(..., alias="fechaInicio"),
    fecha_fin: datetime = Query(..., alias="fechaFin"),
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_pedidos_by_fecha_creacion(fecha_inicio, fecha_fin)


@router.get("/auditoria/por-usuario/{username_editor}", response_model=List[AuditoriaResponse])
async def get_historial_por_usuario(
    username_editor: str,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_historial_by_editor(username_editor)


@router.get("/auditoria/{pedido_id}", response_model=List[AuditoriaResponse])
async def get_historial_pedido(
    pedido_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_historial(pedido_id)


@router.put("/asignar/{pedido_id}", response_model=PedidoResponse)
async def asignar_conductor_y_vehiculo(
    pedido_id: int,
    conductor_id: int = Query(..., alias="conductorId"),
    vehiculo_id: int = Query(..., alias="vehiculoId"),
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    """
    Asignar conductor y vehículo al pedido

    **Reglas:**
    - Conductor y vehículo activos
    - Vehículo libre o ya vinculado a este conductor
    - Capacidad máxima del conductor (409)
    - PENDIENTE pasa a ASIGNADO
    """
    return _service(db).assign_conductor_and_vehiculo(pedido_id, conductor_id, vehiculo_id, username)


@router.put("/estado/{pedido_id}/{nuevo_estado}", response_model=PedidoResponse)
async def change_estado_pedido(
    pedido_id: int,
    nuevo_estado: EstadoPedido,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).change_estado_pedido(pedido_id, nuevo_estado, username)


@router.get("/{pedido_id}", response_model=PedidoResponse)
async def get_pedido(
    pedido_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).get_pedido(pedido_id)


@router.put("/{pedido_id}", response_model=PedidoResponse)
async def update_pedido(
    pedido_id: int,
    datos: PedidoUpdate,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    return _service(db).update_pedido(pedido_id, datos, username)


@router.delete("/{pedido_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pedido(
    pedido_id: int,
    username: str = Depends(get_current_username),
    db: Session = Depends(get_db)
):
    _service(db).delete_pedido(pedido_id, username)
