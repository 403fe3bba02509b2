# app/modules/pedidos/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import and_, func
from typing import List, Optional, Tuple
from datetime import datetime

from app.shared.database.models import Pedido, EstadoPedido


class PedidoRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, pedido_id: int) -> Optional[Pedido]:
        return self.db.query(Pedido).filter(Pedido.id == pedido_id).first()

    def lock_by_id(self, pedido_id: int) -> Optional[Pedido]:
        return self.db.query(Pedido).filter(Pedido.id == pedido_id).with_for_update().first()

    def get_all(self) -> List[Pedido]:
        return self.db.query(Pedido).order_by(Pedido.id).all()

    def get_page(self, page: int, size: int) -> Tuple[List[Pedido], int]:
        total = self.db.query(func.count(Pedido.id)).scalar() or 0
        items = self.db.query(Pedido).order_by(Pedido.id).offset(page * size).limit(size).all()
        return items, total

    def get_by_cliente_id(self, cliente_id: int) -> List[Pedido]:
        return self.db.query(Pedido).filter(Pedido.cliente_id == cliente_id).order_by(Pedido.id).all()

    def get_by_conductor_id(self, conductor_id: int) -> List[Pedido]:
        return self.db.query(Pedido).filter(Pedido.conductor_id == conductor_id).order_by(Pedido.id).all()

    def get_by_vehiculo_id(self, vehiculo_id: int) -> List[Pedido]:
        return self.db.query(Pedido).filter(Pedido.vehiculo_id == vehiculo_id).order_by(Pedido.id).all()

    def get_by_estado(self, estado: EstadoPedido) -> List[Pedido]:
        return self.db.query(Pedido).filter(Pedido.estado == estado).order_by(Pedido.id).all()

    def get_by_fecha_creacion_between(self, inicio: datetime, fin: datetime) -> List[Pedido]:
        """Rango cerrado [inicio, fin]"""
        return self.db.query(Pedido).filter(
            Pedido.fecha_creacion.between(inicio, fin)
        ).order_by(Pedido.fecha_creacion, Pedido.id).all()

    def get_by_cliente_id_and_estado(self, cliente_id: int, estado: EstadoPedido) -> List[Pedido]:
        return self.db.query(Pedido).filter(
            and_(Pedido.cliente_id == cliente_id, Pedido.estado == estado)
        ).order_by(Pedido.id).all()

    def get_by_conductor_id_and_estado(self, conductor_id: int, estado: EstadoPedido) -> List[Pedido]:
        return self.db.query(Pedido).filter(
            and_(Pedido.conductor_id == conductor_id, Pedido.estado == estado)
        ).order_by(Pedido.id).all()

    def save(self, pedido: Pedido) -> Pedido:
        self.db.add(pedido)
        self.db.flush()
        return pedido

    def delete(self, pedido: Pedido) -> None:
        self.db.delete(pedido)
        self.db.flush()
