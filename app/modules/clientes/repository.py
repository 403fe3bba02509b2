# app/modules/clientes/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Tuple

from app.shared.database.models import Cliente


class ClienteRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, cliente_id: int) -> Optional[Cliente]:
        return self.db.query(Cliente).filter(Cliente.id == cliente_id).first()

    def get_all(self) -> List[Cliente]:
        return self.db.query(Cliente).order_by(Cliente.id).all()

    def get_page(self, page: int, size: int) -> Tuple[List[Cliente], int]:
        """Página 0-based de clientes y total de registros"""
        total = self.db.query(func.count(Cliente.id)).scalar() or 0
        items = self.db.query(Cliente).order_by(Cliente.id).offset(page * size).limit(size).all()
        return items, total

    def get_by_identificacion(self, identificacion: str) -> Optional[Cliente]:
        return self.db.query(Cliente).filter(Cliente.identificacion == identificacion).first()

    def get_by_activo(self, activo: bool) -> List[Cliente]:
        return self.db.query(Cliente).filter(Cliente.activo == activo).order_by(Cliente.id).all()

    def save(self, cliente: Cliente) -> Cliente:
        self.db.add(cliente)
        self.db.flush()
        return cliente

    def delete(self, cliente: Cliente) -> None:
        self.db.delete(cliente)
        self.db.flush()

    def update_activo_status(self, cliente_id: int, activo: bool) -> int:
        """UPDATE directo de la columna activo; retorna filas afectadas"""
        return self.db.query(Cliente).filter(Cliente.id == cliente_id).update(
            {Cliente.activo: activo}, synchronize_session="fetch"
        )
