# app/modules/vehiculos/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Tuple

from app.shared.database.models import Vehiculo


class VehiculoRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, vehiculo_id: int) -> Optional[Vehiculo]:
        return self.db.query(Vehiculo).filter(Vehiculo.id == vehiculo_id).first()

    def lock_by_id(self, vehiculo_id: int) -> Optional[Vehiculo]:
        """SELECT ... FOR UPDATE sobre la fila del vehículo"""
        return self.db.query(Vehiculo).filter(
            Vehiculo.id == vehiculo_id
        ).with_for_update().first()

    def get_all(self) -> List[Vehiculo]:
        return self.db.query(Vehiculo).order_by(Vehiculo.id).all()

    def get_page(self, page: int, size: int) -> Tuple[List[Vehiculo], int]:
        total = self.db.query(func.count(Vehiculo.id)).scalar() or 0
        items = self.db.query(Vehiculo).order_by(Vehiculo.id).offset(page * size).limit(size).all()
        return items, total

    def get_by_placa(self, placa: str) -> Optional[Vehiculo]:
        return self.db.query(Vehiculo).filter(Vehiculo.placa == placa).first()

    def get_by_activo(self, activo: bool) -> List[Vehiculo]:
        return self.db.query(Vehiculo).filter(Vehiculo.activo == activo).order_by(Vehiculo.id).all()

    def get_by_conductor(self, conductor_id: int) -> List[Vehiculo]:
        return self.db.query(Vehiculo).filter(
            Vehiculo.conductor_id == conductor_id
        ).order_by(Vehiculo.id).all()

    def count_by_conductor(self, conductor_id: int) -> int:
        """Vehículos actualmente vinculados al conductor"""
        return self.db.query(func.count(Vehiculo.id)).filter(
            Vehiculo.conductor_id == conductor_id
        ).scalar() or 0

    def save(self, vehiculo: Vehiculo) -> Vehiculo:
        self.db.add(vehiculo)
        self.db.flush()
        return vehiculo

    def delete(self, vehiculo: Vehiculo) -> None:
        self.db.delete(vehiculo)
        self.db.flush()

    def update_activo_status(self, vehiculo_id: int, activo: bool) -> int:
        return self.db.query(Vehiculo).filter(Vehiculo.id == vehiculo_id).update(
            {Vehiculo.activo: activo}, synchronize_session="fetch"
        )
