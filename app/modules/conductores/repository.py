# app/modules/conductores/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Tuple

from app.shared.database.models import Conductor


class ConductorRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, conductor_id: int) -> Optional[Conductor]:
        return self.db.query(Conductor).filter(Conductor.id == conductor_id).first()

    def lock_by_id(self, conductor_id: int) -> Optional[Conductor]:
        """SELECT ... FOR UPDATE sobre la fila del conductor"""
        return self.db.query(Conductor).filter(
            Conductor.id == conductor_id
        ).with_for_update().first()

    def get_all(self) -> List[Conductor]:
        return self.db.query(Conductor).order_by(Conductor.id).all()

    def get_page(self, page: int, size: int) -> Tuple[List[Conductor], int]:
        total = self.db.query(func.count(Conductor.id)).scalar() or 0
        items = self.db.query(Conductor).order_by(Conductor.id).offset(page * size).limit(size).all()
        return items, total

    def get_by_identificacion(self, identificacion: str) -> Optional[Conductor]:
        return self.db.query(Conductor).filter(Conductor.identificacion == identificacion).first()

    def get_by_activo(self, activo: bool) -> List[Conductor]:
        return self.db.query(Conductor).filter(Conductor.activo == activo).order_by(Conductor.id).all()

    def save(self, conductor: Conductor) -> Conductor:
        self.db.add(conductor)
        self.db.flush()
        return conductor

    def delete(self, conductor: Conductor) -> None:
        self.db.delete(conductor)
        self.db.flush()

    def update_activo_status(self, conductor_id: int, activo: bool) -> int:
        return self.db.query(Conductor).filter(Conductor.id == conductor_id).update(
            {Conductor.activo: activo}, synchronize_session="fetch"
        )
