"""
Fixtures compartidas: SQLite en memoria, usuarios editores y fábricas de entidades.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import enable_sqlite_foreign_keys
from app.shared.database.models import (
    Base, Usuario, Rol, Cliente, Conductor, Vehiculo, Pedido, EstadoPedido
)
from app.shared.services.editor_resolver import DatabaseEditorResolver


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin(db):
    usuario = Usuario(username="admin", rol=Rol.ADMIN, activo=True)
    db.add(usuario)
    db.commit()
    return usuario


@pytest.fixture
def operador(db):
    usuario = Usuario(username="operador", rol=Rol.CONDUCTOR, activo=True)
    db.add(usuario)
    db.commit()
    return usuario


@pytest.fixture
def resolver(db, admin, operador):
    return DatabaseEditorResolver(db)


@pytest.fixture
def crear_cliente(db):
    contador = {"n": 0}

    def _crear(**kwargs):
        contador["n"] += 1
        datos = {
            "identificacion": f"CC-{contador['n']:04d}",
            "nombre_completo": f"Cliente {contador['n']}",
            "telefono": "3001234567",
            "direccion_residencia": "Calle 1 # 2-3",
            "activo": True,
        }
        datos.update(kwargs)
        cliente = Cliente(**datos)
        db.add(cliente)
        db.commit()
        return cliente
    return _crear


@pytest.fixture
def crear_conductor(db):
    contador = {"n": 0}

    def _crear(**kwargs):
        contador["n"] += 1
        datos = {
            "identificacion": f"CD-{contador['n']:04d}",
            "nombre_completo": f"Conductor {contador['n']}",
            "fecha_nacimiento": date(1985, 5, 20),
            "telefono": "+573001234567",
            "activo": True,
        }
        datos.update(kwargs)
        conductor = Conductor(**datos)
        db.add(conductor)
        db.commit()
        return conductor
    return _crear


@pytest.fixture
def crear_vehiculo(db):
    contador = {"n": 0}

    def _crear(**kwargs):
        contador["n"] += 1
        datos = {
            "placa": f"ABC-{contador['n']:03d}",
            "capacidad_kg": Decimal("1500.000"),
            "marca": "Chevrolet",
            "modelo": "NHR",
            "anio": 2020,
            "activo": True,
        }
        datos.update(kwargs)
        vehiculo = Vehiculo(**datos)
        db.add(vehiculo)
        db.commit()
        return vehiculo
    return _crear


@pytest.fixture
def crear_pedido(db):
    def _crear(cliente, **kwargs):
        datos = {
            "cliente_id": cliente.id,
            "direccion_origen": "Carrera 7 # 10-20",
            "direccion_destino": "Avenida 68 # 30-40",
            "estado": EstadoPedido.PENDIENTE,
            "peso_kg": Decimal("250.500"),
        }
        datos.update(kwargs)
        pedido = Pedido(**datos)
        db.add(pedido)
        db.commit()
        return pedido
    return _crear
