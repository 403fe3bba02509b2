from decimal import Decimal

import pytest

from app.core.exceptions import (
    ResourceNotFoundError, ValidationConflictError,
    IntegrityConflictError, PermissionDeniedError
)
from app.modules.vehiculos.schemas import VehiculoCreate, VehiculoUpdate
from app.modules.vehiculos.service import VehiculoService
from app.shared.database.models import EstadoPedido, Vehiculo, VehiculoAudit, TipoOperacion


@pytest.fixture
def service(db, resolver):
    return VehiculoService(db, resolver)


def _datos(**kwargs):
    datos = {
        "placa": "XYZ-123",
        "capacidad_kg": "3500",
        "marca": "Hino",
        "modelo": "Dutro",
        "anio": 2019,
    }
    datos.update(kwargs)
    return VehiculoCreate(**datos)


def test_crear_vehiculo(db, service):
    vehiculo = service.create_vehiculo(_datos(), "admin")

    assert vehiculo.conductor_id is None
    registro = db.query(VehiculoAudit).one()
    assert registro.clave_natural == "XYZ-123"
    assert registro.nombre_entidad == "Hino Dutro"


def test_placa_con_formato_invalido():
    with pytest.raises(ValueError):
        _datos(placa="XYZ123")


def test_placa_duplicada(service):
    service.create_vehiculo(_datos(), "admin")

    with pytest.raises(ValidationConflictError):
        service.create_vehiculo(_datos(marca="Otra"), "admin")


def test_actualizar_campos(service):
    vehiculo = service.create_vehiculo(_datos(), "admin")

    actualizado = service.update_vehiculo(
        vehiculo.id,
        VehiculoUpdate(capacidad_kg=Decimal("4000"), marca="Isuzu", modelo="NPR", anio=2022),
        "operador"
    )

    assert actualizado.capacidad_kg == Decimal("4000")
    assert actualizado.marca == "Isuzu"
    assert actualizado.anio == 2022
    assert actualizado.placa == "XYZ-123"


def test_cambiar_placa_requiere_admin(service):
    vehiculo = service.create_vehiculo(_datos(), "admin")

    with pytest.raises(PermissionDeniedError):
        service.update_vehiculo(vehiculo.id, VehiculoUpdate(placa="QWE-987"), "operador")

    actualizado = service.update_vehiculo(vehiculo.id, VehiculoUpdate(placa="QWE-987"), "admin")
    assert actualizado.placa == "QWE-987"
    assert service.get_vehiculo_by_placa("QWE-987").id == vehiculo.id


def test_cambiar_activo_se_audita_como_actualizar(db, service):
    vehiculo = service.create_vehiculo(_datos(), "admin")

    service.change_activo(vehiculo.id, False, "admin")
    service.change_activo(vehiculo.id, False, "admin")

    historial = service.get_historial(vehiculo.id)
    assert [r.tipo_operacion for r in historial] == [TipoOperacion.ACTUALIZAR, TipoOperacion.CREAR]
    assert historial[0].detalles_cambio["datos"]["activo"] is False
    assert [v.id for v in service.get_vehiculos_by_activo(False)] == [vehiculo.id]


def test_eliminar_vehiculo_usado_en_pedido(db, service, crear_cliente, crear_pedido):
    vehiculo = service.create_vehiculo(_datos(), "admin")
    crear_pedido(crear_cliente(), vehiculo_id=vehiculo.id, estado=EstadoPedido.ASIGNADO)

    with pytest.raises(IntegrityConflictError):
        service.delete_vehiculo(vehiculo.id, "admin")
    assert db.query(Vehiculo).count() == 1


def test_eliminar_vehiculo(db, service):
    vehiculo = service.create_vehiculo(_datos(), "admin")
    vehiculo_id = vehiculo.id

    service.delete_vehiculo(vehiculo_id, "admin")

    assert db.query(Vehiculo).count() == 0
    assert len(service.get_historial_by_placa("XYZ-123")) == 2
    with pytest.raises(ResourceNotFoundError):
        service.get_vehiculo(vehiculo_id)


def test_historial_por_placa_desconocida(service):
    assert service.get_historial_by_placa("NOP-000") == []
