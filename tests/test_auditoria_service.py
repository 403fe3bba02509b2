import logging

import pytest

from app.modules.auditoria.service import (
    AuditoriaService, EntidadAuditada, REGISTRO_AUDITORIA, PLACEHOLDER_ERROR_SERIALIZACION
)
from app.shared.database.models import (
    Cliente, ClienteAudit, Conductor, Vehiculo, VehiculoAudit, TipoOperacion, Usuario
)


class SnapshotRoto:
    @classmethod
    def model_validate(cls, obj):
        raise ValueError("objeto no serializable")


@pytest.fixture
def auditoria(db):
    return AuditoriaService(db)


def test_instantanea_versionada(db, auditoria, admin, crear_cliente):
    cliente = crear_cliente(nombre_completo="Ana Pérez")

    registro = auditoria.registrar(cliente, TipoOperacion.CREAR, admin)
    db.commit()

    assert registro.entidad_id == cliente.id
    assert registro.clave_natural == cliente.identificacion
    assert registro.nombre_entidad == "Ana Pérez"
    assert registro.detalles_cambio == {
        "version": 1,
        "entidad": "Cliente",
        "datos": {
            "id": cliente.id,
            "identificacion": cliente.identificacion,
            "nombre_completo": "Ana Pérez",
            "telefono": cliente.telefono,
            "direccion_residencia": cliente.direccion_residencia,
            "activo": True,
        },
    }


def test_eliminar_guarda_instantanea_vacia(db, auditoria, admin, crear_vehiculo):
    vehiculo = crear_vehiculo()

    registro = auditoria.registrar(vehiculo, TipoOperacion.ELIMINAR, admin)
    db.commit()

    assert registro.detalles_cambio == {}
    assert registro.clave_natural == vehiculo.placa
    assert registro.nombre_entidad == "Chevrolet NHR"


def test_fallo_de_serializacion_guarda_marcador(db, auditoria, admin, crear_cliente, monkeypatch, caplog):
    monkeypatch.setitem(
        REGISTRO_AUDITORIA,
        Cliente,
        EntidadAuditada(ClienteAudit, SnapshotRoto, lambda c: c.identificacion, lambda c: c.nombre_completo)
    )
    cliente = crear_cliente()

    with caplog.at_level(logging.ERROR):
        registro = auditoria.registrar(cliente, TipoOperacion.ACTUALIZAR, admin)
    db.commit()

    assert registro.detalles_cambio == PLACEHOLDER_ERROR_SERIALIZACION
    assert db.query(ClienteAudit).count() == 1
    assert any("Error serializando Cliente" in r.message for r in caplog.records)


def test_historial_mas_reciente_primero(db, auditoria, admin, crear_conductor):
    conductor = crear_conductor()
    primero = auditoria.registrar(conductor, TipoOperacion.CREAR, admin)
    segundo = auditoria.registrar(conductor, TipoOperacion.ACTUALIZAR, admin)
    tercero = auditoria.registrar(conductor, TipoOperacion.CAMBIO_ESTADO, admin)
    db.commit()

    historial = auditoria.historial_por_entidad_id(Conductor, conductor.id)

    assert [r.id for r in historial] == [tercero.id, segundo.id, primero.id]


def test_consultas_por_clave_nombre_y_editor(db, auditoria, admin, operador, crear_conductor):
    c1 = crear_conductor(nombre_completo="Juan Gómez")
    c2 = crear_conductor(nombre_completo="María Gómez")
    auditoria.registrar(c1, TipoOperacion.CREAR, admin)
    auditoria.registrar(c2, TipoOperacion.CREAR, operador)
    db.commit()

    assert len(auditoria.historial_por_clave_natural(Conductor, c1.identificacion)) == 1
    assert len(auditoria.historial_por_nombre(Conductor, "gómez")) == 2
    assert [r.entidad_id for r in auditoria.historial_por_nombre(Conductor, "JUAN")] == [c1.id]
    assert [r.entidad_id for r in auditoria.historial_por_editor(Conductor, "operador")] == [c2.id]
    assert [r.entidad_id for r in auditoria.historial_por_editor_id(Conductor, admin.id)] == [c1.id]


def test_historial_sobrevive_eliminacion(db, auditoria, admin, crear_vehiculo):
    vehiculo = crear_vehiculo()
    vehiculo_id = vehiculo.id
    auditoria.registrar(vehiculo, TipoOperacion.CREAR, admin)
    db.delete(vehiculo)
    db.flush()
    auditoria.registrar(vehiculo, TipoOperacion.ELIMINAR, admin)
    db.commit()

    assert db.query(Vehiculo).count() == 0
    historial = auditoria.historial_por_entidad_id(Vehiculo, vehiculo_id)
    assert [r.tipo_operacion for r in historial] == [TipoOperacion.ELIMINAR, TipoOperacion.CREAR]
    assert db.query(VehiculoAudit).count() == 2


def test_entidad_sin_auditoria(auditoria, admin):
    with pytest.raises(TypeError):
        auditoria.registrar(Usuario(id=1, username="x"), TipoOperacion.CREAR, admin)
