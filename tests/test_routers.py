import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.config.database import get_db
from app.config.settings import settings
from app.main import app
from app.shared.constants import MAX_VEHICULOS_POR_CONDUCTOR
from app.shared.database.models import EstadoPedido


@pytest.fixture
def client(db, resolver):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _headers(username="admin"):
    token = jwt.encode({"sub": username}, settings.secret_key, algorithm=settings.algorithm)
    return {"Authorization": f"Bearer {token}"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_sin_token(client):
    response = client.get("/api/v1/clientes/todos")

    assert response.status_code in (401, 403)


def test_token_invalido(client):
    response = client.get("/api/v1/clientes/todos", headers={"Authorization": "Bearer basura"})

    assert response.status_code == 401


def test_crear_y_consultar_cliente(client):
    response = client.post(
        "/api/v1/clientes",
        json={
            "identificacion": "CC-900",
            "nombre_completo": "Sofía Torres",
            "telefono": "3201112233",
            "direccion_residencia": "Calle 80 # 20-10",
        },
        headers=_headers(),
    )

    assert response.status_code == 201
    cliente_id = response.json()["id"]
    detalle = client.get(f"/api/v1/clientes/{cliente_id}", headers=_headers())
    assert detalle.json()["nombre_completo"] == "Sofía Torres"
    historial = client.get(f"/api/v1/clientes/{cliente_id}/auditoria", headers=_headers())
    assert [r["tipo_operacion"] for r in historial.json()] == ["CREAR"]


def test_no_encontrado_es_404(client):
    response = client.get("/api/v1/pedidos/999", headers=_headers())

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "ResourceNotFoundError"


def test_conflicto_de_validacion_es_400(client, crear_cliente, crear_pedido):
    pedido = crear_pedido(crear_cliente(), estado=EstadoPedido.COMPLETADO)

    response = client.put(f"/api/v1/pedidos/estado/{pedido.id}/EN_CAMINO", headers=_headers())

    assert response.status_code == 400


def test_capacidad_excedida_es_409(client, crear_cliente, crear_conductor, crear_vehiculo, crear_pedido):
    conductor = crear_conductor()
    for _ in range(MAX_VEHICULOS_POR_CONDUCTOR):
        vehiculo = crear_vehiculo()
        response = client.put(
            f"/api/v1/conductores/asignar/{conductor.id}/vehiculo/{vehiculo.id}", headers=_headers()
        )
        assert response.status_code == 200
    pedido = crear_pedido(crear_cliente())
    libre = crear_vehiculo()

    response = client.put(
        f"/api/v1/pedidos/asignar/{pedido.id}",
        params={"conductorId": conductor.id, "vehiculoId": libre.id},
        headers=_headers(),
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "CapacityExceededError"


def test_eliminar_vehiculo_referenciado_es_409(client, crear_cliente, crear_vehiculo, crear_pedido):
    vehiculo = crear_vehiculo()
    crear_pedido(crear_cliente(), vehiculo_id=vehiculo.id)

    response = client.delete(f"/api/v1/vehiculos/{vehiculo.id}", headers=_headers())

    assert response.status_code == 409


def test_cambiar_placa_sin_ser_admin_es_403(client, crear_vehiculo):
    vehiculo = crear_vehiculo()

    response = client.put(
        f"/api/v1/vehiculos/{vehiculo.id}", json={"placa": "ZZZ-999"}, headers=_headers("operador")
    )

    assert response.status_code == 403


def test_actualizar_pedido_con_null_desasigna(client, crear_cliente, crear_conductor, crear_vehiculo, crear_pedido):
    conductor = crear_conductor()
    vehiculo = crear_vehiculo()
    pedido = crear_pedido(
        crear_cliente(), conductor_id=conductor.id, vehiculo_id=vehiculo.id, estado=EstadoPedido.ASIGNADO
    )

    response = client.put(
        f"/api/v1/pedidos/{pedido.id}",
        json={"conductor": None, "notas": "Sin conductor"},
        headers=_headers(),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["conductor_id"] is None
    assert body["vehiculo_id"] == vehiculo.id
    assert body["notas"] == "Sin conductor"


def test_cuerpo_invalido_es_422(client):
    response = client.post(
        "/api/v1/vehiculos",
        json={"placa": "malformada", "capacidad_kg": 100, "marca": "Ford", "modelo": "Cargo"},
        headers=_headers(),
    )

    assert response.status_code == 422


def test_estados_de_pedido(client):
    response = client.get("/api/v1/pedidos/estados-de-pedido", headers=_headers())

    assert response.json() == ["PENDIENTE", "ASIGNADO", "EN_CAMINO", "COMPLETADO", "CANCELADO"]
