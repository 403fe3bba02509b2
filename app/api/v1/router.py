# app/api/v1/router.py
from fastapi import APIRouter
from app.modules.clientes.router import router as clientes_router
from app.modules.conductores.router import router as conductores_router
from app.modules.vehiculos.router import router as vehiculos_router
from app.modules.pedidos.router import router as pedidos_router

# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(
    clientes_router,
    prefix="/clientes",
    tags=["Clientes"]
)

api_router.include_router(
    conductores_router,
    prefix="/conductores",
    tags=["Conductores"]
)

api_router.include_router(
    vehiculos_router,
    prefix="/vehiculos",
    tags=["Vehículos"]
)

api_router.include_router(
    pedidos_router,
    prefix="/pedidos",
    tags=["Pedidos"]
)

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": "UrbanBack API v1",
        "status": "active",
        "docs": "/docs",
        "available_endpoints": {
            "clientes": "/api/v1/clientes",
            "conductores": "/api/v1/conductores",
            "vehiculos": "/api/v1/vehiculos",
            "pedidos": "/api/v1/pedidos"
        }
    }
