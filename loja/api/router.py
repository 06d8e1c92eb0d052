"""
API router aggregator — wires all endpoint modules together under ``/api``.
"""

from fastapi import APIRouter

from loja.api.endpoints import auth, clientes, fornecedores

api_router = APIRouter()

# Login, current user, user management
api_router.include_router(auth.router)

# Customers and suppliers
api_router.include_router(clientes.router)
api_router.include_router(fornecedores.router)
