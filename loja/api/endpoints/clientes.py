"""
Cliente CRUD endpoints.

- GET operations require any authenticated user.
- POST / PUT / DELETE operations require ADMIN or MASTER_ADMIN.
"""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query

from loja.api.common import (build_filters, ensure_unique, get_or_404,
                             page_envelope, utcnow)
from loja.api.deps import get_current_user, get_gateway, require_admin
from loja.core.exceptions import NotFoundError
from loja.db.gateway import DataGateway, Order, Pagination
from loja.schemas.cliente import (ClienteCreate, ClienteOrderBy, ClienteRead,
                                  ClienteUpdate)
from loja.schemas.common import Envelope, ListEnvelope
from loja.schemas.user import AuthenticatedUser

router = APIRouter(
    prefix="/clientes",
    tags=["clientes"],
    dependencies=[Depends(get_current_user)],
)
logger = logging.getLogger(__name__)

CLIENTES = "clientes"
NOT_FOUND = "Cliente não encontrado"


@router.get("", response_model=ListEnvelope[ClienteRead])
async def list_clientes(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100, alias="pageSize"),
    nome: str | None = None,
    cpf: str | None = None,
    codigo: str | None = None,
    loja: str | None = None,
    cidade: str | None = None,
    uf: str | None = Query(default=None, max_length=2),
    order_by: ClienteOrderBy = Query(default="created_at", alias="orderBy"),
    order_direction: Literal["asc", "desc"] = Query(default="desc", alias="orderDirection"),
    gateway: DataGateway = Depends(get_gateway),
) -> dict:
    filters = build_filters(
        {"nome": nome, "cpf": cpf, "codigo": codigo, "loja": loja, "cidade": cidade, "uf": uf},
        like=("nome", "cpf", "codigo", "loja", "cidade"),
        exact=("uf",),
    )
    logger.debug("Listing clientes with filters %s", filters)

    result = await gateway.select(
        CLIENTES,
        "*",
        filters=filters,
        order=Order(order_by, ascending=order_direction == "asc"),
        pagination=Pagination(page, page_size),
    )
    logger.info("Found %d clientes", result["count"])
    return page_envelope(result, page, page_size)


@router.get("/{cliente_id}", response_model=Envelope[ClienteRead])
async def get_cliente(
    cliente_id: str,
    gateway: DataGateway = Depends(get_gateway),
) -> dict:
    cliente = await get_or_404(gateway, CLIENTES, cliente_id, NOT_FOUND)
    return {"success": True, "data": cliente}


@router.post("", response_model=Envelope[ClienteRead], status_code=201)
async def create_cliente(
    body: ClienteCreate,
    gateway: DataGateway = Depends(get_gateway),
    current_user: AuthenticatedUser = Depends(require_admin),
) -> dict:
    await ensure_unique(gateway, CLIENTES, "cpf", body.cpf, "Cliente já existe com este CPF")
    await ensure_unique(gateway, CLIENTES, "codigo", body.codigo, "Cliente já existe com este código")

    record = body.model_dump()
    record["created_at"] = utcnow()
    record["created_by"] = current_user.id

    created = await gateway.insert(CLIENTES, record)
    logger.info("Created cliente %s (codigo %s)", created[0]["id"], body.codigo)
    return {"success": True, "data": created[0]}


@router.put("/{cliente_id}", response_model=Envelope[ClienteRead])
async def update_cliente(
    cliente_id: str,
    body: ClienteUpdate,
    gateway: DataGateway = Depends(get_gateway),
    current_user: AuthenticatedUser = Depends(require_admin),
) -> dict:
    existing = await get_or_404(gateway, CLIENTES, cliente_id, NOT_FOUND)
    patch = body.model_dump(exclude_unset=True)

    if patch.get("cpf") and patch["cpf"] != existing["cpf"]:
        await ensure_unique(gateway, CLIENTES, "cpf", patch["cpf"], "CPF já existe para outro cliente")
    if patch.get("codigo") and patch["codigo"] != existing["codigo"]:
        await ensure_unique(
            gateway, CLIENTES, "codigo", patch["codigo"], "Código já existe para outro cliente"
        )

    patch["updated_at"] = utcnow()
    patch["updated_by"] = current_user.id

    updated = await gateway.update(CLIENTES, cliente_id, patch)
    if not updated:
        raise NotFoundError(NOT_FOUND)
    logger.info("Updated cliente %s", cliente_id)
    return {"success": True, "data": updated[0]}


@router.delete("/{cliente_id}", response_model=Envelope[ClienteRead])
async def delete_cliente(
    cliente_id: str,
    gateway: DataGateway = Depends(get_gateway),
    _admin: AuthenticatedUser = Depends(require_admin),
) -> dict:
    await get_or_404(gateway, CLIENTES, cliente_id, NOT_FOUND)

    deleted = await gateway.delete(CLIENTES, cliente_id)
    if not deleted:
        raise NotFoundError(NOT_FOUND)
    logger.info("Deleted cliente %s", cliente_id)
    return {"success": True, "message": "Cliente removido com sucesso", "data": deleted[0]}
