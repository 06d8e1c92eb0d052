"""
Fornecedor CRUD endpoints.

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
from loja.schemas.common import Envelope, ListEnvelope
from loja.schemas.fornecedor import (FornecedorCreate, FornecedorOrderBy,
                                     FornecedorRead, FornecedorUpdate)
from loja.schemas.user import AuthenticatedUser

router = APIRouter(
    prefix="/fornecedores",
    tags=["fornecedores"],
    dependencies=[Depends(get_current_user)],
)
logger = logging.getLogger(__name__)

FORNECEDORES = "fornecedores"
NOT_FOUND = "Fornecedor não encontrado"


@router.get("", response_model=ListEnvelope[FornecedorRead])
async def list_fornecedores(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100, alias="pageSize"),
    razao_social: str | None = None,
    nome_fantasia: str | None = None,
    cnpj: str | None = None,
    codigo: str | None = None,
    cidade: str | None = None,
    uf: str | None = Query(default=None, max_length=2),
    categoria: str | None = None,
    status: str | None = Query(default=None, pattern="^(ativo|inativo)?$"),
    order_by: FornecedorOrderBy = Query(default="created_at", alias="orderBy"),
    order_direction: Literal["asc", "desc"] = Query(default="desc", alias="orderDirection"),
    gateway: DataGateway = Depends(get_gateway),
) -> dict:
    filters = build_filters(
        {
            "razao_social": razao_social,
            "nome_fantasia": nome_fantasia,
            "cnpj": cnpj,
            "codigo": codigo,
            "cidade": cidade,
            "categoria": categoria,
            "uf": uf,
            "status": status,
        },
        like=("razao_social", "nome_fantasia", "cnpj", "codigo", "cidade", "categoria"),
        exact=("uf", "status"),
    )
    logger.debug("Listing fornecedores with filters %s", filters)

    result = await gateway.select(
        FORNECEDORES,
        "*",
        filters=filters,
        order=Order(order_by, ascending=order_direction == "asc"),
        pagination=Pagination(page, page_size),
    )
    logger.info("Found %d fornecedores", result["count"])
    return page_envelope(result, page, page_size)


@router.get("/{fornecedor_id}", response_model=Envelope[FornecedorRead])
async def get_fornecedor(
    fornecedor_id: str,
    gateway: DataGateway = Depends(get_gateway),
) -> dict:
    fornecedor = await get_or_404(gateway, FORNECEDORES, fornecedor_id, NOT_FOUND)
    return {"success": True, "data": fornecedor}


@router.post("", response_model=Envelope[FornecedorRead], status_code=201)
async def create_fornecedor(
    body: FornecedorCreate,
    gateway: DataGateway = Depends(get_gateway),
    current_user: AuthenticatedUser = Depends(require_admin),
) -> dict:
    await ensure_unique(gateway, FORNECEDORES, "cnpj", body.cnpj, "Fornecedor já existe com este CNPJ")
    # codigo is optional; only checked when present
    await ensure_unique(
        gateway, FORNECEDORES, "codigo", body.codigo, "Fornecedor já existe com este código"
    )

    record = body.model_dump()
    record["created_at"] = utcnow()
    record["created_by"] = current_user.id

    created = await gateway.insert(FORNECEDORES, record)
    logger.info("Created fornecedor %s (CNPJ %s)", created[0]["id"], body.cnpj)
    return {"success": True, "data": created[0]}


@router.put("/{fornecedor_id}", response_model=Envelope[FornecedorRead])
async def update_fornecedor(
    fornecedor_id: str,
    body: FornecedorUpdate,
    gateway: DataGateway = Depends(get_gateway),
    current_user: AuthenticatedUser = Depends(require_admin),
) -> dict:
    existing = await get_or_404(gateway, FORNECEDORES, fornecedor_id, NOT_FOUND)
    patch = body.model_dump(exclude_unset=True)

    if patch.get("cnpj") and patch["cnpj"] != existing["cnpj"]:
        await ensure_unique(
            gateway, FORNECEDORES, "cnpj", patch["cnpj"], "CNPJ já existe para outro fornecedor"
        )
    if patch.get("codigo") and patch["codigo"] != existing["codigo"]:
        await ensure_unique(
            gateway, FORNECEDORES, "codigo", patch["codigo"], "Código já existe para outro fornecedor"
        )

    patch["updated_at"] = utcnow()
    patch["updated_by"] = current_user.id

    updated = await gateway.update(FORNECEDORES, fornecedor_id, patch)
    if not updated:
        raise NotFoundError(NOT_FOUND)
    logger.info("Updated fornecedor %s", fornecedor_id)
    return {"success": True, "data": updated[0]}


@router.delete("/{fornecedor_id}", response_model=Envelope[FornecedorRead])
async def delete_fornecedor(
    fornecedor_id: str,
    gateway: DataGateway = Depends(get_gateway),
    _admin: AuthenticatedUser = Depends(require_admin),
) -> dict:
    """Hard delete. A second call for the same id answers 404."""
    await get_or_404(gateway, FORNECEDORES, fornecedor_id, NOT_FOUND)

    deleted = await gateway.delete(FORNECEDORES, fornecedor_id)
    if not deleted:
        raise NotFoundError(NOT_FOUND)
    logger.info("Deleted fornecedor %s", fornecedor_id)
    return {"success": True, "message": "Fornecedor removido com sucesso", "data": deleted[0]}
