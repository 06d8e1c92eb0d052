"""
Fornecedor endpoints.
"""

import pytest
from httpx import AsyncClient

URL = "/api/fornecedores"


def _fornecedor(i: int = 1, **extra) -> dict:
    return {
        "razao_social": f"Fornecedor {i:02d} LTDA",
        "nome_fantasia": f"Forn {i}",
        "cnpj": f"{i:014d}",
        **extra,
    }


async def _create(client: AsyncClient, headers: dict, **kwargs) -> dict:
    resp = await client.post(URL, json=_fornecedor(**kwargs), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_create_defaults_status_to_ativo(async_client: AsyncClient, admin, admin_headers):
    data = await _create(
        async_client,
        admin_headers,
        cnpj="12.345.678/0001-90",
        email="vendas@acme.com.br",
        website="https://acme.com.br",
        telefone="(11) 3333-4444",
    )
    assert data["status"] == "ativo"
    assert data["codigo"] is None
    assert data["created_by"] == admin["id"]


@pytest.mark.asyncio
async def test_codigo_is_optional_and_blank_means_none(async_client: AsyncClient, admin_headers):
    first = await _create(async_client, admin_headers, i=1)
    second = await _create(async_client, admin_headers, i=2, codigo="")
    assert first["codigo"] is None
    assert second["codigo"] is None


@pytest.mark.asyncio
async def test_duplicate_cnpj_conflicts(async_client: AsyncClient, admin_headers, gateway):
    await _create(async_client, admin_headers, i=1)
    resp = await async_client.post(URL, json=_fornecedor(2, cnpj=f"{1:014d}"), headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["message"] == "Fornecedor já existe com este CNPJ"
    assert (await gateway.select("fornecedores"))["count"] == 1


@pytest.mark.asyncio
async def test_duplicate_codigo_conflicts(async_client: AsyncClient, admin_headers):
    await _create(async_client, admin_headers, i=1, codigo="F-1")
    resp = await async_client.post(URL, json=_fornecedor(2, codigo="F-1"), headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["message"] == "Fornecedor já existe com este código"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override, fragment",
    [
        ({"cnpj": "123"}, "CNPJ deve estar no formato"),
        ({"email": "sem-arroba"}, "Email deve ser um endereço de email válido"),
        ({"website": "acme"}, "Website deve ser uma URL válida"),
        ({"status": "suspenso"}, "status"),
        ({"razao_social": ""}, "Razão Social não pode ser vazia"),
    ],
)
async def test_create_validation(async_client: AsyncClient, admin_headers, override, fragment):
    resp = await async_client.post(URL, json=_fornecedor(**override), headers=admin_headers)
    assert resp.status_code == 400
    assert fragment in resp.json()["message"]


@pytest.mark.asyncio
async def test_plain_user_cannot_create(async_client: AsyncClient, user_headers):
    resp = await async_client.post(URL, json=_fornecedor(), headers=user_headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_status_and_text_filters(async_client: AsyncClient, admin_headers, user_headers):
    await _create(async_client, admin_headers, i=1, categoria="Tecidos")
    await _create(async_client, admin_headers, i=2, categoria="Tecidos", status="inativo")
    await _create(async_client, admin_headers, i=3, categoria="Botoes")

    inativos = await async_client.get(URL, params={"status": "inativo"}, headers=user_headers)
    assert [row["cnpj"] for row in inativos.json()["data"]] == [f"{2:014d}"]

    tecidos = await async_client.get(URL, params={"categoria": "Teci"}, headers=user_headers)
    assert tecidos.json()["count"] == 2

    bad = await async_client.get(URL, params={"status": "suspenso"}, headers=user_headers)
    assert bad.status_code == 400


@pytest.mark.asyncio
async def test_order_by_razao_social(async_client: AsyncClient, admin_headers):
    for i in (2, 3, 1):
        await _create(async_client, admin_headers, i=i)

    resp = await async_client.get(
        URL, params={"orderBy": "razao_social", "orderDirection": "asc"}, headers=admin_headers
    )
    assert [row["razao_social"] for row in resp.json()["data"]] == [
        "Fornecedor 01 LTDA",
        "Fornecedor 02 LTDA",
        "Fornecedor 03 LTDA",
    ]


@pytest.mark.asyncio
async def test_update_fornecedor(async_client: AsyncClient, admin, admin_headers):
    fornecedor = await _create(async_client, admin_headers)
    resp = await async_client.put(
        f"{URL}/{fornecedor['id']}",
        json={"status": "inativo", "codigo": "F-9"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "inativo"
    assert data["codigo"] == "F-9"
    assert data["updated_by"] == admin["id"]


@pytest.mark.asyncio
async def test_update_rejects_null_status_and_empty_codigo(async_client: AsyncClient, admin_headers):
    fornecedor = await _create(async_client, admin_headers)

    status = await async_client.put(
        f"{URL}/{fornecedor['id']}", json={"status": None}, headers=admin_headers
    )
    assert status.status_code == 400
    assert "Status deve ser ativo ou inativo" in status.json()["message"]

    codigo = await async_client.put(
        f"{URL}/{fornecedor['id']}", json={"codigo": " "}, headers=admin_headers
    )
    assert codigo.status_code == 400


@pytest.mark.asyncio
async def test_update_to_taken_cnpj_conflicts(async_client: AsyncClient, admin_headers):
    first = await _create(async_client, admin_headers, i=1)
    second = await _create(async_client, admin_headers, i=2)

    resp = await async_client.put(
        f"{URL}/{second['id']}", json={"cnpj": first["cnpj"]}, headers=admin_headers
    )
    assert resp.status_code == 409
    assert resp.json()["message"] == "CNPJ já existe para outro fornecedor"


@pytest.mark.asyncio
async def test_delete_twice_is_404(async_client: AsyncClient, admin_headers, user_headers):
    fornecedor = await _create(async_client, admin_headers)

    first = await async_client.delete(f"{URL}/{fornecedor['id']}", headers=admin_headers)
    assert first.status_code == 200
    assert first.json()["message"] == "Fornecedor removido com sucesso"

    second = await async_client.delete(f"{URL}/{fornecedor['id']}", headers=admin_headers)
    assert second.status_code == 404
    assert second.json()["message"] == "Fornecedor não encontrado"

    gone = await async_client.get(f"{URL}/{fornecedor['id']}", headers=user_headers)
    assert gone.status_code == 404
