"""
Data gateway: filters, ordering, pagination and transactions.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from loja.db.gateway import DataGateway, Order, Pagination, escape_like


async def _seed_fornecedores(gateway: DataGateway, n: int) -> list[dict]:
    rows = []
    for i in range(n):
        created = await gateway.insert(
            "fornecedores",
            {
                "codigo": f"F{i:03d}",
                "razao_social": f"Fornecedor {i:03d} LTDA",
                "nome_fantasia": f"Loja {i}",
                "cnpj": f"{i:014d}",
                "uf": "SP" if i % 2 == 0 else "RJ",
                "status": "ativo" if i < n - 1 else "inativo",
            },
        )
        rows.append(created[0])
    return rows


@pytest.mark.asyncio
async def test_insert_returns_row_with_generated_id(gateway):
    rows = await gateway.insert(
        "fornecedores",
        {"razao_social": "Acme LTDA", "nome_fantasia": "Acme", "cnpj": "12345678000190"},
    )
    assert len(rows) == 1
    assert rows[0]["id"]
    assert rows[0]["status"] == "ativo"
    assert rows[0]["codigo"] is None


@pytest.mark.asyncio
async def test_select_equality_and_in_filters(gateway):
    await _seed_fornecedores(gateway, 5)

    sp = await gateway.select("fornecedores", filters={"uf": "SP"})
    assert sp["count"] == 3
    assert all(row["uf"] == "SP" for row in sp["data"])

    picked = await gateway.select("fornecedores", "codigo", filters={"codigo": ["F001", "F004"]})
    assert sorted(row["codigo"] for row in picked["data"]) == ["F001", "F004"]
    assert set(picked["data"][0]) == {"codigo"}


@pytest.mark.asyncio
async def test_select_range_and_like_filters(gateway):
    await _seed_fornecedores(gateway, 6)

    ranged = await gateway.select("fornecedores", filters={"codigo": {"gt": "F001", "lte": "F003"}})
    assert sorted(row["codigo"] for row in ranged["data"]) == ["F002", "F003"]

    liked = await gateway.select("fornecedores", filters={"razao_social": {"like": "dor 00"}})
    assert liked["count"] == 6


@pytest.mark.asyncio
async def test_like_treats_wildcards_literally(gateway):
    await gateway.insert(
        "fornecedores",
        {"razao_social": "100% Algodao", "nome_fantasia": "Cem", "cnpj": "11111111111111"},
    )
    await gateway.insert(
        "fornecedores",
        {"razao_social": "1000 Tecidos", "nome_fantasia": "Mil", "cnpj": "22222222222222"},
    )

    result = await gateway.select("fornecedores", filters={"razao_social": {"like": "100%"}})
    assert [row["razao_social"] for row in result["data"]] == ["100% Algodao"]
    assert escape_like("a_b%") == r"a\_b\%"


@pytest.mark.asyncio
async def test_none_filters_are_ignored(gateway):
    await _seed_fornecedores(gateway, 3)
    result = await gateway.select("fornecedores", filters={"uf": None, "cidade": None})
    assert result["count"] == 3


@pytest.mark.asyncio
async def test_unknown_column_is_rejected(gateway):
    with pytest.raises(ValueError):
        await gateway.select("fornecedores", filters={"nope": 1})


@pytest.mark.asyncio
async def test_unknown_table_is_rejected(gateway):
    with pytest.raises(ValueError):
        await gateway.select("pedidos")


@pytest.mark.asyncio
async def test_pagination_returns_range_and_total_count(gateway):
    await _seed_fornecedores(gateway, 25)

    page = await gateway.select(
        "fornecedores",
        "codigo",
        order=Order("codigo", ascending=True),
        pagination=Pagination(page=3, page_size=10),
    )
    assert page["count"] == 25
    assert [row["codigo"] for row in page["data"]] == [f"F{i:03d}" for i in range(20, 25)]


@pytest.mark.asyncio
async def test_descending_order(gateway):
    await _seed_fornecedores(gateway, 4)
    result = await gateway.select("fornecedores", "codigo", order=Order("codigo", ascending=False))
    assert [row["codigo"] for row in result["data"]] == ["F003", "F002", "F001", "F000"]


def test_pagination_bounds():
    assert Pagination(1, 10).start == 0
    assert Pagination(1, 10).end == 9
    assert Pagination(3, 10).start == 20
    with pytest.raises(ValueError):
        Pagination(0, 10)


@pytest.mark.asyncio
async def test_get_update_and_delete(gateway):
    (row,) = await _seed_fornecedores(gateway, 1)

    assert (await gateway.get("fornecedores", row["id"]))["codigo"] == "F000"

    updated = await gateway.update("fornecedores", row["id"], {"cidade": "Campinas"})
    assert updated[0]["cidade"] == "Campinas"
    assert updated[0]["razao_social"] == row["razao_social"]

    deleted = await gateway.delete("fornecedores", row["id"])
    assert deleted[0]["id"] == row["id"]
    assert await gateway.get("fornecedores", row["id"]) is None


@pytest.mark.asyncio
async def test_update_and_delete_unknown_id_return_empty(gateway):
    assert await gateway.update("fornecedores", "missing", {"cidade": "X"}) == []
    assert await gateway.delete("fornecedores", "missing") == []


@pytest.mark.asyncio
async def test_unique_violation_propagates(gateway):
    await _seed_fornecedores(gateway, 1)
    with pytest.raises(IntegrityError):
        await gateway.insert(
            "fornecedores",
            {"razao_social": "Outro", "nome_fantasia": "Outro", "cnpj": f"{0:014d}"},
        )
    # session is usable again after the rollback
    assert (await gateway.select("fornecedores"))["count"] == 1


@pytest.mark.asyncio
async def test_transaction_commits_together(gateway):
    async with gateway.transaction() as tx:
        await tx.insert(
            "fornecedores",
            {"razao_social": "A", "nome_fantasia": "A", "cnpj": "11111111111111"},
        )
        await tx.insert(
            "fornecedores",
            {"razao_social": "B", "nome_fantasia": "B", "cnpj": "22222222222222"},
        )
    assert (await gateway.select("fornecedores"))["count"] == 2


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(gateway):
    with pytest.raises(IntegrityError):
        async with gateway.transaction() as tx:
            await tx.insert(
                "fornecedores",
                {"razao_social": "A", "nome_fantasia": "A", "cnpj": "11111111111111"},
            )
            await tx.insert(
                "fornecedores",
                {"razao_social": "B", "nome_fantasia": "B", "cnpj": "11111111111111"},
            )
    assert (await gateway.select("fornecedores"))["count"] == 0
