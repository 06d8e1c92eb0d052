"""Pydantic schemas for Cliente."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ValidationInfo, field_validator

from loja.schemas.common import (CELULAR_RE, CEP_RE, CPF_RE, TELEFONE_RE,
                                 check_not_empty, check_pattern, check_uf)

_EMPTY_MESSAGES = {
    "codigo": "Código não pode ser vazio",
    "loja": "Loja não pode ser vazia",
    "nome": "Nome não pode ser vazio",
    "cpf": "CPF não pode ser vazio",
    "nome_cliente": "Nome do cliente não pode ser vazio",
}

ClienteOrderBy = Literal["nome", "codigo", "created_at"]


class _ClienteFields(BaseModel):
    data_nascimento: date | None = None
    classificacao1: str | None = None

    # Endereço
    cep: str | None = None
    endereco: str | None = None
    numero: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    uf: str | None = None
    tipo_res: str | None = None

    # Contato
    telefone: str | None = None
    celular: str | None = None
    observacoes: str | None = None

    @field_validator("codigo", "loja", "nome", "nome_cliente", "cpf", check_fields=False)
    @classmethod
    def _not_empty(cls, v: str | None, info: ValidationInfo) -> str:
        return check_not_empty(v, _EMPTY_MESSAGES[info.field_name])

    @field_validator("cpf", check_fields=False)
    @classmethod
    def _cpf(cls, v: str) -> str:
        return check_pattern(v, CPF_RE, "CPF deve estar no formato 000.000.000-00 ou 00000000000")

    @field_validator("cep")
    @classmethod
    def _cep(cls, v: str | None) -> str | None:
        return check_pattern(v, CEP_RE, "CEP deve estar no formato 00000-000 ou 00000000")

    @field_validator("uf")
    @classmethod
    def _uf(cls, v: str | None) -> str | None:
        return check_uf(v)

    @field_validator("telefone")
    @classmethod
    def _telefone(cls, v: str | None) -> str | None:
        return check_pattern(
            v, TELEFONE_RE, "Telefone deve estar no formato (00) 0000-0000 ou (00) 00000-0000"
        )

    @field_validator("celular")
    @classmethod
    def _celular(cls, v: str | None) -> str | None:
        return check_pattern(
            v, CELULAR_RE, "Celular deve estar no formato (00) 00000-0000 ou 00000000000"
        )


class ClienteCreate(_ClienteFields):
    codigo: str
    loja: str
    nome: str
    cpf: str
    nome_cliente: str


class ClienteUpdate(_ClienteFields):
    codigo: str | None = None
    loja: str | None = None
    nome: str | None = None
    cpf: str | None = None
    nome_cliente: str | None = None


class ClienteRead(BaseModel):
    id: str
    codigo: str
    loja: str
    nome: str
    cpf: str
    data_nascimento: date | None = None
    nome_cliente: str
    classificacao1: str | None = None
    cep: str | None = None
    endereco: str | None = None
    numero: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    uf: str | None = None
    tipo_res: str | None = None
    telefone: str | None = None
    celular: str | None = None
    observacoes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None

    model_config = {"from_attributes": True}
