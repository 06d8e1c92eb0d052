"""Pydantic schemas for Fornecedor."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ValidationInfo, field_validator

from loja.schemas.common import (CEP_RE, CNPJ_RE, EMAIL_RE, TELEFONE_RE,
                                 URL_RE, check_not_empty, check_pattern,
                                 check_uf)

FornecedorStatus = Literal["ativo", "inativo"]
FornecedorOrderBy = Literal["razao_social", "codigo", "created_at"]

_EMPTY_MESSAGES = {
    "razao_social": "Razão Social não pode ser vazia",
    "nome_fantasia": "Nome Fantasia não pode ser vazio",
    "cnpj": "CNPJ não pode ser vazio",
}


class _FornecedorFields(BaseModel):
    inscricao_estadual: str | None = None
    telefone: str | None = None
    email: str | None = None
    contato: str | None = None
    cep: str | None = None
    endereco: str | None = None
    numero: str | None = None
    complemento: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    uf: str | None = None
    website: str | None = None
    categoria: str | None = None
    observacoes: str | None = None

    @field_validator("razao_social", "nome_fantasia", "cnpj", check_fields=False)
    @classmethod
    def _not_empty(cls, v: str | None, info: ValidationInfo) -> str:
        return check_not_empty(v, _EMPTY_MESSAGES[info.field_name])

    @field_validator("cnpj", check_fields=False)
    @classmethod
    def _cnpj(cls, v: str) -> str:
        return check_pattern(
            v, CNPJ_RE, "CNPJ deve estar no formato 00.000.000/0000-00 ou 00000000000000"
        )

    @field_validator("telefone")
    @classmethod
    def _telefone(cls, v: str | None) -> str | None:
        return check_pattern(
            v, TELEFONE_RE, "Telefone deve estar no formato (00) 0000-0000 ou (00) 00000-0000"
        )

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        return check_pattern(v, EMAIL_RE, "Email deve ser um endereço de email válido")

    @field_validator("cep")
    @classmethod
    def _cep(cls, v: str | None) -> str | None:
        return check_pattern(v, CEP_RE, "CEP deve estar no formato 00000-000 ou 00000000")

    @field_validator("uf")
    @classmethod
    def _uf(cls, v: str | None) -> str | None:
        return check_uf(v)

    @field_validator("website")
    @classmethod
    def _website(cls, v: str | None) -> str | None:
        return check_pattern(v, URL_RE, "Website deve ser uma URL válida")


class FornecedorCreate(_FornecedorFields):
    codigo: str | None = None
    razao_social: str
    nome_fantasia: str
    cnpj: str
    status: FornecedorStatus = "ativo"

    @field_validator("codigo")
    @classmethod
    def _codigo(cls, v: str | None) -> str | None:
        # no codigo yet: stored as NULL so the unique index ignores it
        if v is None or not v.strip():
            return None
        return v.strip()


class FornecedorUpdate(_FornecedorFields):
    codigo: str | None = None
    razao_social: str | None = None
    nome_fantasia: str | None = None
    cnpj: str | None = None
    status: FornecedorStatus | None = None

    @field_validator("codigo")
    @classmethod
    def _codigo(cls, v: str | None) -> str:
        return check_not_empty(v, "Código não pode ser vazio")

    @field_validator("status")
    @classmethod
    def _status(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("Status deve ser ativo ou inativo")
        return v


class FornecedorRead(BaseModel):
    id: str
    codigo: str | None = None
    razao_social: str
    nome_fantasia: str
    cnpj: str
    inscricao_estadual: str | None = None
    telefone: str | None = None
    email: str | None = None
    contato: str | None = None
    cep: str | None = None
    endereco: str | None = None
    numero: str | None = None
    complemento: str | None = None
    bairro: str | None = None
    cidade: str | None = None
    uf: str | None = None
    website: str | None = None
    categoria: str | None = None
    observacoes: str | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None

    model_config = {"from_attributes": True}
