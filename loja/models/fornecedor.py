"""
Fornecedor model — suppliers. ``codigo`` is optional but unique when set.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from loja.db.base import Base
from loja.models.user import _new_id, _now


class Fornecedor(Base):
    __tablename__ = "fornecedores"

    id: str = Column(String(36), primary_key=True, default=_new_id)  # type: ignore[assignment]
    codigo: str | None = Column(String(50), unique=True, nullable=True, index=True)  # type: ignore[assignment]
    razao_social: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    nome_fantasia: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    cnpj: str = Column(String(18), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    inscricao_estadual: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]

    # Contato
    telefone: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    email: str | None = Column(String(320), nullable=True)  # type: ignore[assignment]
    contato: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    website: str | None = Column(String(300), nullable=True)  # type: ignore[assignment]

    # Endereço
    cep: str | None = Column(String(9), nullable=True)  # type: ignore[assignment]
    endereco: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    numero: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    complemento: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    bairro: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    cidade: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    uf: str | None = Column(String(2), nullable=True)  # type: ignore[assignment]

    categoria: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    observacoes: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    status: str = Column(String(10), nullable=False, default="ativo", server_default="ativo")  # type: ignore[assignment]  # ativo | inativo

    created_at: datetime = Column(DateTime(timezone=True), default=_now)  # type: ignore[assignment]
    updated_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    created_by: str | None = Column(String(36), ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    updated_by: str | None = Column(String(36), ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
