"""
Cliente model — customers of the store.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text

from loja.db.base import Base
from loja.models.user import _new_id, _now


class Cliente(Base):
    __tablename__ = "clientes"

    id: str = Column(String(36), primary_key=True, default=_new_id)  # type: ignore[assignment]
    codigo: str = Column(String(50), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    loja: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    nome: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    cpf: str = Column(String(14), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    data_nascimento: date | None = Column(Date, nullable=True)  # type: ignore[assignment]
    nome_cliente: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    classificacao1: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]

    # Endereço
    cep: str | None = Column(String(9), nullable=True)  # type: ignore[assignment]
    endereco: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    numero: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    bairro: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    cidade: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    uf: str | None = Column(String(2), nullable=True)  # type: ignore[assignment]
    tipo_res: str | None = Column(String(50), nullable=True)  # type: ignore[assignment]

    # Contato
    telefone: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    celular: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    observacoes: str | None = Column(Text, nullable=True)  # type: ignore[assignment]

    created_at: datetime = Column(DateTime(timezone=True), default=_now)  # type: ignore[assignment]
    updated_at: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    created_by: str | None = Column(String(36), ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    updated_by: str | None = Column(String(36), ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
