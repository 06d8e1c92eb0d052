"""Response envelopes and field formats shared by every resource."""

import math
import re
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CPF_RE = re.compile(r"^\d{3}\.\d{3}\.\d{3}-\d{2}$|^\d{11}$")
CNPJ_RE = re.compile(r"^\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}$|^\d{14}$")
CEP_RE = re.compile(r"^\d{5}-\d{3}$|^\d{8}$")
TELEFONE_RE = re.compile(r"^\(\d{2}\)\s\d{4,5}-\d{4}$|^\d{10,11}$")
CELULAR_RE = re.compile(r"^\(\d{2}\)\s\d{5}-\d{4}$|^\d{11}$")
URL_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://[^\s/?#]+[^\s]*$")


def blank(value: Optional[str]) -> bool:
    return value is None or value == ""


def check_pattern(value: Optional[str], pattern: re.Pattern, message: str) -> Optional[str]:
    """Validate an optional text field; ``None`` and ``""`` are accepted as-is."""
    if blank(value):
        return value
    if not pattern.match(value):
        raise ValueError(message)
    return value


def check_uf(value: Optional[str]) -> Optional[str]:
    if blank(value):
        return value
    if len(value) != 2:
        raise ValueError("UF deve ter 2 caracteres")
    return value


def check_not_empty(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise ValueError(message)
    return value


# ── Envelopes ───────────────────────────────────────────────────────
class PaginationMeta(BaseModel):
    page: int
    pageSize: int
    pageCount: int
    total: int

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            pageSize=page_size,
            pageCount=math.ceil(total / page_size),
            total=total,
        )


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class ListEnvelope(BaseModel, Generic[T]):
    success: bool = True
    count: int
    data: list[T] = Field(default_factory=list)
    pagination: PaginationMeta


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: str
