"""Table declarations. Importing this package registers every table on ``Base.metadata``."""

from loja.models.cliente import Cliente
from loja.models.fornecedor import Fornecedor
from loja.models.user import User, UserRole

__all__ = ["Cliente", "Fornecedor", "User", "UserRole"]
