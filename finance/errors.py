# finance/errors.py
from __future__ import annotations
from typing import Optional


class TVMError(ValueError):
    """Base para erros de cálculo TVM."""


class InvalidInputError(TVMError):
    """Entrada ausente ou não numérica."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class UndefinedResultError(TVMError):
    """Resultado matematicamente indefinido (divisão por zero, log de não positivo, etc.)."""


class ConvergenceError(UndefinedResultError):
    """Busca iterativa da taxa não encontrou raiz."""
