# finance/solver.py
from __future__ import annotations
import logging
import math
import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Dict, Tuple

from config import Settings, get_settings
from .errors import TVMError, InvalidInputError
from .tvm import (
    solve_future_value, solve_present_value, solve_periodic_payment,
    solve_interest_rate, solve_number_of_periods
)

logger = logging.getLogger(__name__)


class Unknown(str, Enum):
    FV = "future_value"
    PV = "present_value"
    PMT = "periodic_payment"
    RATE = "interest_rate"
    N = "number_of_periods"

    @property
    def label(self) -> str:
        return LABELS[self.value]

    @property
    def short(self) -> str:
        return SHORT_LABELS[self.value]


LABELS: Dict[str, str] = {
    "present_value": "Present Value (PV)",
    "future_value": "Future Value (FV)",
    "periodic_payment": "Periodic Payment (PMT)",
    "interest_rate": "Interest Rate (I/Y)",
    "number_of_periods": "Number of Periods (N)",
}

SHORT_LABELS: Dict[str, str] = {
    "present_value": "PV",
    "future_value": "FV",
    "periodic_payment": "PMT",
    "interest_rate": "I/Y",
    "number_of_periods": "N",
}

# entradas de cada tela, na ordem exibida
REQUIRED_FIELDS: Dict[Unknown, Tuple[str, ...]] = {
    Unknown.FV: ("present_value", "periodic_payment", "interest_rate", "number_of_periods"),
    Unknown.PV: ("future_value", "interest_rate", "number_of_periods"),
    Unknown.PMT: ("future_value", "interest_rate", "number_of_periods"),
    Unknown.RATE: ("present_value", "future_value", "periodic_payment", "number_of_periods"),
    Unknown.N: ("present_value", "future_value", "interest_rate"),
}

# opcionais: em branco = 0
OPTIONAL_FIELDS: Dict[Unknown, Tuple[str, ...]] = {
    Unknown.FV: (),
    Unknown.PV: ("periodic_payment",),
    Unknown.PMT: ("present_value",),
    Unknown.RATE: (),
    Unknown.N: ("periodic_payment",),
}


@dataclass
class TVMInputs:
    """Textos digitados pelo usuário (None ou vazio = não informado)."""
    present_value: Optional[str] = None
    future_value: Optional[str] = None
    periodic_payment: Optional[str] = None
    interest_rate: Optional[str] = None
    number_of_periods: Optional[str] = None

    def raw(self, name: str) -> Optional[str]:
        return getattr(self, name)

    def is_blank(self, name: str) -> bool:
        raw = self.raw(name)
        return raw is None or str(raw).strip() == ""


@dataclass
class SolveResult:
    unknown: Unknown
    value: float
    error: Optional[str] = None
    decimals: int = 2

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def formatted(self) -> str:
        return format_value(self.value, self.decimals)


def format_value(value: float, decimals: int = 2) -> str:
    return f"{value:.{decimals}f}"


# agrupamento de milhar ("1,000", "12,345,678") não é separador decimal
_MILHAR = re.compile(r"[+-]?\d{1,3}(,\d{3})+")


def parse_number(raw: Optional[str], field: Optional[str] = None) -> float:
    """
    Converte texto em float; aceita vírgula decimal ("1000,50").
    Texto com vírgula e ponto juntos, ou com vírgula de milhar, é rejeitado.
    """
    nome = LABELS.get(field, field) if field else "value"
    if raw is None or str(raw).strip() == "":
        raise InvalidInputError(f"{nome} is required.", field)
    txt = str(raw).strip()
    if "," in txt:
        if "." in txt or txt.count(",") > 1 or _MILHAR.fullmatch(txt):
            raise InvalidInputError(f"{nome}: '{raw}' is ambiguous; use no thousands separators.", field)
        txt = txt.replace(",", ".")
    try:
        value = float(txt)
    except ValueError:
        raise InvalidInputError(f"{nome}: '{raw}' is not a number.", field) from None
    if not math.isfinite(value):
        raise InvalidInputError(f"{nome}: '{raw}' is not a finite number.", field)
    return value


def _collect(inputs: TVMInputs, unknown: Unknown) -> Dict[str, float]:
    valores = {name: parse_number(inputs.raw(name), name) for name in REQUIRED_FIELDS[unknown]}
    for name in OPTIONAL_FIELDS[unknown]:
        valores[name] = 0.0 if inputs.is_blank(name) else parse_number(inputs.raw(name), name)
    return valores


def _compute(unknown: Unknown, v: Dict[str, float], payments_at_start: bool, settings: Settings) -> float:
    if unknown is Unknown.FV:
        return solve_future_value(v["present_value"], v["periodic_payment"], v["interest_rate"],
                                  v["number_of_periods"], payments_at_start)
    if unknown is Unknown.PV:
        return solve_present_value(v["future_value"], v["interest_rate"], v["number_of_periods"],
                                   pmt=v["periodic_payment"], payments_at_start=payments_at_start)
    if unknown is Unknown.PMT:
        return solve_periodic_payment(v["future_value"], v["interest_rate"], v["number_of_periods"],
                                      pv=v["present_value"], payments_at_start=payments_at_start)
    if unknown is Unknown.RATE:
        return solve_interest_rate(v["present_value"], v["future_value"], v["periodic_payment"],
                                   v["number_of_periods"], payments_at_start,
                                   guess_percent=settings.rate_guess_percent,
                                   tolerance=settings.rate_tolerance,
                                   max_iterations=settings.rate_max_iterations)
    return solve_number_of_periods(v["present_value"], v["future_value"], v["interest_rate"],
                                   pmt=v["periodic_payment"], payments_at_start=payments_at_start)


def solve(inputs: TVMInputs, unknown: Unknown, payments_at_start: bool = False,
          settings: Optional[Settings] = None) -> SolveResult:
    """
    Calcula a incógnita `unknown` a partir das demais entradas.
    Nunca lança exceção por dado ruim:
    - entrada ausente/inválida -> value=0.0 e mensagem em `error`
    - resultado indefinido     -> value=nan e mensagem em `error`
    """
    settings = settings or get_settings()
    unknown = Unknown(unknown)
    try:
        valores = _collect(inputs, unknown)
    except InvalidInputError as exc:
        logger.info("Entrada rejeitada para %s: %s", unknown.short, exc)
        return SolveResult(unknown, 0.0, str(exc), settings.decimals)
    try:
        value = _compute(unknown, valores, payments_at_start, settings)
    except TVMError as exc:
        logger.warning("Cálculo de %s indefinido para %s: %s", unknown.short, valores, exc)
        return SolveResult(unknown, math.nan, str(exc), settings.decimals)
    logger.debug("%s = %r (entradas=%s)", unknown.short, value, valores)
    return SolveResult(unknown, value, None, settings.decimals)


def inputs_from_mapping(data: Dict[str, Optional[str]]) -> TVMInputs:
    """Monta TVMInputs a partir de um dict (chaves = nomes dos campos)."""
    nomes = {f.name for f in fields(TVMInputs)}
    return TVMInputs(**{k: v for k, v in data.items() if k in nomes})
