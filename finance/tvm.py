# finance/tvm.py
from __future__ import annotations
import logging
import math

from scipy.optimize import brentq

from .errors import UndefinedResultError, ConvergenceError

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-10
DEFAULT_GUESS_PERCENT = 10.0

# limites da busca intervalar (fração): -99% .. 1.000.000%
_BRACKET_LOW = -0.99
_BRACKET_HIGH = 1e4
_ZERO_RATE = 1e-12


def _fraction(rate_percent: float) -> float:
    r = rate_percent / 100.0
    if r <= -1.0:
        raise UndefinedResultError("Interest rate must be greater than -100% per period.")
    return r


def _growth(r: float, n: float) -> float:
    """(1+r)^n"""
    try:
        return math.exp(n * math.log1p(r))
    except OverflowError as exc:
        raise UndefinedResultError("Result is out of range.") from exc


def _annuity_factor(r: float, n: float, payments_at_start: bool = False) -> float:
    """
    Fator de acumulação da série uniforme.
    Postecipada: ((1+r)^n - 1)/r  (limite n quando r -> 0)
    Antecipada: acima * (1+r)
    """
    if abs(r) < _ZERO_RATE:
        return float(n)
    try:
        # expm1/log1p evitam cancelamento com taxas pequenas
        fator = math.expm1(n * math.log1p(r)) / r
    except OverflowError as exc:
        raise UndefinedResultError("Result is out of range.") from exc
    if payments_at_start:
        fator *= (1.0 + r)
    return fator


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise UndefinedResultError("Result is out of range.")
    return value


def solve_future_value(pv: float, pmt: float, rate_percent: float, n: float,
                       payments_at_start: bool = False) -> float:
    """FV = PV*(1+r)^n + PMT*((1+r)^n - 1)/r"""
    r = _fraction(rate_percent)
    return _finite(pv * _growth(r, n) + pmt * _annuity_factor(r, n, payments_at_start))


def solve_present_value(fv: float, rate_percent: float, n: float, pmt: float = 0.0,
                        payments_at_start: bool = False) -> float:
    """PV = (FV - PMT*fator)/(1+r)^n ; sem PMT: FV/(1+r)^n"""
    r = _fraction(rate_percent)
    g = _growth(r, n)
    if g == 0.0:
        raise UndefinedResultError("(1+r)^n is zero; present value is undefined.")
    return _finite((fv - pmt * _annuity_factor(r, n, payments_at_start)) / g)


def solve_periodic_payment(fv: float, rate_percent: float, n: float, pv: float = 0.0,
                           payments_at_start: bool = False) -> float:
    """
    PMT para atingir FV, dado PV e taxa.
    Sem PV: FV*r/((1+r)^n - 1)
    """
    r = _fraction(rate_percent)
    fator = _annuity_factor(r, n, payments_at_start)
    if fator == 0.0:
        raise UndefinedResultError("Annuity factor is zero (N = 0); payment is undefined.")
    return _finite((fv - pv * _growth(r, n)) / fator)


def solve_number_of_periods(pv: float, fv: float, rate_percent: float, pmt: float = 0.0,
                            payments_at_start: bool = False) -> float:
    """
    N = ln((FV*r + PMT)/(PV*r + PMT)) / ln(1+r)
    Sem PMT: ln(FV/PV) / ln(1+r)
    """
    r = _fraction(rate_percent)
    if abs(r) < _ZERO_RATE:
        # limite r -> 0: FV = PV + PMT*n
        if pmt == 0.0:
            raise UndefinedResultError("Zero interest rate without a payment; number of periods is undefined.")
        return _finite((fv - pv) / pmt)
    pmt_ef = pmt * (1.0 + r) if payments_at_start else pmt
    num = fv * r + pmt_ef
    den = pv * r + pmt_ef
    if den == 0.0:
        raise UndefinedResultError("Zero present value without a payment; number of periods is undefined.")
    razao = num / den
    if razao <= 0.0:
        raise UndefinedResultError("Future and present values do not grow at this rate; number of periods is undefined.")
    return _finite(math.log(razao) / math.log1p(r))


def _fv_residual(r: float, pv: float, fv: float, pmt: float, n: float, payments_at_start: bool) -> float:
    return pv * _growth(r, n) + pmt * _annuity_factor(r, n, payments_at_start) - fv


def _fv_residual_derivative(r: float, pv: float, pmt: float, n: float, payments_at_start: bool) -> float:
    """Derivada do resíduo em relação a r (para Newton-Raphson)."""
    dg = n * _growth(r, n - 1.0)
    a = _annuity_factor(r, n)
    if abs(r) < _ZERO_RATE:
        # d/dr ((1+r)^n - 1)/r em r = 0
        da = n * (n - 1.0) / 2.0
    else:
        da = (dg - a) / r
    if payments_at_start:
        # d/dr [a*(1+r)] = da*(1+r) + a
        da = da * (1.0 + r) + a
    return pv * dg + pmt * da


def _newton(pv: float, fv: float, pmt: float, n: float, payments_at_start: bool,
            guess: float, tolerance: float, max_iterations: int):
    rate = guess
    for it in range(max_iterations):
        try:
            f = _fv_residual(rate, pv, fv, pmt, n, payments_at_start)
            df = _fv_residual_derivative(rate, pv, pmt, n, payments_at_start)
        except UndefinedResultError:
            return None
        if not (math.isfinite(f) and math.isfinite(df)) or abs(df) < tolerance:
            return None
        new_rate = rate - f / df
        if new_rate <= -1.0 or not math.isfinite(new_rate):
            return None
        if abs(new_rate - rate) < tolerance:
            logger.debug("Newton convergiu em %d iterações: r=%.12f", it + 1, new_rate)
            return new_rate
        rate = new_rate
    return None


def _bracketed(pv: float, fv: float, pmt: float, n: float, payments_at_start: bool,
               tolerance: float, max_iterations: int) -> float:
    def f(r: float) -> float:
        try:
            return _fv_residual(r, pv, fv, pmt, n, payments_at_start)
        except UndefinedResultError:
            return math.inf

    lo = _BRACKET_LOW
    f_lo = f(lo)
    hi = 0.1
    while hi <= _BRACKET_HIGH:
        f_hi = f(hi)
        if math.isfinite(f_lo) and math.isfinite(f_hi) and f_lo * f_hi <= 0.0:
            try:
                return brentq(f, lo, hi, xtol=tolerance, maxiter=max(max_iterations, 100))
            except (ValueError, RuntimeError) as exc:
                raise ConvergenceError(f"Interest rate search failed: {exc}") from exc
        lo, f_lo = hi, f_hi
        hi *= 2.0
    raise ConvergenceError("No interest rate solves these values.")


def solve_interest_rate(pv: float, fv: float, pmt: float, n: float, payments_at_start: bool = False,
                        guess_percent: float = DEFAULT_GUESS_PERCENT, tolerance: float = TOLERANCE,
                        max_iterations: int = MAX_ITERATIONS) -> float:
    """
    Taxa por período (%) que satisfaz FV = PV*(1+r)^n + PMT*fator(r, n).
    - PMT = 0: forma fechada (FV/PV)^(1/n) - 1
    - caso geral: Newton-Raphson a partir de `guess_percent`; se falhar,
      busca intervalar (Brent) em (-99%, 1.000.000%).
    """
    if n == 0:
        raise UndefinedResultError("N = 0; interest rate is undefined.")
    if pmt == 0.0:
        if pv == 0.0:
            raise UndefinedResultError("PV and PMT are both zero; interest rate is undefined.")
        razao = fv / pv
        if razao <= 0.0:
            raise UndefinedResultError("FV/PV is not positive; interest rate is undefined.")
        try:
            return _finite((razao ** (1.0 / n) - 1.0) * 100.0)
        except OverflowError as exc:
            raise UndefinedResultError("Result is out of range.") from exc

    r = _newton(pv, fv, pmt, n, payments_at_start, guess_percent / 100.0, tolerance, max_iterations)
    if r is None:
        logger.debug("Newton não convergiu; usando busca intervalar (pv=%s fv=%s pmt=%s n=%s)", pv, fv, pmt, n)
        r = _bracketed(pv, fv, pmt, n, payments_at_start, tolerance, max_iterations)
    return r * 100.0
