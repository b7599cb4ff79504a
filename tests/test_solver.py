import math
import pytest
from config import Settings
from finance.errors import InvalidInputError
from finance.solver import (
    TVMInputs, Unknown, SolveResult, solve, parse_number, format_value, inputs_from_mapping,
    REQUIRED_FIELDS, LABELS
)
from finance.tvm import solve_periodic_payment

def test_parse_number():
    assert parse_number(" 1000 ") == 1000.0
    assert parse_number("1000,50") == 1000.5
    assert parse_number("-2.5e3") == -2500.0

@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "1.2.3", "nan", "inf"])
def test_parse_number_invalido(raw):
    with pytest.raises(InvalidInputError) as exc:
        parse_number(raw, "interest_rate")
    assert exc.value.field == "interest_rate"
    assert "Interest Rate (I/Y)" in str(exc.value)

def test_format_value():
    assert format_value(1628.894626777442) == "1628.89"
    assert format_value(2.0, 4) == "2.0000"

def test_solve_future_value():
    inp = TVMInputs(present_value="1000", periodic_payment="0", interest_rate="5", number_of_periods="10")
    res = solve(inp, Unknown.FV)
    assert res.ok
    assert res.formatted == "1628.89"

def test_solve_present_value_pmt_opcional():
    inp = TVMInputs(future_value="1628.89", interest_rate="5", number_of_periods="10")
    res = solve(inp, Unknown.PV)
    assert res.ok and res.formatted == "1000.00"

def test_solve_periodic_payment():
    res = solve(TVMInputs(future_value="1000", interest_rate="5", number_of_periods="10"), Unknown.PMT)
    assert res.formatted == "79.50"

def test_solve_interest_rate():
    pmt = solve_periodic_payment(1000, 5, 10)
    inp = TVMInputs(present_value="0", future_value="1000", periodic_payment=str(pmt), number_of_periods="10")
    res = solve(inp, "interest_rate")
    assert res.unknown is Unknown.RATE
    assert res.formatted == "5.00"

def test_solve_number_of_periods():
    inp = TVMInputs(present_value="1000", future_value="1628.89", interest_rate="5")
    assert solve(inp, Unknown.N).formatted == "10.00"

def test_solve_antecipada():
    inp = TVMInputs(present_value="0", periodic_payment="100", interest_rate="1", number_of_periods="12")
    postecipada = solve(inp, Unknown.FV).value
    antecipada = solve(inp, Unknown.FV, payments_at_start=True).value
    assert abs(antecipada - postecipada * 1.01) < 1e-9

def test_entrada_ausente_retorna_zero():
    res = solve(TVMInputs(present_value="1000", interest_rate="5", number_of_periods="10"), Unknown.FV)
    assert not res.ok
    assert res.value == 0.0
    assert res.formatted == "0.00"
    assert "Periodic Payment (PMT)" in res.error

def test_entrada_invalida_retorna_zero():
    inp = TVMInputs(future_value="mil", interest_rate="5", number_of_periods="10")
    res = solve(inp, Unknown.PV)
    assert res.value == 0.0 and "not a number" in res.error

def test_opcional_invalido_retorna_zero():
    inp = TVMInputs(future_value="1000", interest_rate="5", number_of_periods="10", present_value="x")
    res = solve(inp, Unknown.PMT)
    assert not res.ok and res.value == 0.0

def test_resultado_indefinido():
    res = solve(TVMInputs(future_value="1000", interest_rate="5", number_of_periods="0"), Unknown.PMT)
    assert not res.ok
    assert math.isnan(res.value)
    assert res.formatted == "nan"

def test_settings_decimais_e_busca():
    settings = Settings(decimals=4, rate_guess_percent=1.0, rate_max_iterations=1)
    pmt = solve_periodic_payment(1000, 5, 10)
    inp = TVMInputs(present_value="0", future_value="1000", periodic_payment=str(pmt), number_of_periods="10")
    res = solve(inp, Unknown.RATE, settings=settings)
    assert res.formatted == "5.0000"

def test_inputs_from_mapping_ignora_chaves_extras():
    inp = inputs_from_mapping({"present_value": "1", "outro": "2"})
    assert inp == TVMInputs(present_value="1")

def test_solve_result_ok():
    assert SolveResult(Unknown.N, 1.0).ok
    assert not SolveResult(Unknown.N, 0.0, "erro").ok

@pytest.mark.parametrize("raw", ["1,000", "12,345,678", "1.000,50", "1,000.50", "-2,500"])
def test_parse_number_separador_de_milhar(raw):
    with pytest.raises(InvalidInputError):
        parse_number(raw, "present_value")

def test_milhar_nao_vira_valor_pequeno():
    inp = TVMInputs(present_value="1,000", periodic_payment="0", interest_rate="5", number_of_periods="10")
    res = solve(inp, Unknown.FV)
    assert not res.ok
    assert res.value == 0.0
    assert "Present Value (PV)" in res.error

def test_parse_number_virgula_decimal():
    assert parse_number("1,5") == 1.5
    assert parse_number("-0,25") == -0.25

_VALIDOS = {
    "present_value": "1000",
    "future_value": "1628.89",
    "periodic_payment": "10",
    "interest_rate": "5",
    "number_of_periods": "10",
}

@pytest.mark.parametrize("unknown", list(Unknown))
@pytest.mark.parametrize("ruim", ["", "abc"])
def test_sentinela_em_todas_as_incognitas(unknown, ruim):
    for name in REQUIRED_FIELDS[unknown]:
        dados = {k: v for k, v in _VALIDOS.items() if k != unknown.value}
        dados[name] = ruim
        res = solve(inputs_from_mapping(dados), unknown)
        assert not res.ok
        assert res.value == 0.0
        assert LABELS[name] in res.error

def test_tolerancia_invalida_nao_escapa_de_solve():
    settings = Settings.model_construct(rate_tolerance=0.0)
    inp = TVMInputs(present_value="-1000", future_value="0", periodic_payment="300", number_of_periods="4")
    res = solve(inp, Unknown.RATE, settings=settings)
    assert not res.ok
    assert math.isnan(res.value)
