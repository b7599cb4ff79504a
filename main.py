# main.py
from __future__ import annotations
import logging

from config import get_settings
from finance.solver import Unknown, REQUIRED_FIELDS, OPTIONAL_FIELDS, LABELS, inputs_from_mapping, solve


# =========================
# Helpers de entrada
# =========================
def _input_raw(msg: str) -> str:
    return input(f"{msg}: ").strip()

def _input_bool(msg: str, default: bool=False) -> bool:
    raw = input(f"{msg} [{'y' if default else 'n'}]: ").strip().lower()
    if raw == "":
        return default
    return raw.startswith("y")


# =========================
# Menu
# =========================
OPCOES = {
    "1": Unknown.FV,
    "2": Unknown.PV,
    "3": Unknown.PMT,
    "4": Unknown.RATE,
    "5": Unknown.N,
}

def menu():
    print(f"\n=== {get_settings().app_name} ===")
    for op, unknown in OPCOES.items():
        print(f"{op}) {unknown.label}")
    print("0) Exit")


# =========================
# Ações do menu
# =========================
def acao_calcular(unknown: Unknown):
    print(f"\n-- {unknown.label} --")
    raw = {name: _input_raw(LABELS[name]) for name in REQUIRED_FIELDS[unknown]}
    for name in OPTIONAL_FIELDS[unknown]:
        raw[name] = _input_raw(f"{LABELS[name]} (optional, blank = 0)")
    no_comeco = _input_bool("Payments at start of period?", False)

    res = solve(inputs_from_mapping(raw), unknown, payments_at_start=no_comeco)
    if not res.ok:
        print(f"Warning: {res.error}")
    print(f"{unknown.label}: {res.formatted}")
    return res


# =========================
# Loop principal
# =========================
def main():
    logging.basicConfig(level=get_settings().log_level)
    while True:
        menu()
        op = input("Choose: ").strip()
        if op in OPCOES:
            acao_calcular(OPCOES[op])
        elif op == "0":
            print("Goodbye!")
            break
        else:
            print("Invalid option.")


if __name__ == "__main__":
    main()
