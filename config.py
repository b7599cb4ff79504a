# config.py
"""
Configuração da calculadora via Pydantic Settings.

Variáveis de ambiente com prefixo SIMPLE_FINANCE_ (ou arquivo .env).
"""
from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SIMPLE_FINANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Simple Finance"
    log_level: str = "INFO"

    # casas decimais exibidas ("%.2f")
    decimals: int = Field(2, ge=0)

    # busca da taxa de juros (Newton-Raphson + Brent)
    rate_guess_percent: float = 10.0
    rate_tolerance: float = Field(1e-10, gt=0)
    rate_max_iterations: int = Field(100, ge=1)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
