"""Lightweight settings layer wrapping environment variables with validation.

Complements ConservationConfig: use get_settings() for process-level knobs
(logging, which config file to load). Variables are read with the
``CONSERVATION_`` prefix, e.g. ``CONSERVATION_LOG_LEVEL=DEBUG``.
"""
from __future__ import annotations
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='CONSERVATION_', case_sensitive=False, extra='ignore')

    log_level: str = Field("INFO")
    json_logs: bool = Field(False)
    log_file: Optional[str] = Field(None)
    config_file: Optional[str] = Field(None)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore
