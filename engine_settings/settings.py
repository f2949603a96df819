"""Environment-driven settings and logging setup."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from contract_registry import MAINNET_CHAIN_ID, ContractRegistry, load_registry

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """Settings read from ``GOVKIT_*`` environment variables or ``.env``."""

    chain_id: int = MAINNET_CHAIN_ID
    contracts_file: Optional[Path] = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="GOVKIT_",
        env_file=".env",
        extra="ignore",
    )

    def build_registry(self) -> ContractRegistry:
        return load_registry(self.contracts_file)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
