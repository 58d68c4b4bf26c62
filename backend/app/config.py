"""
Configuration for the TimeScope API.

Engine limits and the grammar defaults are read from the environment
(or ``.env``) once and shared by the app and the server entry point.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from timescope import SUPPORTED_LANGUAGES, Dialect, ParserLimits


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)
    WORKERS: int = Field(default=1, gt=0)
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    # CORS
    ALLOWED_ORIGINS: str = Field(default="http://localhost:3000,http://localhost:5173")

    # Engine
    MAX_REQUEST_SIZE: int = Field(default=1_048_576)  # 1 MB
    MAX_CODE_LENGTH: int = Field(default=50_000, gt=0)
    MAX_NESTING_DEPTH: int = Field(default=64, gt=0)
    MAX_SYNTAX_DEPTH: int = Field(default=150, gt=0)
    DEFAULT_DIALECT: Dialect = Field(default=Dialect.AUTO)
    DEFAULT_LANGUAGE: Optional[str] = Field(default=None)
    PRELOAD_GRAMMARS: bool = Field(default=True)

    @field_validator("DEFAULT_LANGUAGE")
    @classmethod
    def validate_default_language(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        v = v.strip().lower()
        if v not in SUPPORTED_LANGUAGES:
            raise ValueError(f"DEFAULT_LANGUAGE must be one of {', '.join(SUPPORTED_LANGUAGES)}")
        return v

    @property
    def cors_origins(self) -> list[str]:
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        if "*" in origins:
            return ["*"]
        return origins

    @property
    def parser_limits(self) -> ParserLimits:
        return ParserLimits(
            max_source_length=self.MAX_CODE_LENGTH,
            max_nesting_depth=self.MAX_NESTING_DEPTH,
            max_syntax_depth=self.MAX_SYNTAX_DEPTH,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


# Logging setup
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger("timescope-api")
