"""Runtime settings loaded from .env and ``CHAINGRAPH_*`` environment variables."""

import logging
from typing import Annotated, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from textual.logging import TextualHandler

from chaingraph.fetch import ChainClient, ChainSource, LocalChainSource


class Settings(BaseSettings):
    """Settings for the app and its chain source."""

    model_config = SettingsConfigDict(
        env_prefix="CHAINGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        str_strip_whitespace=True,
    )

    api_base: str = "http://127.0.0.1:8000"
    timeout: float = Field(default=10.0, gt=0)
    source: Literal["http", "local"] = "http"
    nameservers: Annotated[list[str], NoDecode] = Field(default_factory=list)
    allow_fallback: bool = Field(
        default=True,
        validation_alias=AliasChoices("CHAINGRAPH_FALLBACK", "allow_fallback"),
    )
    log_level: str = "WARNING"

    @field_validator("source", mode="before")
    @classmethod
    def _lower_source(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("nameservers", mode="before")
    @classmethod
    def _split_nameservers(cls, value):
        if isinstance(value, str):
            return [ns.strip() for ns in value.split(",") if ns.strip()]
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    def make_source(self) -> ChainSource:
        """Create the configured chain source."""
        if self.source == "local":
            return LocalChainSource(self.nameservers or None, timeout=self.timeout)
        return ChainClient(self.api_base, timeout=self.timeout)

    @property
    def source_label(self) -> str:
        """Short description for the status bar."""
        if self.source == "local":
            return "DNS: " + (", ".join(self.nameservers) if self.nameservers else "system")
        return f"API: {self.api_base}"


def configure_logging(level: str) -> None:
    """Send log records to the Textual devtools console.

    The terminal belongs to the app while it runs, so nothing is written to
    stderr. Run ``textual console`` alongside ``textual run --dev`` to see them.
    """
    logging.basicConfig(level=level, handlers=[TextualHandler()], force=True)
