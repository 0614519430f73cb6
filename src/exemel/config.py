"""Runtime configuration helpers for the XML cleaner."""

import re
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

XML_NAME_RE = re.compile(r"^[A-Za-z_][\w.\-]*(?::[A-Za-z_][\w.\-]*)?$")


class Settings(BaseSettings):
    """Central configuration for cleaning, formatting and status reporting."""

    indent_size: int = 2
    synthetic_root_name: str = "Root"
    status_parsed: str = "XML parsed correctly"
    status_not_parseable: str = "Text was not able to be parsed into XML"
    status_skipped: str = "Text does not look like XML; left unchanged"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_prefix="EXEMEL_",
        extra="allow",
    )

    @field_validator("indent_size")
    @classmethod
    def validate_indent(cls, value: int) -> int:
        if value < 0:
            raise ValueError("indent_size must not be negative")
        return value

    @field_validator("synthetic_root_name")
    @classmethod
    def validate_root_name(cls, value: str) -> str:
        if not XML_NAME_RE.match(value) or value.lower().startswith("xml"):
            raise ValueError(f"'{value}' is not a usable XML element name")
        return value

    @property
    def indent(self) -> str:
        return " " * self.indent_size


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance."""
    return Settings()
