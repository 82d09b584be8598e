"""Runtime configuration.

Values come from ZKSPEND_* environment variables or a local .env file.
"""

import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from zkspend.utils.hash import sha256

# Identity of the spend verification program an artifact must attest to
SPEND_PROGRAM_ID = sha256(b"zkspend/spend-verification/v1")


def _is_hex_of_length(value: str, size: int) -> bool:
    digits = value[2:] if value.startswith("0x") else value
    try:
        return len(bytes.fromhex(digits)) == size
    except ValueError:
        return False


class Settings(BaseSettings):
    """Process-wide settings for the spend protocol host."""

    model_config = SettingsConfigDict(env_prefix="ZKSPEND_", env_file=".env", extra="ignore")

    program_id: str = Field(default=SPEND_PROGRAM_ID.hex(), description="Expected program identity (hex)")
    merkle_tree_depth: int = Field(default=20, ge=1, le=64, description="Default height of built trees")
    log_level: str = Field(default="INFO", description="Logging level name")
    seal_key: Optional[str] = Field(default=None, description="Local backend seal key (hex, 32 bytes)")

    @field_validator("program_id")
    @classmethod
    def _program_id_is_32_bytes(cls, value: str) -> str:
        if not _is_hex_of_length(value, 32):
            raise ValueError("program_id must be 32 bytes of hex")
        return value

    @field_validator("seal_key")
    @classmethod
    def _seal_key_is_32_bytes(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _is_hex_of_length(value, 32):
            raise ValueError("seal_key must be 32 bytes of hex")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level: {value}")
        return value

    @property
    def program_id_bytes(self) -> bytes:
        return bytes.fromhex(self.program_id.removeprefix("0x"))

    @property
    def seal_key_bytes(self) -> Optional[bytes]:
        if self.seal_key is None:
            return None
        return bytes.fromhex(self.seal_key.removeprefix("0x"))


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure the package logger from settings."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("zkspend").setLevel(settings.log_level)
