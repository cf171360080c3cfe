"""Configuration management for the library lending core.

Settings are loaded the same way everywhere in the package:
1. Defaults declared on the model
2. Environment variables with the LIBRARY_LENDING_ prefix
3. An optional .env file for local development
"""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReturnPolicy(str, Enum):
    """Which item a member gives back on return."""

    EXPLICIT = "explicit"
    OLDEST_FIRST = "oldest_first"


class DuplicatePolicy(str, Enum):
    """How repeated identifiers or member names are treated."""

    ALLOW = "allow"
    REJECT = "reject"


class LibrarySettings(BaseSettings):
    """Library lending configuration.

    The two policy pairs are explicit choices rather than hidden behavior:
    - return_policy picks explicit-item or oldest-first returns
    - duplicate_identifiers / duplicate_members pick overwrite-or-reuse
      versus rejection
    """

    model_config = SettingsConfigDict(
        env_prefix="LIBRARY_LENDING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        str_strip_whitespace=True,
    )

    # === Library Metadata ===

    library_name: str = Field(
        default="City Library",
        description="Display name of the library, shown in the shell prompt",
        min_length=1,
        max_length=100,
    )

    # === Lending Policies ===

    return_policy: ReturnPolicy = Field(
        default=ReturnPolicy.EXPLICIT,
        description="Return semantics used by the lending ledger",
    )

    duplicate_identifiers: DuplicatePolicy = Field(
        default=DuplicatePolicy.ALLOW,
        description="Whether adding an item at a used identifier overwrites it",
    )

    duplicate_members: DuplicatePolicy = Field(
        default=DuplicatePolicy.ALLOW,
        description="Whether registering a known member name is accepted",
    )

    # === Catalog ===

    seed_catalog: bool = Field(
        default=True,
        description="Load the starter catalog when a library is created",
    )

    # === Development Configuration ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lowercase level names from the command line or environment."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def effective_log_level(self) -> str:
        """Logging level after applying the debug switch."""
        return "DEBUG" if self.debug else self.log_level


class _ConfigStore:
    """Internal storage for configuration singleton."""

    _instance: LibrarySettings | None = None


def get_config() -> LibrarySettings:
    """Get or create the process-wide settings instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = LibrarySettings()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]
