"""Configuration management for zigdocs using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from zigdocs.types import UpdatePolicy


class ZigDocsSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ZIG_DOCS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Documentation source
    version: str = Field(
        default="master",
        description="Zig version whose documentation is served (e.g. master, 0.14.1)",
    )
    docs_url: str = Field(
        default="https://ziglang.org/documentation",
        description="Base URL hosting <version>/std/main.wasm, <version>/std/sources.tar and the langref",
    )

    # Cache settings
    update_policy: UpdatePolicy = Field(
        default=UpdatePolicy.MANUAL,
        description="When cached artifacts are refreshed: manual, daily or startup",
    )
    request_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds for artifact downloads",
    )

    # Tool settings
    search_limit: int = Field(
        default=20,
        ge=1,
        description="Default maximum number of std library search results",
    )


zigdocs_settings = ZigDocsSettings()
