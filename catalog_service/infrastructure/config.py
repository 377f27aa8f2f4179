"""Application configuration.

Loads settings from environment variables (prefixed with ``CATALOG_``)
with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Catalog settings loaded from environment variables."""

    app_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = Field(
        default="sqlite:///./catalog.db",
        description="SQLAlchemy database URL",
    )

    # Catalog rules
    enforce_attribute_patterns: bool = Field(
        default=False,
        description="Validate attribute values against their type's pattern on write",
    )
    seed_on_initialise: bool = True

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = {
        "env_prefix": "CATALOG_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
