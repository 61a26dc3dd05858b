"""Environment settings with pydantic-settings."""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Application
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="json or console")
    config_path: Optional[str] = Field(
        default=None,
        description="Path to YAML config (defaults to config/config.yaml)"
    )

    # Pipeline overrides
    keywords: str = Field(
        default="",
        description="Comma-separated relevance keywords, overrides config"
    )
    window_days: Optional[int] = Field(default=None, description="Default lookback window")
    max_items: Optional[int] = Field(default=None, description="Per-collection result cap")

    # HTTP API
    http_host: str = Field(default="0.0.0.0", description="API bind host")
    http_port: int = Field(default=8080, description="API bind port")
    cache_seconds: int = Field(default=60, description="s-maxage for API responses")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def keyword_list(self) -> List[str]:
        """Keywords from env, empty entries dropped."""
        return [k.strip() for k in self.keywords.split(",") if k.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
