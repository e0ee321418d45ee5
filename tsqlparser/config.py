"""
Parser configuration management.
"""

from pydantic_settings import BaseSettings
from typing import Literal, Optional


class Settings(BaseSettings):
    """Parser settings loaded from ``TSQL_``-prefixed environment variables."""

    # Logging
    log_level: str = "INFO"

    # Lexing
    quoted_identifier: bool = True
    dialect_path: Optional[str] = None  # Falls back to the bundled tsql.yaml

    # Batch splitting
    go_trailing_text: Literal["warn", "error"] = "warn"

    # Parsing limits
    max_nesting_depth: int = 100
    dynamic_sql_max_depth: int = 4

    # Parallel parsing
    max_workers: int = 3

    class Config:
        env_prefix = "TSQL_"
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
