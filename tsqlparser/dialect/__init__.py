"""
Dialect keyword tables.

The tables live in YAML so they can be extended without code changes. They
are loaded once per path, validated, and shared read-only by every parse.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

DEFAULT_DIALECT_PATH = Path(__file__).parent / "tsql.yaml"

REQUIRED_FIELDS = ("name", "version", "reserved", "keywords", "statement_starters")


class Dialect(BaseModel):
    """Validated keyword tables for one SQL dialect."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    reserved: FrozenSet[str]
    keywords: FrozenSet[str]
    function_keywords: FrozenSet[str] = frozenset()
    niladic_functions: FrozenSet[str] = frozenset()
    statement_starters: FrozenSet[str]
    alias_stop: FrozenSet[str] = frozenset()
    table_hints: FrozenSet[str] = frozenset()
    join_hints: FrozenSet[str] = frozenset()
    cursor_options: FrozenSet[str] = frozenset()
    method_names: FrozenSet[str] = frozenset()

    @field_validator(
        "reserved",
        "keywords",
        "function_keywords",
        "niladic_functions",
        "statement_starters",
        "alias_stop",
        "table_hints",
        "join_hints",
        "cursor_options",
        "method_names",
        mode="before",
    )
    @classmethod
    def _upper(cls, value):
        return frozenset(str(word).upper() for word in value or ())

    def is_keyword(self, word: str) -> bool:
        upper = word.upper()
        return upper in self.reserved or upper in self.keywords

    def is_reserved(self, word: str) -> bool:
        return word.upper() in self.reserved


_cache: Dict[str, Dialect] = {}
_lock = threading.Lock()


def load_dialect(path: Optional[Union[str, Path]] = None) -> Dialect:
    """
    Load dialect tables from a YAML file.

    Args:
        path: YAML file; defaults to the bundled T-SQL tables

    Returns:
        Validated Dialect

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a required field is missing
        yaml.YAMLError: If the file is malformed
    """
    dialect_path = Path(path) if path is not None else DEFAULT_DIALECT_PATH
    cache_key = str(dialect_path.resolve())

    with _lock:
        if cache_key in _cache:
            return _cache[cache_key]

        if not dialect_path.exists():
            raise FileNotFoundError(f"Dialect configuration not found: {dialect_path}")

        try:
            with open(dialect_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse dialect configuration {dialect_path}: {e}")
            raise

        for field in REQUIRED_FIELDS:
            if field not in config:
                raise ValueError(f"Missing required field '{field}' in {dialect_path}")

        dialect = Dialect(**config)
        _cache[cache_key] = dialect

        logger.info(
            f"Loaded dialect '{dialect.name}' v{dialect.version} from {dialect_path}"
        )
        return dialect


def get_dialect() -> Dialect:
    """Return the dialect selected by settings, loading it on first use."""
    from tsqlparser.config import settings

    return load_dialect(settings.dialect_path)


def clear_cache() -> None:
    with _lock:
        _cache.clear()


__all__ = ["Dialect", "DEFAULT_DIALECT_PATH", "load_dialect", "get_dialect", "clear_cache"]
