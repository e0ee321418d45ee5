"""
Unit tests for configuration management.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError


def test_settings_loads_from_environment():
    """Test that settings can be loaded from environment variables."""
    with patch.dict(os.environ, {
        'TSQL_LOG_LEVEL': 'DEBUG',
        'TSQL_QUOTED_IDENTIFIER': 'false',
        'TSQL_GO_TRAILING_TEXT': 'error',
        'TSQL_MAX_NESTING_DEPTH': '50',
        'TSQL_DYNAMIC_SQL_MAX_DEPTH': '2',
        'TSQL_MAX_WORKERS': '8',
    }):
        from tsqlparser.config import Settings
        settings = Settings()

        assert settings.log_level == 'DEBUG'
        assert settings.quoted_identifier is False
        assert settings.go_trailing_text == 'error'
        assert settings.max_nesting_depth == 50
        assert settings.dynamic_sql_max_depth == 2
        assert settings.max_workers == 8


def test_settings_has_default_values():
    """Test that settings have appropriate default values."""
    with patch.dict(os.environ, {}, clear=True):
        from tsqlparser.config import Settings
        settings = Settings(_env_file=None)

        assert settings.log_level == 'INFO'
        assert settings.quoted_identifier is True
        assert settings.dialect_path is None
        assert settings.go_trailing_text == 'warn'
        assert settings.max_nesting_depth == 100
        assert settings.dynamic_sql_max_depth == 4
        assert settings.max_workers == 3


def test_settings_rejects_unknown_trailing_text_policy():
    """Test that the GO trailing text policy is validated."""
    with patch.dict(os.environ, {'TSQL_GO_TRAILING_TEXT': 'ignore'}):
        from tsqlparser.config import Settings

        with pytest.raises(ValidationError):
            Settings()
