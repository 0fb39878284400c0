"""
Tests for environment configuration.
"""

import logging
import os
from unittest.mock import patch

import pytest

from api.config import RakutenConfig, get_log_level, validate_required_config


class TestRakutenConfig:
    """Tests for RakutenConfig getters."""

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        assert RakutenConfig.get_application_id() is None
        assert RakutenConfig.get_request_interval() == 1.5
        assert RakutenConfig.get_timeout() == 10.0
        assert RakutenConfig.get_category_list_url().endswith("/Recipe/CategoryList/20170426")

    @patch.dict(os.environ, {"RAKUTEN_REQUEST_INTERVAL_SECONDS": "2"}, clear=True)
    def test_request_interval_override(self):
        assert RakutenConfig.get_request_interval() == 2.0

    @patch.dict(os.environ, {"RAKUTEN_TIMEOUT_SECONDS": "soon"}, clear=True)
    def test_invalid_number_raises(self):
        with pytest.raises(RuntimeError, match="RAKUTEN_TIMEOUT_SECONDS must be a number"):
            RakutenConfig.get_timeout()


class TestValidateRequiredConfig:
    """Tests for validate_required_config()."""

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_application_id(self):
        with pytest.raises(RuntimeError, match="RAKUTEN_APP_ID"):
            validate_required_config()

    @patch.dict(os.environ, {"RAKUTEN_APP_ID": ""}, clear=True)
    def test_empty_application_id(self):
        with pytest.raises(RuntimeError):
            validate_required_config()

    @patch.dict(os.environ, {"RAKUTEN_APP_ID": "1234567890"}, clear=True)
    def test_present_application_id(self):
        validate_required_config()


class TestLogLevel:
    @patch.dict(os.environ, {"LOG_LEVEL": "debug"}, clear=True)
    def test_named_level(self):
        assert get_log_level() == logging.DEBUG

    @patch.dict(os.environ, {"LOG_LEVEL": "chatty"}, clear=True)
    def test_unknown_level_falls_back_to_info(self):
        assert get_log_level() == logging.INFO
