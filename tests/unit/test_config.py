"""Tests for runtime configuration."""

import logging

import pytest

from depaudit.config import DEFAULT_REGISTRY, AuditConfig
from depaudit.log import NOTICE, configure_logging


class TestAuditConfig:
    """Test environment loading and overrides."""

    def test_defaults(self):
        config = AuditConfig.from_env({})

        assert config.registry == DEFAULT_REGISTRY
        assert config.global_mode is False
        assert config.timeout == 30.0
        assert config.npm_command == "npm"
        assert config.log_level == "NOTICE"

    def test_environment_values(self):
        config = AuditConfig.from_env({
            "DEPAUDIT_REGISTRY": "https://mirror.example.com/",
            "DEPAUDIT_GLOBAL": "true",
            "DEPAUDIT_TIMEOUT": "5",
            "DEPAUDIT_NPM": "/usr/local/bin/npm",
            "DEPAUDIT_LOG_LEVEL": "debug",
        })

        assert config.registry == "https://mirror.example.com/"
        assert config.global_mode is True
        assert config.timeout == 5.0
        assert config.npm_command == "/usr/local/bin/npm"
        assert config.log_level == "DEBUG"

    def test_overrides_win_and_none_is_ignored(self):
        config = AuditConfig.from_env(
            {"DEPAUDIT_REGISTRY": "https://env.example.com/"},
            registry="https://cli.example.com/",
            timeout=None,
        )

        assert config.registry == "https://cli.example.com/"
        assert config.timeout == 30.0

    def test_invalid_timeout(self):
        with pytest.raises(ValueError):
            AuditConfig.from_env({"DEPAUDIT_TIMEOUT": "soon"})

    def test_unknown_override(self):
        with pytest.raises(TypeError):
            AuditConfig.from_env({}, colour=True)


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def reset_logger(self):
        yield
        logger = logging.getLogger("depaudit")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    def test_notice_level_registered(self):
        logger = configure_logging("notice")

        assert logger.level == NOTICE
        assert logging.getLevelName(NOTICE) == "NOTICE"
        assert len(logger.handlers) == 1

        configure_logging("DEBUG")
        assert len(logger.handlers) == 1

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging("LOUD")
