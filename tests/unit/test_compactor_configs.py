"""
Unit tests for compactor configuration
======================================

Tests for compactor_configs.py including:
- Defaults and validation
- Flag to environment name mangling
- Precedence of flags, environment and defaults
"""

import logging

import pytest

from compactor_configs import (
    CompactorConfig, DEFAULT_CHUNK_SIZE, MAX_CHUNK_SIZE, env_key, parse_bool
)


class TestCompactorConfig:
    """Test CompactorConfig defaults and validation"""

    def test_defaults(self):
        config = CompactorConfig()

        assert config.chunk_size == DEFAULT_CHUNK_SIZE == 4096
        assert config.log_level == 'WARNING'
        assert config.show_version is False
        assert config.handle_signals is True

    def test_log_level_normalized(self):
        assert CompactorConfig(log_level='debug').log_level == 'DEBUG'

    @pytest.mark.parametrize("chunk_size", [0, -1])
    def test_chunk_size_must_be_positive(self, chunk_size):
        with pytest.raises(ValueError, match="chunk_size must be positive"):
            CompactorConfig(chunk_size=chunk_size)

    def test_chunk_size_upper_bound(self):
        with pytest.raises(ValueError, match="chunk_size cannot exceed"):
            CompactorConfig(chunk_size=MAX_CHUNK_SIZE + 1)

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="Invalid log_level"):
            CompactorConfig(log_level='LOUD')


class TestEnvironmentBinding:
    """Test flag/environment binding"""

    @pytest.mark.parametrize("flag,key", [
        ('version', 'VERSION'),
        ('chunk-size', 'CHUNK_SIZE'),
        ('log-level', 'LOG_LEVEL'),
    ])
    def test_env_key(self, flag, key):
        assert env_key(flag) == key

    @pytest.mark.parametrize("value", ['1', 't', 'T', 'TRUE', 'true', 'True', ' true '])
    def test_parse_bool_true(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ['0', 'f', 'false', 'FALSE', '', 'yes', '1.2'])
    def test_parse_bool_false(self, value):
        assert parse_bool(value) is False

    def test_no_flags_no_env(self):
        """Test defaults when nothing is set"""
        config = CompactorConfig.from_sources({'version': None, 'chunk-size': None}, environ={})

        assert config == CompactorConfig()

    def test_env_fills_unset_flags(self):
        environ = {'VERSION': 'true', 'CHUNK_SIZE': '65536', 'LOG_LEVEL': 'info'}

        config = CompactorConfig.from_sources(
            {'version': None, 'chunk-size': None, 'log-level': None},
            environ=environ
        )

        assert config.show_version is True
        assert config.chunk_size == 65536
        assert config.log_level == 'INFO'

    def test_flags_win_over_env(self):
        environ = {'CHUNK_SIZE': '65536', 'LOG_LEVEL': 'info'}

        config = CompactorConfig.from_sources(
            {'chunk-size': 128, 'log-level': 'error'},
            environ=environ
        )

        assert config.chunk_size == 128
        assert config.log_level == 'ERROR'

    def test_unparsable_bool_env_reads_false(self):
        config = CompactorConfig.from_sources({}, environ={'VERSION': '2.0.1'})

        assert config.show_version is False

    def test_invalid_chunk_size_env(self):
        with pytest.raises(ValueError, match="Invalid chunk_size"):
            CompactorConfig.from_sources({}, environ={'CHUNK_SIZE': 'big'})

    def test_invalid_log_level_env_falls_back(self, caplog):
        """Test a bad LOG_LEVEL in the environment is ignored with a warning"""
        with caplog.at_level(logging.WARNING, logger="compactor_configs"):
            config = CompactorConfig.from_sources({'log-level': None}, environ={'LOG_LEVEL': 'verbose'})

        assert config.log_level == 'WARNING'
        assert "Ignoring invalid LOG_LEVEL='verbose'" in caplog.text

    def test_invalid_log_level_flag_is_fatal(self):
        with pytest.raises(ValueError, match="Invalid log_level"):
            CompactorConfig.from_sources({'log-level': 'verbose'}, environ={'LOG_LEVEL': 'info'})

    def test_unrelated_env_ignored(self):
        config = CompactorConfig.from_sources({}, environ={'CHUNKSIZE': '1', 'version': 'true'})

        assert config == CompactorConfig()
