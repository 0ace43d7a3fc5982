# =============================================================================
# test_config.py - Configuration Tests
# =============================================================================
# Tests for AssemblerConfig defaults, validation and environment overrides.
# =============================================================================

import pytest

from lc3asm.config import DEFAULT_TABLE_SIZE, AssemblerConfig, ConfigError


class TestDefaults:
    """Out-of-the-box settings."""

    def test_defaults(self):
        config = AssemblerConfig()
        assert config.table_size == 0
        assert config.effective_table_size == DEFAULT_TABLE_SIZE
        assert config.max_errors == 100
        assert config.stop_at_end is False
        assert config.output_suffix == ".lc3"
        assert config.encoding == "utf-8"

    def test_suffix_gets_dot(self):
        """A suffix without a leading dot gets one."""
        assert AssemblerConfig(output_suffix="obj").output_suffix == ".obj"

    @pytest.mark.parametrize("kwargs", [
        {"table_size": -1},
        {"max_errors": 0},
    ])
    def test_invalid_values(self, kwargs):
        """Out-of-range values are rejected."""
        with pytest.raises(ValueError):
            AssemblerConfig(**kwargs)


class TestFromEnv:
    """Environment variable overrides."""

    def test_empty_environment(self):
        """No variables gives the defaults."""
        assert AssemblerConfig.from_env({}) == AssemblerConfig()

    def test_all_variables(self):
        """Every variable is applied."""
        config = AssemblerConfig.from_env({
            "LC3ASM_TABLE_SIZE": "11",
            "LC3ASM_MAX_ERRORS": "5",
            "LC3ASM_STOP_AT_END": "yes",
            "LC3ASM_OUTPUT_SUFFIX": ".obj",
            "LC3ASM_ENCODING": "latin-1",
        })
        assert config.table_size == 11
        assert config.effective_table_size == 11
        assert config.max_errors == 5
        assert config.stop_at_end is True
        assert config.output_suffix == ".obj"
        assert config.encoding == "latin-1"

    def test_hex_integers(self):
        """Integer variables accept a 0x prefix."""
        assert AssemblerConfig.from_env({"LC3ASM_TABLE_SIZE": "0x1F"}).table_size == 31

    @pytest.mark.parametrize("value,expected", [
        ("1", True), ("TRUE", True), ("on", True),
        ("0", False), ("no", False), ("", False),
    ])
    def test_boolean_spellings(self, value, expected):
        assert AssemblerConfig.from_env({"LC3ASM_STOP_AT_END": value}).stop_at_end is expected

    def test_bad_integer(self):
        """A non-numeric integer names the variable."""
        with pytest.raises(ValueError, match="LC3ASM_MAX_ERRORS"):
            AssemblerConfig.from_env({"LC3ASM_MAX_ERRORS": "lots"})

    def test_bad_boolean(self):
        with pytest.raises(ValueError, match="LC3ASM_STOP_AT_END"):
            AssemblerConfig.from_env({"LC3ASM_STOP_AT_END": "maybe"})

    def test_out_of_range_from_env(self):
        """Validation still applies to environment values."""
        with pytest.raises(ValueError, match="max_errors"):
            AssemblerConfig.from_env({"LC3ASM_MAX_ERRORS": "0"})

    def test_unknown_encoding(self):
        """An encoding Python does not know is rejected up front."""
        with pytest.raises(ConfigError, match="klingon"):
            AssemblerConfig.from_env({"LC3ASM_ENCODING": "klingon"})

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            AssemblerConfig.from_env({"LC3ASM_TABLE_SIZE": "big"})

    def test_reads_os_environ(self, monkeypatch):
        """Without a mapping, os.environ is used."""
        monkeypatch.setenv("LC3ASM_TABLE_SIZE", "97")
        assert AssemblerConfig.from_env().table_size == 97
