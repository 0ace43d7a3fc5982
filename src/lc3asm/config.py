"""
Assembler Configuration
=======================

Settings that change how a run behaves without changing what the
assembled words mean. Defaults reproduce the classic assembler;
environment variables let scripts and CI override them.

Environment Variables
---------------------
    LC3ASM_TABLE_SIZE      Symbol table bucket count (0 = default prime)
    LC3ASM_MAX_ERRORS      Diagnostics collected before a pass gives up
    LC3ASM_STOP_AT_END     "1"/"true"/"yes" to stop pass one at .END
    LC3ASM_OUTPUT_SUFFIX   Extension for the derived output file name
    LC3ASM_ENCODING        Source text encoding
"""

import codecs
import os
from dataclasses import dataclass

# Prime bucket count used when no explicit size is requested
DEFAULT_TABLE_SIZE = 5011

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


class ConfigError(ValueError):
    """A setting or environment variable has an unusable value."""


@dataclass
class AssemblerConfig:
    """
    Configuration for a single assembler run.

    Attributes:
        table_size: Symbol table bucket count, 0 selects DEFAULT_TABLE_SIZE
        max_errors: Errors collected per pass before stopping early
        stop_at_end: End pass one at the first .END instead of reading on
        output_suffix: Extension used when deriving the output file name
        encoding: Text encoding of source files
    """

    table_size: int = 0
    max_errors: int = 100
    stop_at_end: bool = False
    output_suffix: str = ".lc3"
    encoding: str = "utf-8"

    def __post_init__(self):
        if self.table_size < 0:
            raise ConfigError(f"table_size must be >= 0, got {self.table_size}")
        if self.max_errors < 1:
            raise ConfigError(f"max_errors must be >= 1, got {self.max_errors}")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ConfigError(f"unknown source encoding {self.encoding!r}") from None
        if not self.output_suffix.startswith("."):
            self.output_suffix = "." + self.output_suffix

    @property
    def effective_table_size(self) -> int:
        """Bucket count actually used by the symbol table."""
        return self.table_size or DEFAULT_TABLE_SIZE

    @classmethod
    def from_env(cls, environ=None) -> "AssemblerConfig":
        """
        Create a configuration from environment variables.

        Args:
            environ: Mapping to read instead of os.environ (for tests)

        Raises:
            ConfigError: If a variable is set to an unparseable value
        """
        env = os.environ if environ is None else environ
        config = cls()

        if (table_size := env.get("LC3ASM_TABLE_SIZE")) is not None:
            config.table_size = _parse_int("LC3ASM_TABLE_SIZE", table_size)

        if (max_errors := env.get("LC3ASM_MAX_ERRORS")) is not None:
            config.max_errors = _parse_int("LC3ASM_MAX_ERRORS", max_errors)

        if (stop := env.get("LC3ASM_STOP_AT_END")) is not None:
            config.stop_at_end = _parse_bool("LC3ASM_STOP_AT_END", stop)

        if suffix := env.get("LC3ASM_OUTPUT_SUFFIX"):
            config.output_suffix = suffix

        if encoding := env.get("LC3ASM_ENCODING"):
            config.encoding = encoding

        # Re-run validation on the overridden values
        config.__post_init__()
        return config


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value.strip(), 0)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")
