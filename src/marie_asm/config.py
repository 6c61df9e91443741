"""
MARIE Assembler - Configuration
===============================

Assembler settings. Configuration can come from:
- Default values (defined here)
- Environment variables (AssemblerConfig.from_env)
- Command-line options, which the CLI applies on top of the above

Environment variables:
    MARIEASM_ALLOW_OVERLAP: "1"/"true"/"yes" to downgrade overlapping
                            ORG writes from an error to a warning
    MARIEASM_OUTPUT_FORMAT: Default CLI output (listing, hex, symbols)
    MARIEASM_LOG_LEVEL:     Logging level name (DEBUG, INFO, WARNING, ...)
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os


OUTPUT_FORMATS = ("listing", "hex", "symbols")

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class AssemblerConfig:
    """
    Configuration for an assembly run.

    Attributes:
        filename: Name shown in diagnostics for buffer input (default: "<input>")
        allow_overlap: Warn instead of failing when two words share an
                       address (default: False)
        output_format: What the CLI prints (default: "listing")
        log_level: Logging level name (default: "WARNING")
    """

    filename: str = "<input>"
    allow_overlap: bool = False
    output_format: str = "listing"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Unknown or malformed values are ignored and the default is kept.
        """
        config = cls()

        if overlap := os.environ.get("MARIEASM_ALLOW_OVERLAP"):
            value = overlap.strip().lower()
            if value in _TRUE_VALUES:
                config.allow_overlap = True
            elif value in _FALSE_VALUES:
                config.allow_overlap = False

        if output_format := os.environ.get("MARIEASM_OUTPUT_FORMAT"):
            if output_format.lower() in OUTPUT_FORMATS:
                config.output_format = output_format.lower()

        if log_level := os.environ.get("MARIEASM_LOG_LEVEL"):
            if isinstance(logging.getLevelName(log_level.upper()), int):
                config.log_level = log_level.upper()

        return config

    @property
    def log_level_value(self) -> int:
        """The log level as a logging module constant."""
        return logging.getLevelName(self.log_level)


# Global default configuration (can be overridden in tests)
_default_config: Optional[AssemblerConfig] = None


def get_default_config() -> AssemblerConfig:
    """
    Get the default configuration.

    Created from environment variables on first access.
    """
    global _default_config
    if _default_config is None:
        _default_config = AssemblerConfig.from_env()
    return _default_config


def set_default_config(config: Optional[AssemblerConfig]) -> None:
    """
    Set the default configuration.

    Passing None makes the next get_default_config() re-read the
    environment.
    """
    global _default_config
    _default_config = config
