"""Configuration management for genomap.

Configuration can come from default values or a TOML file. Command-line
options override file values where both exist.

Example config file::

    [mapper]
    max_depth = 8
    max_attempts = 5

    [logging]
    verbosity = 2
    log_file = "genomap.log"

Example:
    >>> from genomap.config import Config
    >>> config = Config.load("genomap.toml")
    >>> config.mapper.max_depth
    8
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import attrs

from genomap.assembly.mapper import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_INITIAL_BACKOFF,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DEPTH,
)

# Logging defaults
DEFAULT_VERBOSITY = 1


# =============================================================================
# Configuration Classes
# =============================================================================


@attrs.define
class MapperConfig:
    """Configuration for the assembly mapper.

    Attributes:
        max_depth: Maximum hops through the assembly hierarchy.
        max_attempts: Attempts per assembly source read.
        initial_backoff: First retry delay in seconds.
        backoff_multiplier: Retry delay growth factor.
    """

    max_depth: int = attrs.field(default=DEFAULT_MAX_DEPTH, validator=attrs.validators.ge(0))
    max_attempts: int = attrs.field(
        default=DEFAULT_MAX_ATTEMPTS, validator=attrs.validators.ge(1)
    )
    initial_backoff: float = attrs.field(
        default=DEFAULT_INITIAL_BACKOFF, validator=attrs.validators.ge(0)
    )
    backoff_multiplier: float = attrs.field(
        default=DEFAULT_BACKOFF_MULTIPLIER, validator=attrs.validators.ge(1.0)
    )


@attrs.define
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        verbosity: 0=warning, 1=info, 2=debug.
        log_file: Optional file receiving debug-level logs.
        use_rich: Use rich for console output.
    """

    verbosity: int = attrs.field(
        default=DEFAULT_VERBOSITY, validator=attrs.validators.in_((0, 1, 2))
    )
    log_file: str | None = None
    use_rich: bool = True


@attrs.define
class Config:
    """Main configuration container for genomap.

    Attributes:
        mapper: Assembly mapper configuration.
        logging: Logging configuration.
    """

    mapper: MapperConfig = attrs.Factory(MapperConfig)
    logging: LoggingConfig = attrs.Factory(LoggingConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load configuration from a TOML file.

        Args:
            path: Path to configuration file. If None, returns defaults.

        Returns:
            Loaded configuration object.

        Raises:
            FileNotFoundError: If configuration file doesn't exist.
            ValueError: If the file has unknown sections or keys, or
                values fail validation.
        """
        if path is None:
            return cls()

        path = Path(path)
        with open(path, "rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build configuration from nested dictionaries.

        Raises:
            ValueError: If a section or key is unknown, or a value is invalid.
        """
        sections = {"mapper": MapperConfig, "logging": LoggingConfig}

        unknown = set(data) - set(sections)
        if unknown:
            raise ValueError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

        kwargs = {}
        for name, section_cls in sections.items():
            values = data.get(name, {})
            known = {field.name for field in attrs.fields(section_cls)}
            bad = set(values) - known
            if bad:
                raise ValueError(f"Unknown keys in [{name}]: {', '.join(sorted(bad))}")
            try:
                kwargs[name] = section_cls(**values)
            except TypeError as e:
                raise ValueError(f"Invalid [{name}] configuration: {e}") from e

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return attrs.asdict(self)
