"""
Compactor Configuration
=======================

Settings for the JSON compactor and their binding to command line flags
and environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096
MAX_CHUNK_SIZE = 16 * 1024 * 1024  # 16MB

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# Same spellings strconv.ParseBool accepts
_TRUE_VALUES = {'1', 't', 'T', 'TRUE', 'true', 'True'}
_FALSE_VALUES = {'0', 'f', 'F', 'FALSE', 'false', 'False'}


def env_key(flag_name: str) -> str:
    """Environment variable bound to a long flag name (chunk-size -> CHUNK_SIZE)"""
    return flag_name.upper().replace('-', '_')


def parse_bool(value: str) -> bool:
    """Parse a boolean environment value; anything unrecognized reads as False"""
    value = value.strip()
    if value in _TRUE_VALUES:
        return True
    if value not in _FALSE_VALUES:
        logger.debug(f"Unrecognized boolean value {value!r}, treating as false")
    return False


@dataclass
class CompactorConfig:
    """Configuration settings for the compactor"""

    # Stream settings
    chunk_size: int = DEFAULT_CHUNK_SIZE

    # Output settings
    log_level: str = 'WARNING'
    show_version: bool = False

    # Shutdown settings
    handle_signals: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters"""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.chunk_size > MAX_CHUNK_SIZE:
            raise ValueError(f"chunk_size cannot exceed {MAX_CHUNK_SIZE}")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

    @classmethod
    def from_sources(cls,
                     flags: Mapping[str, Any],
                     environ: Optional[Mapping[str, str]] = None) -> 'CompactorConfig':
        """
        Build a configuration from parsed flags and the environment.

        A flag passed on the command line wins over its environment variable,
        which wins over the default. Flags not passed must be None in `flags`.

        Args:
            flags: Mapping of long flag name to parsed value or None
            environ: Environment to read, defaults to os.environ

        Returns:
            Validated CompactorConfig
        """
        if environ is None:
            environ = os.environ

        def lookup(name: str) -> Optional[Any]:
            value = flags.get(name)
            if value is not None:
                return value
            return environ.get(env_key(name))

        values: Dict[str, Any] = {}

        version = lookup('version')
        if version is not None:
            values['show_version'] = parse_bool(version) if isinstance(version, str) else bool(version)

        chunk_size = lookup('chunk-size')
        if chunk_size is not None:
            try:
                values['chunk_size'] = int(chunk_size)
            except ValueError:
                raise ValueError(f"Invalid chunk_size: {chunk_size!r}") from None

        log_level = flags.get('log-level')
        if log_level is not None:
            values['log_level'] = str(log_level)
        else:
            # an unusable ambient LOG_LEVEL must not stop the filter
            env_level = environ.get(env_key('log-level'))
            if env_level is not None:
                if env_level.strip().upper() in LOG_LEVELS:
                    values['log_level'] = env_level.strip()
                else:
                    logger.warning(f"Ignoring invalid {env_key('log-level')}={env_level!r}, "
                                   f"using {cls.log_level}")

        return cls(**values)
