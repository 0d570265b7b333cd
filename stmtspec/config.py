"""Global configuration for stmtspec statements.

Statement defaults live in a frozen :class:`StatementConfig`. A process-wide
instance is held by :class:`ConfigManager`; it starts from
:func:`create_default_config` and can be replaced at runtime or loaded from
``STMTSPEC_*`` environment variables.
"""

import os
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from stmtspec.utils.logging import get_logger

__all__ = (
    "ConfigManager",
    "StatementConfig",
    "create_default_config",
    "get_global_config",
    "load_config_from_env",
    "reset_global_config",
    "set_global_config",
)

logger = get_logger("config")


@dataclass(frozen=True)
class StatementConfig:
    """Defaults applied to every new statement.

    Attributes:
        fetch_size: Rows fetched per round trip, applied as the cursor ``arraysize``.
        max_rows: Upper bound on rows read by a query, ``0`` means unlimited.
        named_parameters: Default for ``PreparedStatement.init(..., named=...)``.
    """

    fetch_size: int = 100
    max_rows: int = 0
    named_parameters: bool = False

    def validate(self) -> "list[str]":
        """Validate configuration values.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.fetch_size <= 0:
            errors.append("fetch_size must be positive")
        if self.max_rows < 0:
            errors.append("max_rows must not be negative")
        return errors

    def replace(self, **changes: Any) -> "StatementConfig":
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)


class ConfigManager:
    """Thread-safe holder of the global :class:`StatementConfig`."""

    __slots__ = ("_change_callbacks", "_config", "_lock")

    def __init__(self) -> None:
        self._config = create_default_config()
        self._lock = threading.RLock()
        self._change_callbacks: list[Callable[[StatementConfig], None]] = []

    def get_config(self) -> StatementConfig:
        with self._lock:
            return self._config

    def set_config(self, config: StatementConfig) -> None:
        """Set global configuration - thread-safe with notifications.

        Args:
            config: New configuration to set

        Raises:
            ValueError: If the configuration does not validate.
        """
        validation_errors = config.validate()
        if validation_errors:
            error_msg = f"Invalid configuration: {', '.join(validation_errors)}"
            raise ValueError(error_msg)

        with self._lock:
            self._config = config
            for callback in self._change_callbacks:
                try:
                    callback(config)
                except Exception as e:
                    logger.warning("Configuration change callback failed: %s", e)

        logger.info("Global configuration updated")

    def add_change_callback(self, callback: Callable[[StatementConfig], None]) -> None:
        with self._lock:
            self._change_callbacks.append(callback)

    def remove_change_callback(self, callback: Callable[[StatementConfig], None]) -> bool:
        """Remove configuration change callback.

        Returns:
            True if callback was found and removed, False otherwise
        """
        with self._lock:
            try:
                self._change_callbacks.remove(callback)
            except ValueError:
                return False
            return True


def create_default_config() -> StatementConfig:
    return StatementConfig()


def load_config_from_env() -> StatementConfig:
    """Load configuration from ``STMTSPEC_*`` environment variables.

    Unset variables keep their defaults. Malformed or out-of-range values are
    logged and replaced by the default.

    Returns:
        StatementConfig built from the environment
    """
    defaults = StatementConfig()
    return StatementConfig(
        fetch_size=_env_int("STMTSPEC_FETCH_SIZE", defaults.fetch_size, minimum=1),
        max_rows=_env_int("STMTSPEC_MAX_ROWS", defaults.max_rows, minimum=0),
        named_parameters=_env_bool("STMTSPEC_NAMED_PARAMETERS", defaults.named_parameters),
    )


_TRUE_VALUES = frozenset(("true", "1", "yes", "on", "enabled"))
_FALSE_VALUES = frozenset(("false", "0", "no", "off", "disabled"))


def _env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    logger.warning("Invalid boolean value for %s: %s, using default %s", key, value, default)
    return default


def _env_int(key: str, default: int, minimum: "Optional[int]" = None) -> int:
    """Get integer value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        number = int(value)
    except ValueError:
        logger.warning("Invalid integer value for %s: %s, using default %d", key, value, default)
        return default
    if minimum is not None and number < minimum:
        logger.warning("Value for %s must be >= %d, got %d, using default %d", key, minimum, number, default)
        return default
    return number


_config_manager = ConfigManager()


def get_global_config() -> StatementConfig:
    return _config_manager.get_config()


def set_global_config(config: StatementConfig) -> None:
    _config_manager.set_config(config)


def reset_global_config() -> None:
    """Restore the default configuration."""
    _config_manager.set_config(create_default_config())
