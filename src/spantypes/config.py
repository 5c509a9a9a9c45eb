"""Configuration loaded from environment variables.

Environment Variables:
    DAHDISPANTYPESCONF: Rule file (default: /etc/dahdi/span-types.conf)
    DAHDI_DEVICES_DIR: Device store root (default: /sys/bus/dahdi_devices/devices)
    SPAN_TYPES_KEY: Identifier dumpconfig prefers: hwid, location or path (default: hwid)
    SPAN_TYPES_LOG_LEVEL: Log level when not verbose (default: WARNING)

A ``.env`` file in the working directory is honoured. Command-line options
take precedence over these values.
"""
import logging
import os
from typing import Optional

from dotenv import load_dotenv

from .adapters.sysfs_store import DEFAULT_DEVICES_DIR
from .domain.entities import ASSIGNABLE_TYPES, IdentifierKey, LineType
from .exceptions import InvalidOptionError

load_dotenv()

DEFAULT_RULES_FILE = "/etc/dahdi/span-types.conf"

# "devpath" is the spelling older configurations use
_KEY_ALIASES = {"devpath": IdentifierKey.PATH}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_identifier_key(value: str, option: str = "--key") -> IdentifierKey:
    """Parse an identifier key option value (hwid, location or path)."""
    normalized = value.strip().lower()
    if normalized in _KEY_ALIASES:
        return _KEY_ALIASES[normalized]
    try:
        return IdentifierKey(normalized)
    except ValueError:
        allowed = ", ".join(k.value for k in IdentifierKey)
        raise InvalidOptionError(
            f"Unknown identifier key {value!r} (expected one of: {allowed})",
            option=option,
            value=value,
        ) from None


def parse_line_mode(value: str, option: str = "--line-mode") -> LineType:
    """Parse a line mode option value (E1, T1 or J1, case-insensitive)."""
    normalized = value.strip().upper()
    for line_type in ASSIGNABLE_TYPES:
        if line_type.value == normalized:
            return line_type
    raise InvalidOptionError(
        f"Unknown line mode {value!r} (expected one of: E1, T1, J1)",
        option=option,
        value=value,
    )


class SpanTypesConfig:
    """Configuration loaded from environment variables."""

    def __init__(self):
        self.rules_file = os.getenv("DAHDISPANTYPESCONF", DEFAULT_RULES_FILE)
        self.devices_dir = os.getenv("DAHDI_DEVICES_DIR", DEFAULT_DEVICES_DIR)
        # Checked on use, so that --key can replace a bad environment value
        self._key_value = os.getenv("SPAN_TYPES_KEY", "hwid")
        self._key_option = "SPAN_TYPES_KEY"
        self.log_level = self._parse_log_level(os.getenv("SPAN_TYPES_LOG_LEVEL", "WARNING"))

    @property
    def key(self) -> IdentifierKey:
        return parse_identifier_key(self._key_value, option=self._key_option)

    @staticmethod
    def _parse_log_level(value: str) -> int:
        name = value.strip().upper()
        if name not in _LOG_LEVELS:
            raise InvalidOptionError(
                f"Unknown log level {value!r} (expected one of: {', '.join(_LOG_LEVELS)})",
                option="SPAN_TYPES_LOG_LEVEL",
                value=value,
            )
        return getattr(logging, name)

    def override(
        self,
        rules_file: Optional[str] = None,
        devices_dir: Optional[str] = None,
        key: Optional[str] = None,
    ) -> "SpanTypesConfig":
        """Apply command-line values on top of the environment."""
        if rules_file:
            self.rules_file = rules_file
        if devices_dir:
            self.devices_dir = devices_dir
        if key:
            parse_identifier_key(key)
            self._key_value = key
            self._key_option = "--key"
        return self

    def __repr__(self):
        return (
            f"SpanTypesConfig("
            f"rules_file={self.rules_file}, "
            f"devices_dir={self.devices_dir}, "
            f"key={self._key_value}, "
            f"log_level={logging.getLevelName(self.log_level)})"
        )
