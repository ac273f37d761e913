"""Exceptions raised by modbatch.

All library errors inherit from :class:`ModbatchError` so callers can use a
single ``except ModbatchError`` around request planning. The concrete
classes also inherit from :class:`ValueError` because every failure in this
library is caused by bad input, never by I/O.
"""

from __future__ import annotations


class ModbatchError(Exception):
    """Base exception for all modbatch errors."""

    pass


class ConfigurationError(ModbatchError, ValueError):
    """Invalid endpoint path, unit id or splitter configuration."""

    pass


class ValidationError(ModbatchError, ValueError):
    """Address definition is invalid (negative address, empty size, ...)."""

    pass


class MalformedEndpointPathError(ConfigurationError):
    """Endpoint path does not contain the unit id separator.

    Raised by the endpoint grouper before any address of the offending
    entry is grouped.
    """

    def __init__(self, path: str, separator: str) -> None:
        """Initialize with the offending path.

        Args:
            path: The endpoint path that could not be parsed
            separator: The separator that was expected in the path
        """
        self.path = path
        self.separator = separator
        super().__init__(
            f"Endpoint path '{path}' is missing the unit id separator '{separator}'. "
            f"Expected '<uri>{separator}<unit id>'."
        )


__all__ = [
    "ConfigurationError",
    "MalformedEndpointPathError",
    "ModbatchError",
    "ValidationError",
]
