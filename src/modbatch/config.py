"""Splitter configuration.

This module provides the SplitterConfig dataclass holding the per-kind
request limits, with validation and serialization to/from dictionaries so
the limits can live in JSON files or application config entries.

Example:
    # Gateway that only accepts 60 registers per read
    config = SplitterConfig(max_registers_per_request=60)
    config.validate()

    policy = config.policy_for(RequestKind.READ_INPUT_REGISTERS)

    # Serialize to dict for storage
    data = config.to_dict()

    # Restore from dict
    restored = SplitterConfig.from_dict(data)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .composer.policy import GapAwareSplitPolicy, MaxQuantitySplitPolicy, SplitPolicy
from .composer.requests import RequestKind
from .constants import MAX_COILS_PER_MODBUS_REQUEST, MAX_REGISTERS_PER_MODBUS_REQUEST
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class SplitterConfig:
    """Limits applied when splitting addresses into requests.

    Attributes:
        max_registers_per_request: Register limit for FC3/FC4 reads
            (default 124)
        max_coils_per_request: Coil limit for FC1/FC2 reads (default 2048)
        max_gap: Widest hole read across inside one request. None disables
            gap splitting (default)
    """

    max_registers_per_request: int = MAX_REGISTERS_PER_MODBUS_REQUEST
    max_coils_per_request: int = MAX_COILS_PER_MODBUS_REQUEST
    max_gap: int | None = None

    def validate(self) -> None:
        """Validate limits.

        Raises:
            ConfigurationError: If a limit is out of range
        """
        if not 1 <= self.max_registers_per_request <= MAX_REGISTERS_PER_MODBUS_REQUEST + 1:
            raise ConfigurationError(
                "max_registers_per_request must be between 1 and "
                f"{MAX_REGISTERS_PER_MODBUS_REQUEST + 1}, got {self.max_registers_per_request}"
            )
        if not 1 <= self.max_coils_per_request <= MAX_COILS_PER_MODBUS_REQUEST:
            raise ConfigurationError(
                "max_coils_per_request must be between 1 and "
                f"{MAX_COILS_PER_MODBUS_REQUEST}, got {self.max_coils_per_request}"
            )
        if self.max_gap is not None and self.max_gap < 0:
            raise ConfigurationError(f"max_gap must be >= 0, got {self.max_gap}")

    def max_quantity_for(self, kind: RequestKind) -> int:
        """Configured per-request limit for ``kind``."""
        if kind.is_bit_access:
            return self.max_coils_per_request
        return self.max_registers_per_request

    def policy_for(self, kind: RequestKind) -> SplitPolicy:
        """Build the split policy for ``kind``.

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.validate()
        limit = self.max_quantity_for(kind)
        if self.max_gap is None:
            return MaxQuantitySplitPolicy(limit)
        return GapAwareSplitPolicy(limit, max_gap=self.max_gap)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-serializable dictionary."""
        return {
            "max_registers_per_request": self.max_registers_per_request,
            "max_coils_per_request": self.max_coils_per_request,
            "max_gap": self.max_gap,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SplitterConfig:
        """Create configuration from dictionary.

        Missing keys fall back to the protocol defaults.

        Raises:
            ConfigurationError: If a value is not an integer or out of range
        """
        try:
            max_gap = data.get("max_gap")
            config = cls(
                max_registers_per_request=int(
                    data.get("max_registers_per_request", MAX_REGISTERS_PER_MODBUS_REQUEST)
                ),
                max_coils_per_request=int(
                    data.get("max_coils_per_request", MAX_COILS_PER_MODBUS_REQUEST)
                ),
                max_gap=int(max_gap) if max_gap is not None else None,
            )
        except (TypeError, ValueError) as err:
            raise ConfigurationError(f"Invalid splitter configuration: {err}") from err
        config.validate()
        return config


__all__ = ["SplitterConfig"]
