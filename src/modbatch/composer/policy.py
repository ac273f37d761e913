"""Split policies deciding where one read request ends and the next begins.

The splitter accumulates sorted addresses into a window and asks its
policy before admitting each address whether the window must be closed
first. Register and coil reads share the same accumulation code and only
differ in the policy they are given.

Example:
    # Register reads limited to 124 registers (default)
    policy = MaxQuantitySplitPolicy.for_kind(RequestKind.READ_HOLDING_REGISTERS)

    # Do not read across holes wider than 10 registers
    policy = GapAwareSplitPolicy(max_addresses_per_request=124, max_gap=10)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from modbatch.addresses import Address
from modbatch.constants import MAX_REGISTERS_PER_MODBUS_REQUEST
from modbatch.exceptions import ConfigurationError

from .requests import RequestKind


class SplitPolicy(Protocol):
    """Decides when to close the current window."""

    @property
    def max_addresses_per_request(self) -> int: ...

    def should_split(
        self,
        current: Address,
        quantity: int,
        previous: Address | None,
        previous_quantity: int | None,
    ) -> bool:
        """Return True to close the window before ``current`` is admitted.

        Args:
            current: Address about to be admitted
            quantity: Window quantity if ``current`` were admitted
            previous: Last admitted address (None at window start)
            previous_quantity: Window quantity before ``current``
        """
        ...


@dataclass(frozen=True)
class MaxQuantitySplitPolicy:
    """Split once the window would span more than the per-request maximum.

    Gaps between addresses are ignored: two addresses far apart are still
    read in one request as long as the whole span fits.
    """

    max_addresses_per_request: int = MAX_REGISTERS_PER_MODBUS_REQUEST

    def __post_init__(self) -> None:
        if self.max_addresses_per_request < 1:
            raise ConfigurationError(
                "max_addresses_per_request must be >= 1, "
                f"got {self.max_addresses_per_request}"
            )

    @classmethod
    def for_kind(cls, kind: RequestKind) -> MaxQuantitySplitPolicy:
        """Policy with the protocol limit of ``kind``."""
        return cls(kind.default_max_quantity)

    def should_split(
        self,
        current: Address,
        quantity: int,
        previous: Address | None,
        previous_quantity: int | None,
    ) -> bool:
        return quantity > self.max_addresses_per_request


@dataclass(frozen=True)
class GapAwareSplitPolicy(MaxQuantitySplitPolicy):
    """Like :class:`MaxQuantitySplitPolicy`, but also splits on wide holes.

    A hole is the number of unrequested units between the end of the
    current window and the next address. Holes up to ``max_gap`` units are
    read along with the window; wider holes split it.
    """

    max_gap: int = 0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.max_gap < 0:
            raise ConfigurationError(f"max_gap must be >= 0, got {self.max_gap}")

    def should_split(
        self,
        current: Address,
        quantity: int,
        previous: Address | None,
        previous_quantity: int | None,
    ) -> bool:
        if super().should_split(current, quantity, previous, previous_quantity):
            return True
        if previous is None or previous_quantity is None:
            return False
        return hole_size(current, quantity, previous_quantity) > self.max_gap


def hole_size(current: Address, quantity: int, previous_quantity: int) -> int:
    """Unrequested units between the window end and ``current``.

    The window grows by ``quantity - previous_quantity`` when ``current`` is
    admitted; whatever part of that growth ``current`` does not occupy
    itself is a hole. Overlapping or contained addresses give 0.
    """
    return max(0, quantity - previous_quantity - current.size)


__all__ = [
    "GapAwareSplitPolicy",
    "MaxQuantitySplitPolicy",
    "SplitPolicy",
    "hole_size",
]
