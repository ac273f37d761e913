"""Read request descriptors produced by the address splitter.

A request describes one physical Modbus read: which endpoint to talk to,
which function code to use and which span of registers or coils to
fetch. It carries the member addresses so the transport that executes it
can map the response back to the requested values.

The splitter never builds requests itself; it calls a
:class:`RequestFactory` once per closed window. :class:`ReadRequestFactory`
is the default factory and produces :class:`ReadRequest` instances.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Generic, Protocol, TypeVar

from modbatch.addresses import Address
from modbatch.constants import (
    MAX_COILS_PER_MODBUS_REQUEST,
    MAX_REGISTERS_PER_MODBUS_REQUEST,
)

R_co = TypeVar("R_co", covariant=True)
A = TypeVar("A", bound=Address)


class RequestKind(IntEnum):
    """Modbus read function codes."""

    READ_COILS = 1
    READ_DISCRETE_INPUTS = 2
    READ_HOLDING_REGISTERS = 3
    READ_INPUT_REGISTERS = 4

    @property
    def is_bit_access(self) -> bool:
        """True for coil and discrete input reads."""
        return self in (RequestKind.READ_COILS, RequestKind.READ_DISCRETE_INPUTS)

    @property
    def default_max_quantity(self) -> int:
        """Protocol limit of units per request for this kind."""
        if self.is_bit_access:
            return MAX_COILS_PER_MODBUS_REQUEST
        return MAX_REGISTERS_PER_MODBUS_REQUEST


@dataclass(frozen=True)
class ReadRequest(Generic[A]):
    """One physical read request.

    Attributes:
        kind: Function code of the read
        uri: Device URI (e.g. ``tcp://192.168.1.100:502``)
        unit_id: Modbus unit/slave id
        start_address: First register/coil to read
        quantity: Number of registers/coils to read
        addresses: Member addresses satisfied by this read, in sorted order
    """

    kind: RequestKind
    uri: str
    unit_id: int
    start_address: int
    quantity: int
    addresses: tuple[A, ...]

    @property
    def end_address(self) -> int:
        """First register/coil after the requested span."""
        return self.start_address + self.quantity

    def offset_of(self, address: Address) -> int:
        """Position of ``address`` inside the response data.

        Raises:
            ValueError: If the address lies outside this request's span
        """
        offset = address.address - self.start_address
        if offset < 0 or address.address + address.size > self.end_address:
            raise ValueError(
                f"Address {address.address} (size {address.size}) is outside "
                f"request span {self.start_address}..{self.end_address - 1}"
            )
        return offset


class RequestFactory(Protocol[R_co]):
    """Creates the request object for a closed window."""

    def __call__(
        self,
        uri: str,
        unit_id: int,
        start_address: int,
        quantity: int,
        addresses: Sequence[Address],
    ) -> R_co: ...


@dataclass(frozen=True)
class ReadRequestFactory:
    """Default factory building :class:`ReadRequest` for a fixed kind."""

    kind: RequestKind = RequestKind.READ_HOLDING_REGISTERS

    def __call__(
        self,
        uri: str,
        unit_id: int,
        start_address: int,
        quantity: int,
        addresses: Sequence[Address],
    ) -> ReadRequest:
        return ReadRequest(
            kind=self.kind,
            uri=uri,
            unit_id=unit_id,
            start_address=start_address,
            quantity=quantity,
            addresses=tuple(addresses),
        )


__all__ = [
    "ReadRequest",
    "ReadRequestFactory",
    "RequestFactory",
    "RequestKind",
]
