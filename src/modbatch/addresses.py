"""Address definitions for values requested from a Modbus device.

An address describes where one application-level value lives in the
device's register or coil space. The splitter only needs four things from
an address:

- ``address``: first register/coil index occupied by the value
- ``size``: number of consecutive registers/coils occupied
- ``type_rank``: tie-breaker between values starting at the same index
- ``first_byte`` (byte addresses only): high byte sorts before low byte

Register widths of numeric types are taken from pymodbus' ``DATATYPE``
table, so a batch planned here always covers exactly the words pymodbus
needs to decode the value later.

Example:
    temperature = RegisterAddress(100, AddressType.INT16, name="temperature")
    energy_total = RegisterAddress(101, AddressType.UINT32, name="energy_total")
    status_high = ByteRegisterAddress(110, first_byte=True, name="status_high")
    pump_alarm = CoilAddress(12, name="pump_alarm")
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, runtime_checkable

from pymodbus.client.mixin import ModbusClientMixin

from .constants import REGISTER_BIT_COUNT
from .exceptions import ValidationError

_DATATYPE = ModbusClientMixin.DATATYPE


@runtime_checkable
class Address(Protocol):
    """Anything the splitter can batch."""

    @property
    def address(self) -> int: ...

    @property
    def size(self) -> int: ...

    @property
    def type_rank(self) -> int: ...


@runtime_checkable
class ByteAddress(Address, Protocol):
    """Address pointing at one byte of a 16-bit register."""

    @property
    def first_byte(self) -> bool: ...


class AddressType(StrEnum):
    """Value kinds that can be read from a device.

    Declaration order is the sort rank used when several values start at
    the same address and have the same size.
    """

    BIT = "bit"
    BYTE = "byte"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    FLOAT32 = "float32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT64 = "float64"
    STRING = "string"
    COIL = "coil"

    @property
    def rank(self) -> int:
        """Sort rank of this type."""
        return _TYPE_RANKS[self]

    @property
    def register_count(self) -> int:
        """Registers occupied by one value of this type (0 = variable length)."""
        return _REGISTER_COUNTS[self]


_TYPE_RANKS: dict[AddressType, int] = {t: i for i, t in enumerate(AddressType)}

_REGISTER_COUNTS: dict[AddressType, int] = {
    AddressType.BIT: 1,
    AddressType.BYTE: 1,
    AddressType.INT16: _DATATYPE.INT16.value[1],
    AddressType.UINT16: _DATATYPE.UINT16.value[1],
    AddressType.INT32: _DATATYPE.INT32.value[1],
    AddressType.UINT32: _DATATYPE.UINT32.value[1],
    AddressType.FLOAT32: _DATATYPE.FLOAT32.value[1],
    AddressType.INT64: _DATATYPE.INT64.value[1],
    AddressType.UINT64: _DATATYPE.UINT64.value[1],
    AddressType.FLOAT64: _DATATYPE.FLOAT64.value[1],
    AddressType.STRING: _DATATYPE.STRING.value[1],
    AddressType.COIL: 1,
}

# Types handled by RegisterAddress. BIT, BYTE and COIL have their own classes.
NUMERIC_TYPES = frozenset(
    {
        AddressType.INT16,
        AddressType.UINT16,
        AddressType.INT32,
        AddressType.UINT32,
        AddressType.FLOAT32,
        AddressType.INT64,
        AddressType.UINT64,
        AddressType.FLOAT64,
    }
)


def validate_address(address: Address) -> None:
    """Check that an address can take part in a split.

    Works on any object implementing the :class:`Address` protocol, not only
    on the dataclasses of this module.

    Raises:
        ValidationError: If the address is negative or its size is not positive
    """
    if not isinstance(address.address, int) or address.address < 0:
        raise ValidationError(f"Address must be a non-negative integer, got {address.address!r}")
    if not isinstance(address.size, int) or address.size < 1:
        raise ValidationError(
            f"Address {address.address} has invalid size {address.size!r} (must be >= 1)"
        )


def address_end(address: Address) -> int:
    """First index after the last unit occupied by ``address``."""
    return address.address + address.size


@dataclass(frozen=True)
class RegisterAddress:
    """A numeric or string value stored in one or more 16-bit registers.

    Attributes:
        address: First register of the value
        type: Value type (numeric types or STRING)
        name: Optional name used by builders and reports
        length: String length in bytes (STRING only)
    """

    address: int
    type: AddressType = AddressType.UINT16
    name: str | None = None
    length: int | None = None

    def __post_init__(self) -> None:
        if self.type == AddressType.STRING:
            if self.length is None or self.length < 1:
                raise ValidationError(
                    f"String at address {self.address} needs a length >= 1, got {self.length!r}"
                )
        elif self.type not in NUMERIC_TYPES:
            raise ValidationError(
                f"RegisterAddress does not support type '{self.type}', "
                "use BitRegisterAddress, ByteRegisterAddress or CoilAddress"
            )
        validate_address(self)

    @property
    def size(self) -> int:
        """Registers occupied by the value."""
        if self.type == AddressType.STRING:
            # two characters per register, odd lengths use half a register
            return (self.length + 1) // 2  # type: ignore[operator]
        return self.type.register_count

    @property
    def type_rank(self) -> int:
        return self.type.rank


@dataclass(frozen=True)
class ByteRegisterAddress:
    """One byte of a 16-bit register.

    ``first_byte=True`` is the high (first transmitted) byte.
    """

    address: int
    first_byte: bool = True
    name: str | None = None

    def __post_init__(self) -> None:
        validate_address(self)

    @property
    def type(self) -> AddressType:
        return AddressType.BYTE

    @property
    def size(self) -> int:
        return 1

    @property
    def type_rank(self) -> int:
        return AddressType.BYTE.rank


@dataclass(frozen=True)
class BitRegisterAddress:
    """Single bit (0 = least significant) of a 16-bit register."""

    address: int
    bit: int = 0
    name: str | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.bit < REGISTER_BIT_COUNT:
            raise ValidationError(
                f"Bit index {self.bit} at address {self.address} is out of range "
                f"0..{REGISTER_BIT_COUNT - 1}"
            )
        validate_address(self)

    @property
    def type(self) -> AddressType:
        return AddressType.BIT

    @property
    def size(self) -> int:
        return 1

    @property
    def type_rank(self) -> int:
        return AddressType.BIT.rank


@dataclass(frozen=True)
class CoilAddress:
    """A coil or discrete input."""

    address: int
    name: str | None = None

    def __post_init__(self) -> None:
        validate_address(self)

    @property
    def type(self) -> AddressType:
        return AddressType.COIL

    @property
    def size(self) -> int:
        return 1

    @property
    def type_rank(self) -> int:
        return AddressType.COIL.rank


__all__ = [
    "Address",
    "AddressType",
    "BitRegisterAddress",
    "ByteAddress",
    "ByteRegisterAddress",
    "CoilAddress",
    "NUMERIC_TYPES",
    "RegisterAddress",
    "address_end",
    "validate_address",
]
