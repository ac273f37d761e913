"""Fluent builders collecting addresses and splitting them into requests.

Builders remember the current endpoint and collect addresses under its
path, so reads for several devices can be described in one chain.

Example:
    requests = (
        ReadRegistersBuilder.new_read_holding_registers("tcp://192.168.1.100:502", unit_id=1)
        .bit(256, 15, "pump2_feedback_alarm")
        .int16(256, "temperature_1")
        .uint32(270, "energy_total")
        .byte(280, "status_high", first_byte=True)
        .string(300, 10, "serial_number")
        .endpoint("tcp://192.168.1.101:502", unit_id=2)
        .float32(0, "voltage")
        .build()
    )
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Self

from modbatch.addresses import (
    NUMERIC_TYPES,
    Address,
    AddressType,
    BitRegisterAddress,
    ByteRegisterAddress,
    CoilAddress,
    RegisterAddress,
)
from modbatch.config import SplitterConfig
from modbatch.exceptions import ConfigurationError, ValidationError

from .endpoints import endpoint_path
from .requests import ReadRequest, ReadRequestFactory, RequestKind
from .splitter import AddressSplitter

_LOGGER = logging.getLogger(__name__)


def row_int(row: Mapping[str, Any], key: str, default: int | None = None) -> int:
    """Read an integer field of a declarative row.

    Raises:
        ConfigurationError: If the field is missing or not an integer
    """
    value = row.get(key, default)
    if isinstance(value, bool):
        raise ConfigurationError(f"Field '{key}' must be an integer, got {value!r}")
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as err:
        raise ConfigurationError(f"Field '{key}' must be an integer, got {value!r}") from err


def _row_bool(row: Mapping[str, Any], key: str, default: bool) -> bool:
    value = row.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"Field '{key}' must be true or false, got {value!r}")
    return value


class _BaseReadBuilder(ABC):
    """Shared endpoint and address bookkeeping."""

    _allowed_kinds: tuple[RequestKind, ...] = ()

    def __init__(
        self,
        kind: RequestKind,
        uri: str = "",
        unit_id: int = 1,
        config: SplitterConfig | None = None,
    ) -> None:
        if kind not in self._allowed_kinds:
            raise ConfigurationError(f"{type(self).__name__} cannot build {kind.name} requests")
        self._kind = kind
        self._config = config if config is not None else SplitterConfig()
        self._config.validate()
        self._addresses: dict[str, list[Address]] = {}
        self._names: set[str] = set()
        self._path = ""
        if uri:
            self.endpoint(uri, unit_id)

    @property
    def kind(self) -> RequestKind:
        """Function code of the requests this builder produces."""
        return self._kind

    def endpoint(self, uri: str, unit_id: int = 1) -> Self:
        """Use ``uri``/``unit_id`` for the addresses added after this call."""
        self._path = endpoint_path(uri, unit_id)
        return self

    def add(self, address: Address) -> Self:
        """Add an address to the current endpoint.

        Raises:
            ConfigurationError: If no endpoint was set
            ValidationError: If the address name is already used
        """
        if not self._path:
            raise ConfigurationError("Set an endpoint with endpoint(uri, unit_id) before adding")
        name = getattr(address, "name", None)
        if name is not None:
            if name in self._names:
                raise ValidationError(f"Address name '{name}' is already used")
            self._names.add(name)
        self._addresses.setdefault(self._path, []).append(address)
        _LOGGER.debug("Added %s at %d to %s", type(address).__name__, address.address, self._path)
        return self

    def is_empty(self) -> bool:
        """True if no address was added yet."""
        return not any(self._addresses.values())

    def addresses(self) -> dict[str, list[Address]]:
        """Collected addresses keyed by endpoint path."""
        return {path: list(addrs) for path, addrs in self._addresses.items()}

    def build(self) -> list[ReadRequest]:
        """Split the collected addresses into read requests."""
        splitter: AddressSplitter[ReadRequest] = AddressSplitter(
            policy=self._config.policy_for(self._kind),
            request_factory=ReadRequestFactory(self._kind),
        )
        return splitter.split(self._addresses)

    def from_dicts(self, rows: Iterable[Mapping[str, Any]]) -> Self:
        """Add addresses from declarative rows.

        Each row needs ``address``; ``uri`` and ``unit_id`` switch the
        endpoint for that row and the following ones.

        Raises:
            ConfigurationError: If a row has an unknown type, no address or
                a field of the wrong type
        """
        for row in rows:
            if "uri" in row:
                self.endpoint(row["uri"], row_int(row, "unit_id", 1))
            if "address" not in row:
                raise ConfigurationError(f"Address row {dict(row)!r} has no 'address'")
            self.add(self._address_from_row(row))
        return self

    @abstractmethod
    def _address_from_row(self, row: Mapping[str, Any]) -> Address:
        """Create the address described by ``row``."""


class ReadRegistersBuilder(_BaseReadBuilder):
    """Builds holding (FC3) or input (FC4) register reads."""

    _allowed_kinds = (
        RequestKind.READ_HOLDING_REGISTERS,
        RequestKind.READ_INPUT_REGISTERS,
    )

    @classmethod
    def new_read_holding_registers(
        cls,
        uri: str = "",
        unit_id: int = 1,
        config: SplitterConfig | None = None,
    ) -> ReadRegistersBuilder:
        """Builder for FC3 reads."""
        return cls(RequestKind.READ_HOLDING_REGISTERS, uri, unit_id, config)

    @classmethod
    def new_read_input_registers(
        cls,
        uri: str = "",
        unit_id: int = 1,
        config: SplitterConfig | None = None,
    ) -> ReadRegistersBuilder:
        """Builder for FC4 reads."""
        return cls(RequestKind.READ_INPUT_REGISTERS, uri, unit_id, config)

    def bit(self, address: int, bit: int, name: str | None = None) -> ReadRegistersBuilder:
        return self.add(BitRegisterAddress(address, bit, name))

    def byte(
        self,
        address: int,
        name: str | None = None,
        first_byte: bool = True,
    ) -> ReadRegistersBuilder:
        return self.add(ByteRegisterAddress(address, first_byte, name))

    def int16(self, address: int, name: str | None = None) -> ReadRegistersBuilder:
        return self.add(RegisterAddress(address, AddressType.INT16, name))

    def uint16(self, address: int, name: str | None = None) -> ReadRegistersBuilder:
        return self.add(RegisterAddress(address, AddressType.UINT16, name))

    def int32(self, address: int, name: str | None = None) -> ReadRegistersBuilder:
        return self.add(RegisterAddress(address, AddressType.INT32, name))

    def uint32(self, address: int, name: str | None = None) -> ReadRegistersBuilder:
        return self.add(RegisterAddress(address, AddressType.UINT32, name))

    def float32(self, address: int, name: str | None = None) -> ReadRegistersBuilder:
        return self.add(RegisterAddress(address, AddressType.FLOAT32, name))

    def int64(self, address: int, name: str | None = None) -> ReadRegistersBuilder:
        return self.add(RegisterAddress(address, AddressType.INT64, name))

    def uint64(self, address: int, name: str | None = None) -> ReadRegistersBuilder:
        return self.add(RegisterAddress(address, AddressType.UINT64, name))

    def float64(self, address: int, name: str | None = None) -> ReadRegistersBuilder:
        return self.add(RegisterAddress(address, AddressType.FLOAT64, name))

    def string(self, address: int, length: int, name: str | None = None) -> ReadRegistersBuilder:
        """Add a string of ``length`` bytes starting at ``address``."""
        return self.add(RegisterAddress(address, AddressType.STRING, name, length=length))

    def _address_from_row(self, row: Mapping[str, Any]) -> Address:
        try:
            addr_type = AddressType(row.get("type", AddressType.UINT16))
        except ValueError as err:
            raise ConfigurationError(f"Unknown address type '{row.get('type')}'") from err

        address = row_int(row, "address")
        name = row.get("name")
        if addr_type == AddressType.BIT:
            return BitRegisterAddress(address, row_int(row, "bit", 0), name)
        if addr_type == AddressType.BYTE:
            return ByteRegisterAddress(address, _row_bool(row, "first_byte", True), name)
        if addr_type == AddressType.STRING:
            length = row_int(row, "length") if row.get("length") is not None else None
            return RegisterAddress(address, addr_type, name, length=length)
        if addr_type in NUMERIC_TYPES:
            return RegisterAddress(address, addr_type, name)
        raise ConfigurationError(f"Address type '{addr_type}' is not a register type")


class ReadCoilsBuilder(_BaseReadBuilder):
    """Builds coil (FC1) or discrete input (FC2) reads."""

    _allowed_kinds = (
        RequestKind.READ_COILS,
        RequestKind.READ_DISCRETE_INPUTS,
    )

    @classmethod
    def new_read_coils(
        cls,
        uri: str = "",
        unit_id: int = 1,
        config: SplitterConfig | None = None,
    ) -> ReadCoilsBuilder:
        """Builder for FC1 reads."""
        return cls(RequestKind.READ_COILS, uri, unit_id, config)

    @classmethod
    def new_read_discrete_inputs(
        cls,
        uri: str = "",
        unit_id: int = 1,
        config: SplitterConfig | None = None,
    ) -> ReadCoilsBuilder:
        """Builder for FC2 reads."""
        return cls(RequestKind.READ_DISCRETE_INPUTS, uri, unit_id, config)

    def coil(self, address: int, name: str | None = None) -> ReadCoilsBuilder:
        return self.add(CoilAddress(address, name))

    def _address_from_row(self, row: Mapping[str, Any]) -> Address:
        addr_type = row.get("type", AddressType.COIL)
        if addr_type != AddressType.COIL:
            raise ConfigurationError(f"Address type '{addr_type}' is not a coil type")
        return CoilAddress(row_int(row, "address"), row.get("name"))


def builder_for_kind(
    kind: RequestKind,
    config: SplitterConfig | None = None,
) -> ReadRegistersBuilder | ReadCoilsBuilder:
    """Return an empty builder suited to ``kind``."""
    if kind.is_bit_access:
        return ReadCoilsBuilder(kind, config=config)
    return ReadRegistersBuilder(kind, config=config)


__all__ = [
    "ReadCoilsBuilder",
    "ReadRegistersBuilder",
    "builder_for_kind",
    "row_int",
]
