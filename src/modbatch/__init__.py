"""Batch Modbus address reads into the fewest protocol requests.

Usage:
    Fluent builder:
        from modbatch import ReadRegistersBuilder

        requests = (
            ReadRegistersBuilder.new_read_input_registers("tcp://192.168.1.100:502", unit_id=1)
            .uint16(0, "status")
            .int32(7, "pv_power")
            .build()
        )
        for request in requests:
            print(request.start_address, request.quantity)

    Splitting a path-keyed mapping:
        from modbatch import AddressSplitter, RegisterAddress

        splitter = AddressSplitter()
        requests = splitter.split(
            {"tcp://192.168.1.100:502||unitId=1": [RegisterAddress(0), RegisterAddress(1)]}
        )
"""

from __future__ import annotations

from .addresses import (
    Address,
    AddressType,
    BitRegisterAddress,
    ByteAddress,
    ByteRegisterAddress,
    CoilAddress,
    RegisterAddress,
)
from .composer import (
    AddressSplitter,
    EndpointKey,
    GapAwareSplitPolicy,
    MaxQuantitySplitPolicy,
    ReadCoilsBuilder,
    ReadRegistersBuilder,
    ReadRequest,
    ReadRequestFactory,
    RequestFactory,
    RequestKind,
    SplitPolicy,
    endpoint_path,
    parse_endpoint_path,
    split_addresses,
)
from .config import SplitterConfig
from .constants import (
    MAX_COILS_PER_MODBUS_REQUEST,
    MAX_REGISTERS_PER_MODBUS_REQUEST,
    UNIT_ID_SEPARATOR,
)
from .exceptions import (
    ConfigurationError,
    MalformedEndpointPathError,
    ModbatchError,
    ValidationError,
)

__version__ = "0.1.0"
__all__ = [
    # Addresses
    "Address",
    "ByteAddress",
    "AddressType",
    "RegisterAddress",
    "ByteRegisterAddress",
    "BitRegisterAddress",
    "CoilAddress",
    # Splitting
    "AddressSplitter",
    "split_addresses",
    "SplitPolicy",
    "MaxQuantitySplitPolicy",
    "GapAwareSplitPolicy",
    "SplitterConfig",
    # Endpoints
    "EndpointKey",
    "endpoint_path",
    "parse_endpoint_path",
    # Requests
    "RequestKind",
    "ReadRequest",
    "RequestFactory",
    "ReadRequestFactory",
    # Builders
    "ReadRegistersBuilder",
    "ReadCoilsBuilder",
    # Constants
    "UNIT_ID_SEPARATOR",
    "MAX_REGISTERS_PER_MODBUS_REQUEST",
    "MAX_COILS_PER_MODBUS_REQUEST",
    # Exceptions
    "ModbatchError",
    "ConfigurationError",
    "MalformedEndpointPathError",
    "ValidationError",
]
