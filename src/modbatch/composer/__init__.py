"""Request composition: grouping, ordering and splitting of addresses.

Usage:
    from modbatch.composer import ReadRegistersBuilder

    requests = (
        ReadRegistersBuilder.new_read_holding_registers("tcp://192.168.1.100:502")
        .uint16(0, "status")
        .int32(1, "power")
        .build()
    )

    # Lower level: split a path-keyed mapping directly
    from modbatch.composer import AddressSplitter

    requests = AddressSplitter().split({"tcp://192.168.1.100:502||unitId=1": addresses})
"""

from __future__ import annotations

from .builder import ReadCoilsBuilder, ReadRegistersBuilder, builder_for_kind
from .endpoints import EndpointKey, endpoint_path, group_by_endpoint, parse_endpoint_path
from .ordering import address_sort_key, sort_addresses
from .policy import GapAwareSplitPolicy, MaxQuantitySplitPolicy, SplitPolicy, hole_size
from .requests import ReadRequest, ReadRequestFactory, RequestFactory, RequestKind
from .splitter import AddressSplitter, split_addresses

__all__ = [
    # Builders
    "ReadRegistersBuilder",
    "ReadCoilsBuilder",
    "builder_for_kind",
    # Splitting
    "AddressSplitter",
    "split_addresses",
    # Endpoints
    "EndpointKey",
    "endpoint_path",
    "group_by_endpoint",
    "parse_endpoint_path",
    # Ordering
    "address_sort_key",
    "sort_addresses",
    # Policies
    "SplitPolicy",
    "MaxQuantitySplitPolicy",
    "GapAwareSplitPolicy",
    "hole_size",
    # Requests
    "RequestKind",
    "ReadRequest",
    "RequestFactory",
    "ReadRequestFactory",
]
