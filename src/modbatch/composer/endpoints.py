"""Endpoint paths and grouping of addresses per endpoint.

Addresses are handed to the splitter keyed by an endpoint path that
combines the device URI with the Modbus unit id::

    "tcp://192.168.1.100:502||unitId=1"

Addresses of different endpoints are never batched together.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import NamedTuple, TypeVar

from modbatch.constants import UNIT_ID_SEPARATOR
from modbatch.exceptions import ConfigurationError, MalformedEndpointPathError

_LOGGER = logging.getLogger(__name__)

A = TypeVar("A")


class EndpointKey(NamedTuple):
    """Device URI plus Modbus unit id."""

    uri: str
    unit_id: int

    @property
    def path(self) -> str:
        """Endpoint path for this key."""
        return endpoint_path(self.uri, self.unit_id)


def endpoint_path(uri: str, unit_id: int) -> str:
    """Build the endpoint path for ``uri`` and ``unit_id``.

    Raises:
        ConfigurationError: If the URI already contains the separator or the
            unit id is negative
    """
    if UNIT_ID_SEPARATOR in uri:
        raise ConfigurationError(f"URI '{uri}' must not contain '{UNIT_ID_SEPARATOR}'")
    if isinstance(unit_id, bool) or not isinstance(unit_id, int) or unit_id < 0:
        raise ConfigurationError(f"Unit id must be a non-negative integer, got {unit_id!r}")
    return f"{uri}{UNIT_ID_SEPARATOR}{unit_id}"


def parse_endpoint_path(path: str) -> EndpointKey:
    """Split an endpoint path into URI and unit id.

    Args:
        path: Path in the form ``"<uri>||unitId=<n>"``

    Returns:
        EndpointKey with the URI and the parsed unit id

    Raises:
        MalformedEndpointPathError: If the separator is missing
        ConfigurationError: If the unit id is not a non-negative integer
    """
    uri, separator, unit_id_str = path.partition(UNIT_ID_SEPARATOR)
    if not separator:
        raise MalformedEndpointPathError(path, UNIT_ID_SEPARATOR)

    unit_id_str = unit_id_str.strip()
    if not unit_id_str.isdecimal():
        raise ConfigurationError(
            f"Endpoint path '{path}' has invalid unit id '{unit_id_str}' "
            "(must be a non-negative integer)"
        )
    return EndpointKey(uri, int(unit_id_str))


def group_by_endpoint(
    addresses: Mapping[str, Iterable[A]],
) -> Iterator[tuple[EndpointKey, list[A]]]:
    """Yield ``(endpoint, addresses)`` pairs in input order.

    The path of each entry is parsed before its addresses are materialized,
    so a malformed path fails without grouping anything for that entry.
    """
    for path, addrs in addresses.items():
        key = parse_endpoint_path(path)
        group = list(addrs)
        _LOGGER.debug(
            "Grouped %d addresses for %s (unit %d)",
            len(group),
            key.uri,
            key.unit_id,
        )
        yield key, group


__all__ = [
    "EndpointKey",
    "endpoint_path",
    "group_by_endpoint",
    "parse_endpoint_path",
]
