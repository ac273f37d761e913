"""Address splitter: turns requested addresses into batched read requests.

The splitter groups addresses per endpoint, sorts them and walks them once,
accumulating a window of consecutive addresses. Before each address is
admitted the split policy is asked whether the window has to be closed
first; closed windows are handed to the request factory.

Example:
    splitter = AddressSplitter(
        policy=MaxQuantitySplitPolicy(124),
        request_factory=ReadRequestFactory(RequestKind.READ_HOLDING_REGISTERS),
    )
    requests = splitter.split(
        {
            "tcp://192.168.1.100:502||unitId=1": [
                RegisterAddress(0, AddressType.UINT16),
                RegisterAddress(1, AddressType.INT32),
            ],
        }
    )
    # -> [ReadRequest(start_address=0, quantity=3, ...)]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Generic, TypeVar

from modbatch.addresses import Address, address_end, validate_address

from .endpoints import EndpointKey, group_by_endpoint
from .ordering import sort_addresses
from .policy import MaxQuantitySplitPolicy, SplitPolicy
from .requests import ReadRequest, ReadRequestFactory, RequestFactory, RequestKind

_LOGGER = logging.getLogger(__name__)

R = TypeVar("R")


class AddressSplitter(Generic[R]):
    """Split addresses into the fewest read requests the policy allows.

    The splitter keeps no state between calls; one instance can be shared
    between threads as long as its policy is immutable.
    """

    def __init__(
        self,
        policy: SplitPolicy | None = None,
        request_factory: RequestFactory[R] | None = None,
    ) -> None:
        """Initialize the splitter.

        Args:
            policy: Split policy (default: 124 register limit, gaps ignored)
            request_factory: Builds one request per closed window
                (default: holding register ReadRequest)
        """
        if policy is None:
            policy = MaxQuantitySplitPolicy()
        if request_factory is None:
            request_factory = ReadRequestFactory()  # type: ignore[assignment]
        self._policy: SplitPolicy = policy
        self._request_factory: RequestFactory[R] = request_factory

    @classmethod
    def for_kind(
        cls,
        kind: RequestKind,
        policy: SplitPolicy | None = None,
    ) -> AddressSplitter[ReadRequest]:
        """Splitter producing ReadRequest of ``kind`` with its protocol limit."""
        return AddressSplitter(
            policy=policy if policy is not None else MaxQuantitySplitPolicy.for_kind(kind),
            request_factory=ReadRequestFactory(kind),
        )

    @property
    def policy(self) -> SplitPolicy:
        """Split policy in use."""
        return self._policy

    @property
    def max_addresses_per_request(self) -> int:
        """Per-request maximum of the configured policy."""
        return self._policy.max_addresses_per_request

    def split(self, addresses: Mapping[str, Iterable[Address]]) -> list[R]:
        """Split addresses keyed by endpoint path into requests.

        Args:
            addresses: Mapping of ``"<uri>||unitId=<n>"`` to addresses

        Returns:
            Requests in endpoint order, then window order. Endpoints without
            addresses produce no request.

        Raises:
            ConfigurationError: If an endpoint path is malformed
            ValidationError: If an address has a negative position or an
                empty size
        """
        result: list[R] = []
        for endpoint, addrs in group_by_endpoint(addresses):
            result.extend(self.split_endpoint(endpoint, addrs))
        return result

    def split_endpoint(self, endpoint: EndpointKey, addresses: Iterable[Address]) -> list[R]:
        """Split the addresses of a single endpoint."""
        addrs = list(addresses)
        for addr in addrs:
            validate_address(addr)

        requests: list[R] = []
        start_address: int | None = None
        span_end: int | None = None
        chunk: list[Address] = []
        previous_address: Address | None = None
        previous_quantity: int | None = None

        for current in sort_addresses(addrs):
            if start_address is None or span_end is None:
                start_address = current.address
                span_end = address_end(current)

            # a narrower address inside a wider one must not shrink the window
            candidate_end = max(span_end, address_end(current))
            quantity = candidate_end - start_address

            if chunk and self._policy.should_split(
                current, quantity, previous_address, previous_quantity
            ):
                requests.append(
                    self._create_request(endpoint, chunk, start_address, span_end - start_address)
                )
                chunk = []
                start_address = current.address
                candidate_end = address_end(current)
                quantity = current.size

            span_end = candidate_end
            chunk.append(current)
            previous_address = current
            previous_quantity = quantity

        if chunk and start_address is not None and span_end is not None:
            requests.append(
                self._create_request(endpoint, chunk, start_address, span_end - start_address)
            )

        _LOGGER.debug(
            "Split %d addresses for %s (unit %d) into %d requests",
            len(addrs),
            endpoint.uri,
            endpoint.unit_id,
            len(requests),
        )
        return requests

    def _create_request(
        self,
        endpoint: EndpointKey,
        chunk: Sequence[Address],
        start_address: int,
        quantity: int,
    ) -> R:
        _LOGGER.debug(
            "Closing window for %s (unit %d): start=%d quantity=%d members=%d",
            endpoint.uri,
            endpoint.unit_id,
            start_address,
            quantity,
            len(chunk),
        )
        return self._request_factory(
            endpoint.uri,
            endpoint.unit_id,
            start_address,
            quantity,
            list(chunk),
        )


def split_addresses(
    addresses: Mapping[str, Iterable[Address]],
    kind: RequestKind = RequestKind.READ_HOLDING_REGISTERS,
    policy: SplitPolicy | None = None,
) -> list[ReadRequest]:
    """Split addresses into ReadRequest of ``kind``.

    Shortcut for ``AddressSplitter.for_kind(kind, policy).split(addresses)``.
    """
    return AddressSplitter.for_kind(kind, policy).split(addresses)


__all__ = ["AddressSplitter", "split_addresses"]
