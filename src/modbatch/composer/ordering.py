"""Deterministic ordering of addresses before chunking."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from modbatch.addresses import Address

A = TypeVar("A", bound=Address)


def address_sort_key(address: Address) -> tuple[int, int, int, int]:
    """Sort key ``(address, size, type_rank, byte_order)``.

    ``byte_order`` is 0 for the first (high) byte of a register and 1 for
    the second byte. Addresses without a ``first_byte`` attribute always
    use 0, so between two of them the ``type_rank`` decides.
    """
    first_byte = getattr(address, "first_byte", None)
    byte_order = 1 if first_byte is False else 0
    return (address.address, address.size, address.type_rank, byte_order)


def sort_addresses(addresses: Iterable[A]) -> list[A]:
    """Return ``addresses`` sorted for chunking.

    The sort is stable: addresses with equal keys keep their input order.
    """
    return sorted(addresses, key=address_sort_key)


__all__ = ["address_sort_key", "sort_addresses"]
