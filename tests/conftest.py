"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from map_plan.core.accessor import AttributeAccessor
from map_plan.mapping.resolvers import MemberChainResolver
from map_plan.mapping.type_map import TypeMap


@dataclass
class Customer:
    id: int
    name: str
    age: int


@dataclass
class CustomerDto:
    name: str = ""
    age: int = 0
    extra: str = ""


@pytest.fixture
def customer_map() -> TypeMap:
    """Open TypeMap for Customer -> CustomerDto."""
    return TypeMap(Customer, CustomerDto)


@pytest.fixture
def member():
    """Helper to build a (destination accessor, resolvers) pair.

    Usage:
        dest, resolvers = member(CustomerDto, "name", Customer, "name")
    """

    def _member(
        dest_type: type,
        dest_name: str,
        source_type: type | None = None,
        source_name: str | None = None,
    ) -> tuple[AttributeAccessor, list[MemberChainResolver]]:
        accessor = AttributeAccessor(dest_type, dest_name)
        if source_type is None:
            return accessor, []
        source = AttributeAccessor(source_type, source_name or dest_name)
        return accessor, [MemberChainResolver((source,))]

    return _member
