"""Plan entry for one destination member."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from typing import Any

from map_plan.core.accessor import MemberAccessor
from map_plan.core.context import ResolutionContext
from map_plan.core.exceptions import SealedTypeMapError
from map_plan.mapping.protocol import ValueResolver
from map_plan.mapping.resolvers import CustomValueResolver, resolve_chain

# Maps without an explicit order sort after every ordered map.
DEFAULT_MAPPING_ORDER = sys.maxsize


class PropertyMap:
    """How one destination member gets its value.

    An empty resolver chain means "auto": the execution engine resolves the
    value by convention. Mutable until sealed, immutable afterwards.

    Args:
        destination_property: Accessor for the destination member.
    """

    def __init__(self, destination_property: MemberAccessor) -> None:
        self._destination_property = destination_property
        self._resolvers: list[ValueResolver] | tuple[ValueResolver, ...] = []
        self._custom_expression: Callable[[Any], Any] | None = None
        self._source_member: MemberAccessor | None = None
        self._mapping_order: int | None = None
        self._ignored = False
        self._use_destination_value = False
        self._condition: Callable[[ResolutionContext | None], bool] | None = None
        self._null_substitute: Any = None
        self._sealed = False

    @classmethod
    def inherit_from(cls, other: PropertyMap) -> PropertyMap:
        """Open copy of another map, used when a base map is inherited."""
        copy = cls(other.destination_property)
        copy._resolvers = list(other._resolvers)
        copy._custom_expression = other._custom_expression
        copy._source_member = other._source_member
        copy._mapping_order = other._mapping_order
        copy._ignored = other._ignored
        copy._use_destination_value = other._use_destination_value
        copy._condition = other._condition
        copy._null_substitute = other._null_substitute
        return copy

    # --- Read side ---

    @property
    def destination_property(self) -> MemberAccessor:
        return self._destination_property

    @property
    def name(self) -> str:
        return self._destination_property.name

    @property
    def custom_expression(self) -> Callable[[Any], Any] | None:
        return self._custom_expression

    @property
    def source_member(self) -> MemberAccessor | None:
        return self._source_member

    @property
    def mapping_order(self) -> int | None:
        return self._mapping_order

    @property
    def ignored(self) -> bool:
        return self._ignored

    @property
    def use_destination_value(self) -> bool:
        return self._use_destination_value

    @property
    def condition(self) -> Callable[[ResolutionContext | None], bool] | None:
        return self._condition

    @property
    def null_substitute(self) -> Any:
        return self._null_substitute

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def has_custom_value_resolver(self) -> bool:
        return any(isinstance(r, CustomValueResolver) for r in self._resolvers)

    def get_source_value_resolvers(self) -> tuple[ValueResolver, ...]:
        return tuple(self._resolvers)

    def get_mapping_order(self) -> int:
        return DEFAULT_MAPPING_ORDER if self._mapping_order is None else self._mapping_order

    def is_mapped(self) -> bool:
        """Whether this member is covered: resolved, custom-mapped, or ignored."""
        return bool(self._resolvers) or self._custom_expression is not None or self._ignored

    def should_assign_value(self, context: ResolutionContext | None) -> bool:
        return self._condition is None or self._condition(context)

    def resolve_value(self, context: ResolutionContext | None, source: Any) -> Any:
        """Run the resolver chain, substituting null_substitute for None."""
        value = resolve_chain(self._resolvers, context, source)
        return self._null_substitute if value is None else value

    # --- Configuration ---

    def _ensure_open(self, action: str) -> None:
        if self._sealed:
            raise SealedTypeMapError(self, action)

    def chain_resolver(self, resolver: ValueResolver) -> None:
        self._ensure_open("chain resolver")
        self._resolvers.append(resolver)  # type: ignore[union-attr]

    def chain_resolvers(self, resolvers: Iterable[ValueResolver]) -> None:
        for resolver in resolvers:
            self.chain_resolver(resolver)

    def assign_custom_value_resolver(self, resolver: ValueResolver) -> None:
        """Replace the whole chain with a single resolver."""
        self.replace_resolvers([resolver])

    def replace_resolvers(self, resolvers: Iterable[ValueResolver]) -> None:
        self._ensure_open("replace resolvers")
        self._ignored = False
        self._resolvers = list(resolvers)

    def assign_custom_expression(self, expression: Callable[[Any], Any] | None) -> None:
        self._ensure_open("assign custom expression")
        self._custom_expression = expression

    def map_from(self, source_member: MemberAccessor) -> None:
        """Record the source member this map reads from."""
        self._ensure_open("set source member")
        self._source_member = source_member

    def set_mapping_order(self, order: int) -> None:
        self._ensure_open("set mapping order")
        self._mapping_order = order

    def ignore(self) -> None:
        self._ensure_open("ignore member")
        self._ignored = True

    def use_destination(self) -> None:
        self._ensure_open("use destination value")
        self._use_destination_value = True

    def set_condition(self, condition: Callable[[ResolutionContext | None], bool]) -> None:
        self._ensure_open("set condition")
        self._condition = condition

    def set_null_substitute(self, value: Any) -> None:
        self._ensure_open("set null substitute")
        self._null_substitute = value

    def seal(self) -> None:
        """Freeze the resolver chain. Idempotent."""
        if self._sealed:
            return
        self._resolvers = tuple(self._resolvers)
        self._sealed = True

    def __repr__(self) -> str:
        return f"PropertyMap({self.name})"
