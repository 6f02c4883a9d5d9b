"""Value resolver variants.

The resolver set is closed: a member chain, a custom expression, or a
custom value resolver instance. Composition happens by chaining, never by
subclassing one resolver from another.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from map_plan.core.accessor import MemberAccessor
from map_plan.core.context import ResolutionContext
from map_plan.mapping.protocol import ValueResolver


@dataclass(frozen=True)
class MemberChainResolver:
    """Reads a value along a chain of member accessors.

    A ``None`` anywhere along the chain short-circuits to ``None``.
    """

    accessors: tuple[MemberAccessor, ...]

    def resolve(self, context: ResolutionContext | None, source: Any) -> Any:
        value = source
        for accessor in self.accessors:
            if value is None:
                return None
            value = accessor.read(value)
        return value

    @property
    def member_names(self) -> list[str]:
        return [accessor.name for accessor in self.accessors]


@dataclass(frozen=True)
class ExpressionResolver:
    """Applies a custom expression to the source."""

    expression: Callable[[Any], Any]

    def resolve(self, context: ResolutionContext | None, source: Any) -> Any:
        return self.expression(source)


@dataclass(frozen=True)
class CustomValueResolver:
    """Wraps user resolver logic receiving both source and context."""

    func: Callable[[Any, ResolutionContext | None], Any]

    def resolve(self, context: ResolutionContext | None, source: Any) -> Any:
        return self.func(source, context)


def resolve_chain(
    resolvers: Iterable[ValueResolver],
    context: ResolutionContext | None,
    source: Any,
) -> Any:
    """Run resolvers in order, feeding each result into the next."""
    value = source
    for resolver in resolvers:
        value = resolver.resolve(context, value)
    return value
