"""Constructor plan data classes.

Frozen dataclasses describing how to invoke a destination constructor with
per-parameter value plans. Used when the destination has no parameterless
construction path.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from map_plan.core.context import ResolutionContext
from map_plan.core.exceptions import ConfigurationError
from map_plan.mapping.protocol import ValueResolver
from map_plan.mapping.resolvers import resolve_chain


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class ConstructorParameterMap:
    """Value plan for a single constructor parameter."""

    parameter_name: str
    resolvers: tuple[ValueResolver, ...] = ()
    default: Any = MISSING

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def can_resolve(self) -> bool:
        return bool(self.resolvers) or self.has_default

    def resolve_value(self, context: ResolutionContext | None, source: Any) -> Any:
        if not self.resolvers:
            if not self.has_default:
                raise ConfigurationError(f"Constructor parameter '{self.parameter_name}' has no value plan")
            return self.default
        return resolve_chain(self.resolvers, context, source)


@dataclass(frozen=True)
class ConstructorMap:
    """Plan for invoking one destination constructor."""

    ctor: Callable[..., Any]
    parameters: tuple[ConstructorParameterMap, ...] = field(default_factory=tuple)

    @classmethod
    def from_signature(
        cls,
        ctor: Callable[..., Any],
        resolvers: Mapping[str, Iterable[ValueResolver]],
    ) -> ConstructorMap:
        """Build parameter plans from ctor's signature.

        Parameters without resolvers keep their signature default, if any.
        """
        parameters = []
        for name, param in inspect.signature(ctor).parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            default = MISSING if param.default is inspect.Parameter.empty else param.default
            parameters.append(
                ConstructorParameterMap(
                    parameter_name=name,
                    resolvers=tuple(resolvers.get(name, ())),
                    default=default,
                )
            )
        return cls(ctor=ctor, parameters=tuple(parameters))

    def can_resolve(self) -> bool:
        return all(p.can_resolve() for p in self.parameters)

    def build(self, source: Any, context: ResolutionContext | None = None) -> Any:
        """Resolve every parameter plan and invoke the constructor."""
        kwargs = {p.parameter_name: p.resolve_value(context, source) for p in self.parameters}
        return self.ctor(**kwargs)
