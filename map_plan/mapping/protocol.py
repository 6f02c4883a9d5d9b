"""Value resolver protocol.

A PropertyMap owns an ordered chain of resolvers. The execution engine
feeds the source object into the first resolver and each resolver's result
into the next one.
"""

from __future__ import annotations

from typing import Any, Protocol

from map_plan.core.context import ResolutionContext


class ValueResolver(Protocol):
    """Base value resolver protocol."""

    def resolve(self, context: ResolutionContext | None, source: Any) -> Any:
        """Produce a value from source within context."""
        ...
