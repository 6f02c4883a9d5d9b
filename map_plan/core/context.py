"""Resolution context.

A ResolutionContext is one node in the call chain of a single top-level
mapping invocation. The execution engine owns it; the plan core only reads
it while evaluating a condition such as the depth guard.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


class ResolutionContext(Protocol):
    """Read-only view of a call-chain node."""

    @property
    def source_type(self) -> type: ...

    @property
    def destination_type(self) -> type: ...

    @property
    def type_map(self) -> Any: ...

    @property
    def parent(self) -> ResolutionContext | None: ...

    @property
    def instance_cache(self) -> dict[Any, Any]: ...


@dataclass(eq=False)
class Context:
    """Minimal ResolutionContext implementation.

    Contexts hash by identity so they can key the shared instance cache.
    Children share their root's cache.
    """

    source_type: type
    destination_type: type
    type_map: Any = None
    parent: Context | None = None
    source_value: Any = None
    instance_cache: dict[Any, Any] = field(default_factory=dict)

    def child(
        self,
        source_type: type,
        destination_type: type,
        *,
        type_map: Any = None,
        source_value: Any = None,
    ) -> Context:
        """Create a nested context sharing this chain's instance cache."""
        return Context(
            source_type=source_type,
            destination_type=destination_type,
            type_map=type_map,
            parent=self,
            source_value=source_value,
            instance_cache=self.instance_cache,
        )

    @property
    def depth(self) -> int:
        """Number of nodes from the root to this context, inclusive."""
        depth = 1
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth
