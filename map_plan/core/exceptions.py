"""map_plan exception hierarchy.

Every error raised by the plan core is a configuration-time error: the core
never executes resolvers, so no mapping operation can fail inside it.
"""

from __future__ import annotations

from typing import Any


class MapPlanError(Exception):
    """Base exception for all map_plan errors."""


# --- Configuration ---


class ConfigurationError(MapPlanError):
    """Base for configuration-time misuse of a mapping plan."""


class SealedTypeMapError(ConfigurationError):
    """Raised when a sealed plan is structurally mutated."""

    def __init__(self, owner: Any, action: str) -> None:
        self.owner = owner
        self.action = action
        super().__init__(f"Cannot {action}: {owner!r} is sealed")


class DuplicatePropertyMapError(ConfigurationError):
    """Raised when a destination member already has its own property map."""

    def __init__(self, type_map: Any, member_name: str) -> None:
        self.type_map = type_map
        self.member_name = member_name
        super().__init__(f"Duplicate property map for '{member_name}' in {type_map!r}")


class AmbiguousPropertyMapError(ConfigurationError):
    """Raised when an inheritance merge finds several maps for one destination member."""

    def __init__(self, type_map: Any, member_name: str, count: int) -> None:
        self.type_map = type_map
        self.member_name = member_name
        self.count = count
        super().__init__(
            f"Cannot merge inherited map for '{member_name}' into {type_map!r}: "
            f"{count} property maps target that member (expected 0 or 1)"
        )
