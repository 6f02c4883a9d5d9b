"""Type pair identity key."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TypePair:
    """Immutable (source type, destination type) identity.

    Equality and hashing are structural, so a TypePair can key the derived
    type registry and any external plan registry.
    """

    source_type: type
    destination_type: type

    def __repr__(self) -> str:
        return f"TypePair({_type_name(self.source_type)} -> {_type_name(self.destination_type)})"


def _type_name(tp: type) -> str:
    return getattr(tp, "__name__", repr(tp))
