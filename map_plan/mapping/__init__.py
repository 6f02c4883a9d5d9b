"""Mapping layer - plan entries and the TypeMap aggregate."""

from __future__ import annotations

from map_plan.mapping.constructor_map import ConstructorMap, ConstructorParameterMap
from map_plan.mapping.property_map import PropertyMap
from map_plan.mapping.protocol import ValueResolver
from map_plan.mapping.resolvers import (
    CustomValueResolver,
    ExpressionResolver,
    MemberChainResolver,
    resolve_chain,
)
from map_plan.mapping.source_member import SourceMemberConfig
from map_plan.mapping.type_map import TypeMap

__all__ = [
    "TypeMap",
    "PropertyMap",
    "ConstructorMap",
    "ConstructorParameterMap",
    "SourceMemberConfig",
    "ValueResolver",
    "MemberChainResolver",
    "ExpressionResolver",
    "CustomValueResolver",
    "resolve_chain",
]
