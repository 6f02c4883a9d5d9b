"""map_plan - configuration and resolution core of an object-to-object mapper."""

from __future__ import annotations

from map_plan.core.accessor import AttributeAccessor, MemberAccessor, TypeDetails
from map_plan.core.config import TypeMapSettings
from map_plan.core.context import Context, ResolutionContext
from map_plan.core.enums import MemberList
from map_plan.core.exceptions import (
    AmbiguousPropertyMapError,
    ConfigurationError,
    DuplicatePropertyMapError,
    MapPlanError,
    SealedTypeMapError,
)
from map_plan.core.type_pair import TypePair
from map_plan.mapping.constructor_map import ConstructorMap, ConstructorParameterMap
from map_plan.mapping.property_map import PropertyMap
from map_plan.mapping.resolvers import (
    CustomValueResolver,
    ExpressionResolver,
    MemberChainResolver,
)
from map_plan.mapping.source_member import SourceMemberConfig
from map_plan.mapping.type_map import TypeMap

__all__ = [
    # Plan
    "TypeMap",
    "TypePair",
    "PropertyMap",
    "ConstructorMap",
    "ConstructorParameterMap",
    "SourceMemberConfig",
    # Resolvers
    "MemberChainResolver",
    "ExpressionResolver",
    "CustomValueResolver",
    # Members
    "MemberAccessor",
    "AttributeAccessor",
    "TypeDetails",
    # Context
    "ResolutionContext",
    "Context",
    # Config
    "TypeMapSettings",
    # Enums
    "MemberList",
    # Exceptions
    "MapPlanError",
    "ConfigurationError",
    "SealedTypeMapError",
    "DuplicatePropertyMapError",
    "AmbiguousPropertyMapError",
]
