"""TypeMap - the aggregate mapping plan for one type pair.

A TypeMap goes through two phases. While open, configuration producers
(possibly on several threads) add property maps, source member configs,
derived types and hooks. Sealing freezes the ordered property-map list
once; afterwards reads are served from that tuple without locking and any
structural mutation raises SealedTypeMapError.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any

from map_plan.core.accessor import MemberAccessor, TypeDetails
from map_plan.core.concurrent import ThreadSafeList
from map_plan.core.config import DEFAULT_PROFILE_NAME, TypeMapSettings
from map_plan.core.context import ResolutionContext
from map_plan.core.enums import MemberList
from map_plan.core.exceptions import (
    AmbiguousPropertyMapError,
    DuplicatePropertyMapError,
    SealedTypeMapError,
)
from map_plan.core.type_pair import TypePair
from map_plan.mapping.constructor_map import ConstructorMap, ConstructorParameterMap
from map_plan.mapping.property_map import PropertyMap
from map_plan.mapping.protocol import ValueResolver
from map_plan.mapping.source_member import SourceMemberConfig

logger = logging.getLogger(__name__)

MapAction = Callable[[Any, Any], None]
Condition = Callable[[ResolutionContext], bool]
DestinationFactory = Callable[..., Any]

_HASH_MULTIPLIER = 397


def _compose(actions: Sequence[MapAction]) -> MapAction:
    def run(source: Any, destination: Any) -> None:
        for action in actions:
            action(source, destination)

    return run


class TypeMap:
    """Mapping plan for a single (source type, destination type) pair.

    Args:
        source_type: Type mapped from.
        destination_type: Type mapped to.
        member_list: Member set checked by get_unmapped_property_names.
        profile: Name of the configuration profile owning this map.

    Attributes:
        ignore_prefixes: Member-name prefixes skipped by get_unmapped_property_names.
        destination_ctor: Engine-facing slot; builds the destination from a
            resolution context. Stored only, never called here.
        destination_type_override: Type constructed in place of destination_type
            by destination_constructor_expression.
        construct_expression: Explicit ``(source, context)`` destination factory.
        substitution: Engine-facing slot; replaces the source value before
            mapping. Stored only, never called here.

    These attributes stay writable after seal().
    """

    def __init__(
        self,
        source_type: type,
        destination_type: type,
        member_list: MemberList = MemberList.DESTINATION,
        *,
        profile: str = DEFAULT_PROFILE_NAME,
    ) -> None:
        self._type_pair = TypePair(source_type, destination_type)
        self._member_list = member_list
        self.profile = profile

        self._property_maps: ThreadSafeList[PropertyMap] = ThreadSafeList()
        self._inherited_maps: ThreadSafeList[PropertyMap] = ThreadSafeList()
        self._source_member_configs: ThreadSafeList[SourceMemberConfig] = ThreadSafeList()
        self._before_map_actions: ThreadSafeList[MapAction] = ThreadSafeList()
        self._after_map_actions: ThreadSafeList[MapAction] = ThreadSafeList()

        # Insertion-ordered set: first registered match wins on lookup.
        self._included_derived_types: dict[TypePair, None] = {}
        self._derived_lock = threading.Lock()

        self._ordered_property_maps: tuple[PropertyMap, ...] = ()
        self._sealed = False
        # Reentrant: mutators call other mutators while holding it.
        self._seal_lock = threading.RLock()

        self._condition: Condition | None = None
        self._max_depth: int | None = None
        self._constructor_map: ConstructorMap | None = None
        self._custom_mapper: Callable[[ResolutionContext], Any] | None = None
        self._custom_projection: Callable[..., Any] | None = None

        self.ignore_prefixes: list[str] = []
        self.destination_ctor: Callable[[ResolutionContext], Any] | None = None
        self.destination_type_override: type | None = None
        self.construct_expression: DestinationFactory | None = None
        self.substitution: Callable[[Any], Any] | None = None

    @classmethod
    def from_settings(
        cls,
        source_type: type,
        destination_type: type,
        settings: TypeMapSettings,
    ) -> TypeMap:
        """Create a TypeMap with profile defaults applied."""
        type_map = cls(
            source_type,
            destination_type,
            settings.member_list,
            profile=settings.profile,
        )
        type_map.ignore_prefixes = list(settings.ignore_prefixes)
        if settings.max_depth is not None:
            type_map.max_depth = settings.max_depth
        return type_map

    # --- Identity ---

    @property
    def type_pair(self) -> TypePair:
        return self._type_pair

    @property
    def source_type(self) -> type:
        return self._type_pair.source_type

    @property
    def destination_type(self) -> type:
        return self._type_pair.destination_type

    @property
    def configured_member_list(self) -> MemberList:
        return self._member_list

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeMap):
            return NotImplemented
        return self._type_pair == other._type_pair

    def __hash__(self) -> int:
        return (hash(self.source_type) * _HASH_MULTIPLIER) ^ hash(self.destination_type)

    def __repr__(self) -> str:
        return f"TypeMap({self.source_type.__name__} -> {self.destination_type.__name__})"

    def _ensure_open(self, action: str) -> None:
        if self._sealed:
            raise SealedTypeMapError(self, action)

    @contextlib.contextmanager
    def _mutating(self, action: str) -> Iterator[None]:
        """Hold the seal lock across the open check and the mutation."""
        with self._seal_lock:
            self._ensure_open(action)
            yield

    # --- Property maps ---

    def get_property_maps(self) -> Sequence[PropertyMap]:
        """Ordered, frozen plan once sealed; unordered fresh view before."""
        if self._sealed:
            return self._ordered_property_maps
        return [*self._property_maps, *self._inherited_maps]

    def add_property_map(
        self,
        destination: MemberAccessor | PropertyMap,
        resolvers: Iterable[ValueResolver] = (),
    ) -> PropertyMap:
        """Add a map for a destination member and chain resolvers onto it.

        Raises:
            DuplicatePropertyMapError: If the member already has its own map.
        """
        # Drain lazy iterables outside the seal lock.
        resolvers = list(resolvers)
        property_map = destination if isinstance(destination, PropertyMap) else PropertyMap(destination)
        name = property_map.name

        with self._mutating("add property map"):
            if self._property_maps.find_first(lambda pm: pm.name == name) is not None:
                raise DuplicatePropertyMapError(self, name)
            property_map.chain_resolvers(resolvers)
            self._property_maps.append(property_map)
        return property_map

    def add_inherited_property_map(self, property_map: PropertyMap) -> None:
        with self._mutating("add inherited property map"):
            self._inherited_maps.append(property_map)

    def get_existing_property_map_for(self, destination_property: MemberAccessor) -> PropertyMap | None:
        """Find the map for a destination member, own maps first.

        An inherited map only applies when its member is overridable or both
        members are declared by the same class; a same-named, non-overridable
        member of an unrelated class gets no inherited map.
        """
        name = destination_property.name
        own = self._property_maps.find_first(lambda pm: pm.name == name)
        if own is not None:
            return own

        inherited = self._inherited_maps.find_first(lambda pm: pm.name == name)
        if inherited is None:
            return None

        base_accessor = inherited.destination_property
        if base_accessor.is_overridable:
            return inherited
        if base_accessor.declaring_type is destination_property.declaring_type:
            return inherited
        return None

    def find_or_create_property_map_for(self, destination_property: MemberAccessor) -> PropertyMap:
        existing = self.get_existing_property_map_for(destination_property)
        if existing is not None:
            return existing

        name = destination_property.name
        with self._mutating("create property map"):
            return self._property_maps.append_if_absent(
                lambda pm: pm.name == name,
                lambda: PropertyMap(destination_property),
            )

    # --- Source members ---

    @property
    def source_member_configs(self) -> tuple[SourceMemberConfig, ...]:
        return self._source_member_configs.snapshot()

    def find_or_create_source_member_config_for(self, source_member: str) -> SourceMemberConfig:
        existing = self._source_member_configs.find_first(lambda smc: smc.source_member == source_member)
        if existing is not None:
            return existing

        with self._mutating("create source member config"):
            return self._source_member_configs.append_if_absent(
                lambda smc: smc.source_member == source_member,
                lambda: SourceMemberConfig(source_member),
            )

    def get_unmapped_property_names(self) -> list[str]:
        """Names in the configured member list not covered by any mapped property map."""
        if self._member_list is MemberList.NONE:
            return []

        own = self._property_maps.snapshot()
        excluded = {pm.name for pm in (*own, *self._inherited_maps) if pm.is_mapped()}

        if self._member_list is MemberList.DESTINATION:
            candidates = TypeDetails.of(self.destination_type).write_names
        else:
            candidates = TypeDetails.of(self.source_type).read_names
            excluded.update(
                pm.source_member.name
                for pm in own
                if pm.is_mapped() and pm.custom_expression is not None and pm.source_member is not None
            )
            excluded.update(
                smc.source_member for smc in self._source_member_configs if smc.is_ignored()
            )

        prefixes = tuple(self.ignore_prefixes)
        return [name for name in candidates if name not in excluded and not name.startswith(prefixes)]

    # --- Derived types ---

    @property
    def included_derived_types(self) -> tuple[TypePair, ...]:
        with self._derived_lock:
            return tuple(self._included_derived_types)

    def include_derived_types(self, derived_source_type: type, derived_destination_type: type) -> None:
        pair = TypePair(derived_source_type, derived_destination_type)
        with self._mutating("include derived types"), self._derived_lock:
            self._included_derived_types.setdefault(pair, None)
        logger.debug("%r includes derived %r", self, pair)

    def get_derived_type_for(self, derived_source_type: type) -> type:
        """Destination type registered for derived_source_type.

        Only one destination per derived source type is supported: the first
        registration wins. Falls back to this map's destination type.
        """
        for pair in self.included_derived_types:
            if pair.source_type == derived_source_type:
                return pair.destination_type
        return self.destination_type

    def type_has_been_included(self, derived_source_type: type, derived_destination_type: type) -> bool:
        pair = TypePair(derived_source_type, derived_destination_type)
        with self._derived_lock:
            return pair in self._included_derived_types

    def has_derived_types_to_include(self) -> bool:
        with self._derived_lock:
            return bool(self._included_derived_types)

    # --- Custom mapping ---

    @property
    def custom_mapper(self) -> Callable[[ResolutionContext], Any] | None:
        return self._custom_mapper

    @property
    def custom_projection(self) -> Callable[..., Any] | None:
        return self._custom_projection

    def use_custom_mapper(self, custom_mapper: Callable[[ResolutionContext], Any]) -> None:
        """Replace member-wise mapping with a custom mapper; clears own property maps."""
        with self._mutating("use custom mapper"):
            self._custom_mapper = custom_mapper
            self._property_maps.clear()
        logger.debug("%r uses a custom mapper, property maps cleared", self)

    def use_custom_projection(self, projection: Callable[..., Any]) -> None:
        with self._mutating("use custom projection"):
            self._custom_projection = projection
            self._property_maps.clear()
        logger.debug("%r uses a custom projection, property maps cleared", self)

    # --- Hooks ---

    @property
    def before_map(self) -> MapAction:
        return _compose(self._before_map_actions.snapshot())

    @property
    def after_map(self) -> MapAction:
        return _compose(self._after_map_actions.snapshot())

    def add_before_map_action(self, action: MapAction) -> None:
        with self._mutating("add before map action"):
            self._before_map_actions.append(action)

    def add_after_map_action(self, action: MapAction) -> None:
        with self._mutating("add after map action"):
            self._after_map_actions.append(action)

    # --- Conditions ---

    @property
    def max_depth(self) -> int | None:
        return self._max_depth

    @max_depth.setter
    def max_depth(self, value: int) -> None:
        # Replaces any condition set earlier.
        with self._mutating("set max depth"):
            self.set_condition(lambda context: self._passes_depth_check(context, value))
            self._max_depth = value

    def set_condition(self, condition: Condition) -> None:
        with self._mutating("set condition"):
            self._condition = condition

    def should_assign_value(self, context: ResolutionContext) -> bool:
        return self._condition is None or self._condition(context)

    def _passes_depth_check(self, context: ResolutionContext, max_depth: int) -> bool:
        """Bound recursion by counting ancestors that repeat this map's type pair.

        Only recursion through this exact type pair is detected; cycles that
        pass through other type pairs are not.
        """
        if context in context.instance_cache:
            return True

        depth = 1
        node = context
        while node.parent is not None:
            if node.source_type == self.source_type and node.destination_type == self.destination_type:
                depth += 1
            node = node.parent

        if depth > max_depth:
            logger.debug("%r depth %d exceeds max depth %d", self, depth, max_depth)
            return False
        return True

    # --- Construction ---

    @property
    def constructor_map(self) -> ConstructorMap | None:
        return self._constructor_map

    def add_constructor_map(
        self,
        ctor: Callable[..., Any],
        parameters: Iterable[ConstructorParameterMap],
    ) -> ConstructorMap:
        parameters = tuple(parameters)
        with self._mutating("add constructor map"):
            self._constructor_map = ConstructorMap(ctor=ctor, parameters=parameters)
            return self._constructor_map

    def destination_constructor_expression(self) -> DestinationFactory:
        """Factory ``(source, context) -> destination`` in priority order.

        An explicit construct expression wins, then the constructor map, then
        a parameterless call of the destination type (or its override).
        """
        if self.construct_expression is not None:
            return self.construct_expression
        if self._constructor_map is not None:
            return self._constructor_map.build

        target = self.destination_type_override or self.destination_type

        def construct(source: Any = None, context: ResolutionContext | None = None) -> Any:
            return target()

        return construct

    # --- Inheritance ---

    def inherit_types(self, base: TypeMap) -> None:
        """Copy the base map's derived-type registrations not already present."""
        pairs = base.included_derived_types
        with self._mutating("inherit derived types"), self._derived_lock:
            for pair in pairs:
                self._included_derived_types.setdefault(pair, None)

    def apply_inherited_map(self, base: TypeMap) -> None:
        """Fold a base map's mapped property maps and hooks into this map.

        Raises:
            AmbiguousPropertyMapError: If several maps here target one member.
        """
        with self._mutating("apply inherited map"):
            for inherited in base.get_property_maps():
                if not inherited.is_mapped():
                    continue

                matches = [pm for pm in self.get_property_maps() if pm.name == inherited.name]
                if len(matches) > 1:
                    raise AmbiguousPropertyMapError(self, inherited.name, len(matches))

                if matches and inherited.has_custom_value_resolver:
                    convention_map = matches[0]
                    convention_map.replace_resolvers(inherited.get_source_value_resolvers())
                    convention_map.assign_custom_expression(inherited.custom_expression)
                elif not matches:
                    self.add_inherited_property_map(PropertyMap.inherit_from(inherited))

            self._before_map_actions.extend(base._before_map_actions.snapshot())
            self._after_map_actions.extend(base._after_map_actions.snapshot())
        logger.debug("%r applied inherited map %r", self, base)

    # --- Sealing ---

    def seal(self) -> None:
        """Freeze the ordered plan. Idempotent, one-way."""
        with self._seal_lock:
            if self._sealed:
                return

            own = self._property_maps.snapshot()
            own_ids = {id(pm) for pm in own}
            combined = own + tuple(pm for pm in self._inherited_maps if id(pm) not in own_ids)
            # sorted() is stable: equal orders keep declaration order
            ordered = tuple(sorted(combined, key=lambda pm: pm.get_mapping_order()))
            for property_map in ordered:
                property_map.seal()

            self._ordered_property_maps = ordered
            self._sealed = True

        logger.debug("Sealed %r with %d property maps", self, len(ordered))
