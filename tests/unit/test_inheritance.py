"""Unit tests for inheritance merge across base and derived TypeMaps."""

from __future__ import annotations

from abc import ABC, abstractmethod

import pytest

from map_plan.core.accessor import AttributeAccessor
from map_plan.core.exceptions import AmbiguousPropertyMapError
from map_plan.core.type_pair import TypePair
from map_plan.mapping.property_map import PropertyMap
from map_plan.mapping.resolvers import (
    CustomValueResolver,
    ExpressionResolver,
    MemberChainResolver,
)
from map_plan.mapping.type_map import TypeMap


class Shape:
    name: str
    sides: int


class Square(Shape):
    length: float


class ShapeDto:
    name: str
    sides: int


class SquareDto(ShapeDto):
    length: float


class UnrelatedDto:
    name: str


class Labelled(ABC):
    @property
    @abstractmethod
    def label(self) -> str: ...


class LabelDto:
    label: str


class Circle(Shape):
    pass


class CircleDto(ShapeDto):
    pass


def _expression(name: str) -> ExpressionResolver:
    return ExpressionResolver(lambda s: getattr(s, name))


class TestApplyInheritedMap:
    def test_missing_member_is_inherited(self) -> None:
        base = TypeMap(Shape, ShapeDto)
        base_map = base.add_property_map(AttributeAccessor(ShapeDto, "name"), [_expression("name")])
        derived = TypeMap(Square, SquareDto)

        derived.apply_inherited_map(base)

        maps = list(derived.get_property_maps())
        assert [pm.name for pm in maps] == ["name"]
        assert maps[0] is not base_map
        assert maps[0].get_source_value_resolvers() == base_map.get_source_value_resolvers()

    def test_unmapped_base_maps_are_skipped(self) -> None:
        base = TypeMap(Shape, ShapeDto)
        base.add_property_map(AttributeAccessor(ShapeDto, "name"))
        derived = TypeMap(Square, SquareDto)

        derived.apply_inherited_map(base)

        assert list(derived.get_property_maps()) == []

    def test_ignored_base_map_is_inherited(self) -> None:
        base = TypeMap(Shape, ShapeDto)
        base.find_or_create_property_map_for(AttributeAccessor(ShapeDto, "sides")).ignore()
        derived = TypeMap(Square, SquareDto)

        derived.apply_inherited_map(base)

        (inherited,) = derived.get_property_maps()
        assert inherited.ignored is True

    def test_base_custom_resolver_overrides_convention_map(self) -> None:
        custom = CustomValueResolver(lambda source, context: "custom")
        base = TypeMap(Shape, ShapeDto)
        base.add_property_map(AttributeAccessor(ShapeDto, "name"), [custom])

        derived = TypeMap(Square, SquareDto)
        convention = derived.add_property_map(
            AttributeAccessor(SquareDto, "name"),
            [MemberChainResolver((AttributeAccessor(Square, "name"),))],
        )

        derived.apply_inherited_map(base)

        assert convention.get_source_value_resolvers() == (custom,)
        assert list(derived.get_property_maps()) == [convention]

    def test_base_plain_resolver_keeps_derived_map(self) -> None:
        base = TypeMap(Shape, ShapeDto)
        base.add_property_map(AttributeAccessor(ShapeDto, "name"), [_expression("name")])

        own_resolver = _expression("length")
        derived = TypeMap(Square, SquareDto)
        own = derived.add_property_map(AttributeAccessor(SquareDto, "name"), [own_resolver])

        derived.apply_inherited_map(base)

        assert own.get_source_value_resolvers() == (own_resolver,)
        assert list(derived.get_property_maps()) == [own]

    def test_ambiguous_target_raises(self) -> None:
        base = TypeMap(Shape, ShapeDto)
        base.add_property_map(AttributeAccessor(ShapeDto, "name"), [_expression("name")])

        derived = TypeMap(Square, SquareDto)
        derived.add_property_map(AttributeAccessor(SquareDto, "name"))
        derived.add_inherited_property_map(PropertyMap(AttributeAccessor(ShapeDto, "name")))

        with pytest.raises(AmbiguousPropertyMapError, match="name"):
            derived.apply_inherited_map(base)

    def test_hooks_accumulate(self) -> None:
        calls: list[str] = []
        base = TypeMap(Shape, ShapeDto)
        base.add_before_map_action(lambda s, d: calls.append("base-before"))
        base.add_after_map_action(lambda s, d: calls.append("base-after"))

        derived = TypeMap(Square, SquareDto)
        derived.add_before_map_action(lambda s, d: calls.append("derived-before"))
        derived.apply_inherited_map(base)

        derived.before_map(None, None)
        derived.after_map(None, None)

        assert calls == ["derived-before", "base-before", "base-after"]

    def test_multi_level_hooks_in_insertion_order(self) -> None:
        calls: list[str] = []
        root = TypeMap(Shape, ShapeDto)
        root.add_before_map_action(lambda s, d: calls.append("shape"))
        middle = TypeMap(Square, SquareDto)
        middle.add_before_map_action(lambda s, d: calls.append("square"))
        middle.apply_inherited_map(root)
        leaf = TypeMap(Circle, CircleDto)
        leaf.apply_inherited_map(middle)

        leaf.before_map(None, None)

        assert calls == ["square", "shape"]

    def test_inherited_maps_survive_sealing(self) -> None:
        base = TypeMap(Shape, ShapeDto)
        name_map = base.add_property_map(AttributeAccessor(ShapeDto, "name"), [_expression("name")])
        name_map.set_mapping_order(2)
        base.add_property_map(AttributeAccessor(ShapeDto, "sides"), [_expression("sides")])
        base.seal()

        derived = TypeMap(Square, SquareDto)
        length = derived.add_property_map(AttributeAccessor(SquareDto, "length"), [_expression("length")])
        length.set_mapping_order(1)
        derived.apply_inherited_map(base)
        derived.seal()

        assert [pm.name for pm in derived.get_property_maps()] == ["length", "name", "sides"]


class TestInheritTypes:
    def test_copies_missing_registrations(self) -> None:
        base = TypeMap(Shape, ShapeDto)
        base.include_derived_types(Square, SquareDto)
        base.include_derived_types(Circle, CircleDto)

        derived = TypeMap(Shape, ShapeDto)
        derived.include_derived_types(Square, SquareDto)
        derived.inherit_types(base)

        assert derived.included_derived_types == (
            TypePair(Square, SquareDto),
            TypePair(Circle, CircleDto),
        )

    def test_does_not_overwrite_existing(self) -> None:
        base = TypeMap(Shape, ShapeDto)
        base.include_derived_types(Square, ShapeDto)

        derived = TypeMap(Shape, ShapeDto)
        derived.include_derived_types(Square, SquareDto)
        derived.inherit_types(base)

        assert derived.get_derived_type_for(Square) is SquareDto


class TestInheritedMapApplicability:
    def test_same_declaring_type_applies(self) -> None:
        type_map = TypeMap(Square, SquareDto)
        inherited = PropertyMap(AttributeAccessor(ShapeDto, "name"))
        type_map.add_inherited_property_map(inherited)

        assert type_map.get_existing_property_map_for(AttributeAccessor(SquareDto, "name")) is inherited

    def test_unrelated_non_overridable_member_does_not_apply(self) -> None:
        type_map = TypeMap(Square, UnrelatedDto)
        type_map.add_inherited_property_map(PropertyMap(AttributeAccessor(ShapeDto, "name")))

        assert type_map.get_existing_property_map_for(AttributeAccessor(UnrelatedDto, "name")) is None

    def test_overridable_member_applies(self) -> None:
        type_map = TypeMap(Square, LabelDto)
        inherited = PropertyMap(AttributeAccessor(Labelled, "label"))
        type_map.add_inherited_property_map(inherited)

        assert type_map.get_existing_property_map_for(AttributeAccessor(LabelDto, "label")) is inherited

    def test_own_map_wins_over_inherited(self) -> None:
        type_map = TypeMap(Square, SquareDto)
        type_map.add_inherited_property_map(PropertyMap(AttributeAccessor(ShapeDto, "name")))
        own = type_map.add_property_map(AttributeAccessor(SquareDto, "name"))

        assert type_map.get_existing_property_map_for(AttributeAccessor(SquareDto, "name")) is own

    def test_find_or_create_skips_inapplicable_inherited(self) -> None:
        type_map = TypeMap(Square, UnrelatedDto)
        inherited = PropertyMap(AttributeAccessor(ShapeDto, "name"))
        type_map.add_inherited_property_map(inherited)

        created = type_map.find_or_create_property_map_for(AttributeAccessor(UnrelatedDto, "name"))

        assert created is not inherited
        assert created.destination_property.declaring_type is UnrelatedDto
