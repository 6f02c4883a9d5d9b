"""
Example 01: Building and Sealing a TypeMap

This example demonstrates configuring a mapping plan for a pair of types,
inheriting a base plan into a derived one, bounding recursion with a depth
guard, and reading the sealed plan the way an execution engine would.
"""

import logging
from dataclasses import dataclass, field

from map_plan import (
    AttributeAccessor,
    Context,
    CustomValueResolver,
    ExpressionResolver,
    MemberChainResolver,
    MemberList,
    TypeMap,
    TypeMapSettings,
)


@dataclass
class Category:
    """Self-referential source entity"""
    name: str
    parent: "Category | None" = None


@dataclass
class CategoryDto:
    """Destination for Category"""
    name: str = ""
    parent: "CategoryDto | None" = None


@dataclass
class Product:
    """Base source entity"""
    sku: str
    price_cents: int
    category: Category | None = None


@dataclass
class DigitalProduct(Product):
    """Derived source entity"""
    download_url: str = ""


@dataclass
class ProductDto:
    """Base destination"""
    sku: str = ""
    price: str = ""
    category_name: str = ""
    tags: list[str] = field(default_factory=list)


@dataclass
class DigitalProductDto(ProductDto):
    """Derived destination"""
    download_url: str = ""


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    # Base plan: Product -> ProductDto
    settings = TypeMapSettings(member_list=MemberList.DESTINATION, ignore_prefixes=["tag"])
    product_map = TypeMap.from_settings(Product, ProductDto, settings)
    product_map.add_property_map(
        AttributeAccessor(ProductDto, "sku"),
        [MemberChainResolver((AttributeAccessor(Product, "sku"),))],
    )
    product_map.add_property_map(
        AttributeAccessor(ProductDto, "price"),
        [CustomValueResolver(lambda p, ctx: f"{p.price_cents / 100:.2f}")],
    )
    product_map.add_property_map(
        AttributeAccessor(ProductDto, "category_name"),
        [
            MemberChainResolver(
                (AttributeAccessor(Product, "category"), AttributeAccessor(Category, "name"))
            )
        ],
    )
    product_map.include_derived_types(DigitalProduct, DigitalProductDto)
    print(f"Unmapped on {product_map!r}: {product_map.get_unmapped_property_names()}")

    # Derived plan inherits everything the base maps
    digital_map = TypeMap.from_settings(DigitalProduct, DigitalProductDto, settings)
    digital_map.add_property_map(
        AttributeAccessor(DigitalProductDto, "download_url"),
        [ExpressionResolver(lambda p: p.download_url)],
    )
    digital_map.inherit_types(product_map)
    digital_map.apply_inherited_map(product_map)

    product_map.seal()
    digital_map.seal()

    print(f"Derived destination for DigitalProduct: {product_map.get_derived_type_for(DigitalProduct).__name__}")
    for pm in digital_map.get_property_maps():
        print(f"  {pm.name}: order={pm.get_mapping_order()} resolvers={len(pm.get_source_value_resolvers())}")

    # Drive the sealed plan by hand
    source = DigitalProduct(
        sku="EBOOK-1",
        price_cents=1299,
        category=Category("Books"),
        download_url="https://example.com/ebook-1",
    )
    context = Context(DigitalProduct, DigitalProductDto, type_map=digital_map)
    destination = digital_map.destination_constructor_expression()(source, context)
    for pm in digital_map.get_property_maps():
        pm.destination_property.write(destination, pm.resolve_value(context, source))
    print(f"Mapped: {destination}")

    # Depth guard on a self-referential graph
    category_map = TypeMap(Category, CategoryDto)
    category_map.max_depth = 2
    root = Context(Category, CategoryDto, type_map=category_map)
    child = root.child(Category, CategoryDto, type_map=category_map)
    grandchild = child.child(Category, CategoryDto, type_map=category_map)
    for label, ctx in (("root", root), ("child", child), ("grandchild", grandchild)):
        print(f"  {label}: should_assign_value={category_map.should_assign_value(ctx)}")


if __name__ == "__main__":
    main()
