"""Member accessors and per-type member discovery.

MemberAccessor is the opaque read/write capability the plan stores for each
destination (and optionally source) member. The plan core never inspects
how an accessor works; it only reads its name, its declaring type and
whether it is overridable when deciding if an inherited map applies.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, get_origin


class MemberAccessor(Protocol):
    """Read/write capability for one named member."""

    @property
    def name(self) -> str: ...

    @property
    def member_type(self) -> Any: ...

    @property
    def declaring_type(self) -> type: ...

    @property
    def is_overridable(self) -> bool: ...

    def read(self, obj: Any) -> Any: ...

    def write(self, obj: Any, value: Any) -> None: ...


def _find_declaring_type(owner: type, name: str) -> type:
    """First class in owner's MRO that defines or annotates name."""
    for klass in owner.__mro__:
        if name in vars(klass) or name in inspect.get_annotations(klass):
            return klass
    return owner


def _is_abstract_member(declaring_type: type, name: str) -> bool:
    attr = vars(declaring_type).get(name)
    return bool(getattr(attr, "__isabstractmethod__", False))


class AttributeAccessor:
    """MemberAccessor over a plain Python attribute.

    Python has no sealed members, so a member counts as overridable only
    when its declaring class marks it abstract, or when the caller says so
    explicitly via ``overridable``.

    Args:
        owner: The class the member is looked up on.
        name: Attribute name.
        member_type: Declared type of the member, informational only.
        overridable: Override the abstract-member detection.
    """

    def __init__(
        self,
        owner: type,
        name: str,
        member_type: Any = Any,
        *,
        overridable: bool | None = None,
    ) -> None:
        self._owner = owner
        self._name = name
        self._member_type = member_type
        self._declaring_type = _find_declaring_type(owner, name)
        if overridable is None:
            overridable = _is_abstract_member(self._declaring_type, name)
        self._overridable = overridable

    @property
    def name(self) -> str:
        return self._name

    @property
    def owner(self) -> type:
        return self._owner

    @property
    def member_type(self) -> Any:
        return self._member_type

    @property
    def declaring_type(self) -> type:
        return self._declaring_type

    @property
    def is_overridable(self) -> bool:
        return self._overridable

    def read(self, obj: Any) -> Any:
        return getattr(obj, self._name)

    def write(self, obj: Any, value: Any) -> None:
        setattr(obj, self._name, value)

    def __repr__(self) -> str:
        return f"AttributeAccessor({self._owner.__name__}.{self._name})"


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _is_library_base(klass: type) -> bool:
    return klass is object or klass.__module__.startswith("pydantic")


def _get_field_members(cls: type) -> dict[str, Any]:
    """Extract field names and types from a class (Pydantic, dataclass, or plain)."""
    # Pydantic model
    if hasattr(cls, "model_fields"):
        return {name: info.annotation for name, info in cls.model_fields.items()}

    # Dataclass
    if dataclasses.is_dataclass(cls):
        return {f.name: f.type for f in dataclasses.fields(cls)}

    # Plain class - class annotations, then __init__ parameters
    members: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if _is_library_base(klass):
            continue
        for name, annotation in inspect.get_annotations(klass).items():
            if not _is_class_var(annotation):
                members[name] = annotation

    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
    except (ValueError, TypeError):
        return members

    for name, param in sig.parameters.items():
        if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        annotation = Any if param.annotation is inspect.Parameter.empty else param.annotation
        members.setdefault(name, annotation)
    return members


def _get_properties(cls: type) -> dict[str, property]:
    properties: dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        if _is_library_base(klass):
            continue
        for name, attr in vars(klass).items():
            if isinstance(attr, property):
                properties[name] = attr
    return properties


def _is_frozen(cls: type) -> bool:
    """Check if instances of cls refuse attribute assignment (frozen dataclass or Pydantic model)."""
    model_config = getattr(cls, "model_config", None)
    if isinstance(model_config, dict) and model_config.get("frozen"):
        return True
    params = getattr(cls, "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


@dataclass(frozen=True)
class TypeDetails:
    """Public readable and writable members of one type."""

    type: type
    public_read_accessors: tuple[AttributeAccessor, ...]
    public_write_accessors: tuple[AttributeAccessor, ...]

    @classmethod
    def of(cls, tp: type) -> TypeDetails:
        """Cached member discovery for tp."""
        return _type_details(tp)

    @property
    def read_names(self) -> list[str]:
        return [accessor.name for accessor in self.public_read_accessors]

    @property
    def write_names(self) -> list[str]:
        return [accessor.name for accessor in self.public_write_accessors]


@functools.lru_cache(maxsize=None)
def _type_details(tp: type) -> TypeDetails:
    fields = _get_field_members(tp)
    properties = _get_properties(tp)

    readable: dict[str, AttributeAccessor] = {}
    writable: dict[str, AttributeAccessor] = {}
    for name, annotation in fields.items():
        if name.startswith("_"):
            continue
        accessor = AttributeAccessor(tp, name, annotation)
        readable[name] = accessor
        writable[name] = accessor

    for name, prop in properties.items():
        if name.startswith("_"):
            continue
        accessor = AttributeAccessor(tp, name)
        readable[name] = accessor
        if prop.fset is not None:
            writable[name] = accessor
        else:
            writable.pop(name, None)

    # Frozen dataclasses and models reject every attribute assignment
    if _is_frozen(tp):
        writable.clear()

    return TypeDetails(
        type=tp,
        public_read_accessors=tuple(readable.values()),
        public_write_accessors=tuple(writable.values()),
    )
