"""
Data models for the exposed-function catalog.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from goparse.typecheck import Basic, BasicKind, Pointer, ResolvedType


@dataclass(frozen=True)
class Parameter:
    """One primitive argument of an exposed function.

    Attributes:
        name: Parameter identifier
        primitive_kind: Basic kind of the value (of the pointee for pointers)
        is_pointer: Whether the declared type is a pointer to primitive_kind
        documentation: Comment on this name, else on its field group, else ""
    """

    name: str
    primitive_kind: BasicKind
    is_pointer: bool
    documentation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "primitive_kind": self.primitive_kind.go_name,
            "is_pointer": self.is_pointer,
            "documentation": self.documentation,
        }


@dataclass(frozen=True)
class ExposedFunction:
    """An exported, command-eligible function.

    Attributes:
        name: Function identifier
        parameters: Primitive parameters in declaration order
        signals_failure: Whether the function returns a single error
        documentation: Combined text of the comments attached to the declaration
    """

    name: str
    parameters: Tuple[Parameter, ...]
    signals_failure: bool
    documentation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert the function to a dictionary suitable for JSON serialization."""
        return {
            "name": self.name,
            "parameters": [p.to_dict() for p in self.parameters],
            "signals_failure": self.signals_failure,
            "documentation": self.documentation,
        }


@dataclass(frozen=True)
class Primitive:
    kind: BasicKind


@dataclass(frozen=True)
class PointerTo:
    target: Primitive


@dataclass(frozen=True)
class Other:
    description: str


TypeShape = Union[Primitive, PointerTo, Other]


def classify_shape(resolved: ResolvedType) -> TypeShape:
    """Classify a resolved parameter type as primitive, pointer to primitive, or other.

    Only one level of pointer is unwrapped, and named types are never
    primitive even when their underlying type is.
    """
    if isinstance(resolved, Pointer):
        if isinstance(resolved.elem, Basic):
            return PointerTo(Primitive(resolved.elem.kind))
        return Other(str(resolved))
    if isinstance(resolved, Basic):
        return Primitive(resolved.kind)
    return Other(str(resolved))
