"""Type schemas used to describe, validate and infer workflow data."""

from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class TypeID(str, enum.Enum):
    """Identifiers of the schema types."""

    STRING = "string"
    STRING_ENUM = "enum_string"
    INT = "integer"
    INT_ENUM = "enum_integer"
    FLOAT = "float"
    BOOL = "bool"
    ANY = "any"
    PATTERN = "pattern"
    LIST = "list"
    MAP = "map"
    OBJECT = "object"
    SCOPE = "scope"
    ONE_OF_STRING = "one_of_string"


class SchemaError(ValueError):
    """Raised when data does not match a schema."""


def _check_bounds(kind: str, size: float, minimum: float | None, maximum: float | None) -> None:
    if minimum is not None and size < minimum:
        raise SchemaError(f"{kind} must be at least {minimum} (got {size})")
    if maximum is not None and size > maximum:
        raise SchemaError(f"{kind} must be at most {maximum} (got {size})")


class SchemaType(ABC):
    """Base of every schema type."""

    type_id: TypeID

    @abstractmethod
    def unserialize(self, data: Any) -> Any:
        """Validate raw data against this schema and return the typed value."""


@dataclass
class StringSchema(SchemaType):
    min_length: int | None = None
    max_length: int | None = None
    pattern: re.Pattern[str] | str | None = None
    type_id = TypeID.STRING

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            self.pattern = re.compile(self.pattern)

    def unserialize(self, data: Any) -> str:
        if not isinstance(data, str):
            raise SchemaError(f"expected a string, got {type(data).__name__}")
        _check_bounds("string length", len(data), self.min_length, self.max_length)
        if self.pattern is not None and not self.pattern.search(data):
            raise SchemaError(f"string {data!r} does not match pattern {self.pattern.pattern}")
        return data


@dataclass
class IntSchema(SchemaType):
    min: int | None = None
    max: int | None = None
    type_id = TypeID.INT

    def unserialize(self, data: Any) -> int:
        if isinstance(data, bool) or not isinstance(data, int):
            raise SchemaError(f"expected an integer, got {type(data).__name__}")
        _check_bounds("integer", data, self.min, self.max)
        return data


@dataclass
class FloatSchema(SchemaType):
    min: float | None = None
    max: float | None = None
    type_id = TypeID.FLOAT

    def unserialize(self, data: Any) -> float:
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise SchemaError(f"expected a float, got {type(data).__name__}")
        value = float(data)
        _check_bounds("float", value, self.min, self.max)
        return value


@dataclass
class BoolSchema(SchemaType):
    type_id = TypeID.BOOL

    def unserialize(self, data: Any) -> bool:
        if not isinstance(data, bool):
            raise SchemaError(f"expected a boolean, got {type(data).__name__}")
        return data


@dataclass
class AnySchema(SchemaType):
    type_id = TypeID.ANY

    def unserialize(self, data: Any) -> Any:
        return data


@dataclass
class PatternSchema(SchemaType):
    type_id = TypeID.PATTERN

    def unserialize(self, data: Any) -> re.Pattern[str]:
        if isinstance(data, re.Pattern):
            return data
        if not isinstance(data, str):
            raise SchemaError(f"expected a pattern string, got {type(data).__name__}")
        try:
            return re.compile(data)
        except re.error as exc:
            raise SchemaError(f"invalid pattern {data!r} ({exc})") from exc


@dataclass
class ListSchema(SchemaType):
    items: SchemaType
    min: int | None = None
    max: int | None = None
    type_id = TypeID.LIST

    def unserialize(self, data: Any) -> list[Any]:
        if isinstance(data, (str, bytes, Mapping)) or not isinstance(data, (list, tuple)):
            raise SchemaError(f"expected a list, got {type(data).__name__}")
        _check_bounds("list length", len(data), self.min, self.max)
        result = []
        for index, item in enumerate(data):
            try:
                result.append(self.items.unserialize(item))
            except SchemaError as exc:
                raise SchemaError(f"invalid list item {index} ({exc})") from exc
        return result


@dataclass
class MapSchema(SchemaType):
    keys: SchemaType
    values: SchemaType
    min: int | None = None
    max: int | None = None
    type_id = TypeID.MAP

    def unserialize(self, data: Any) -> dict[Any, Any]:
        if not isinstance(data, Mapping):
            raise SchemaError(f"expected a map, got {type(data).__name__}")
        _check_bounds("map size", len(data), self.min, self.max)
        result = {}
        for key, value in data.items():
            try:
                result[self.keys.unserialize(key)] = self.values.unserialize(value)
            except SchemaError as exc:
                raise SchemaError(f"invalid map entry {key!r} ({exc})") from exc
        return result


@dataclass
class PropertySchema:
    """A property of an object: its type, whether it is required and its default."""

    type: SchemaType
    display: Any = None
    required: bool = False
    default: Any = None

    @property
    def type_id(self) -> TypeID:
        return self.type.type_id


@dataclass
class ObjectSchema(SchemaType):
    id: str
    properties: dict[str, PropertySchema] = field(default_factory=dict)
    id_unenforced: bool = False
    type_id = TypeID.OBJECT

    def unserialize(self, data: Any) -> dict[str, Any]:
        if not isinstance(data, Mapping):
            raise SchemaError(f"expected an object for {self.id}, got {type(data).__name__}")
        unknown = [key for key in data if key not in self.properties]
        if unknown:
            raise SchemaError(f"unknown properties for {self.id}: {', '.join(map(str, unknown))}")
        result: dict[str, Any] = {}
        for name, prop in self.properties.items():
            if name in data and data[name] is not None:
                raw = data[name]
            elif prop.default is not None:
                raw = prop.default
            elif prop.required:
                raise SchemaError(f"missing required property {name!r} for {self.id}")
            else:
                continue
            try:
                result[name] = prop.type.unserialize(raw)
            except SchemaError as exc:
                raise SchemaError(f"invalid property {name!r} for {self.id} ({exc})") from exc
        return result


class ScopeSchema(SchemaType):
    """A set of objects, the first of which is the root."""

    type_id = TypeID.SCOPE

    def __init__(self, root: ObjectSchema, *objects: ObjectSchema) -> None:
        self.root = root.id
        self.objects: dict[str, ObjectSchema] = {obj.id: obj for obj in (root, *objects)}

    @property
    def root_object(self) -> ObjectSchema:
        return self.objects[self.root]

    def unserialize(self, data: Any) -> dict[str, Any]:
        return self.root_object.unserialize(data)

    def __repr__(self) -> str:
        return f"ScopeSchema(root={self.root!r}, objects={list(self.objects)!r})"


@dataclass
class OneOfStringSchema(SchemaType):
    types: dict[str, SchemaType]
    discriminator_field_name: str
    discriminator_inlined: bool = False
    type_id = TypeID.ONE_OF_STRING

    def unserialize(self, data: Any) -> dict[str, Any]:
        if not isinstance(data, Mapping):
            raise SchemaError(f"expected an object, got {type(data).__name__}")
        key = self.discriminator_field_name
        if key not in data:
            raise SchemaError(f"missing discriminator field {key!r}")
        choice = data[key]
        if not isinstance(choice, str) or choice not in self.types:
            raise SchemaError(f"invalid discriminator value {choice!r} for field {key!r}")
        payload = dict(data)
        if not self.discriminator_inlined:
            del payload[key]
        result = self.types[choice].unserialize(payload)
        result[key] = choice
        return result


@dataclass
class StepOutputSchema:
    """Schema of one step or workflow output."""

    schema: ScopeSchema
    display: Any = None
    error: bool = False


def convert_to_object_schema(schema: Any) -> ObjectSchema | None:
    """Return the object schema behind a schema, or None when it is not object-like."""
    if isinstance(schema, ObjectSchema):
        return schema
    if isinstance(schema, ScopeSchema):
        return schema.root_object
    return None