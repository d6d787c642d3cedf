"""Inference of schemas from workflow data, possibly containing expressions."""

from __future__ import annotations

import random
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from flowengine.schema import (
    BoolSchema,
    FloatSchema,
    IntSchema,
    ListSchema,
    MapSchema,
    ObjectSchema,
    OneOfStringSchema,
    PatternSchema,
    PropertySchema,
    SchemaType,
    ScopeSchema,
    StepOutputSchema,
    StringSchema,
    TypeID,
)

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_CHARACTERS = "abcdefghijklmnopqrstuvwxyz0123456789"
_OBJECT_ID_RANDOM = random.Random()

_SEGMENT_RE = re.compile(
    r"""\.(?P<name>[A-Za-z_][A-Za-z0-9_-]*)
      |\[(?P<index>[0-9]+)\]
      |\["(?P<dq>[^"]*)"\]
      |\['(?P<sq>[^']*)'\]""",
    re.VERBOSE,
)

PathSegment = Union[str, int]


class InferenceError(ValueError):
    """Raised when no schema can be inferred from the data."""


def _parse_path(source: str) -> tuple[PathSegment, ...]:
    text = source.strip()
    if not text.startswith("$"):
        raise InferenceError(f"invalid expression {source!r}: must start with '$'")
    position = 1
    segments: list[PathSegment] = []
    while position < len(text):
        match = _SEGMENT_RE.match(text, position)
        if match is None:
            raise InferenceError(
                f"invalid expression {source!r}: unexpected input at position {position}"
            )
        if match.group("name") is not None:
            segments.append(match.group("name"))
        elif match.group("index") is not None:
            segments.append(int(match.group("index")))
        elif match.group("dq") is not None:
            segments.append(match.group("dq"))
        else:
            segments.append(match.group("sq"))
        position = match.end()
    return tuple(segments)


@dataclass(frozen=True)
class Expression:
    """A path expression such as ``$.steps.example.outputs`` into the data model."""

    source: str
    segments: tuple[PathSegment, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "segments", _parse_path(self.source))

    def __str__(self) -> str:
        return self.source

    def type(
        self,
        internal_data_model: SchemaType | None,
        functions: Mapping[str, Any] | None,
        workflow_context: Mapping[str, bytes] | None,
    ) -> SchemaType:
        """Resolve the type the expression evaluates to within the data model."""
        if internal_data_model is None:
            raise InferenceError(f"no data model to evaluate expression {self.source}")
        current: SchemaType = internal_data_model
        for segment in self.segments:
            current = _step_into(current, segment)
        return current


def _step_into(current: SchemaType, segment: PathSegment) -> SchemaType:
    if isinstance(current, ScopeSchema):
        current = current.root_object
    if isinstance(current, ObjectSchema):
        if not isinstance(segment, str) or segment not in current.properties:
            raise InferenceError(f"object {current.id} has no property {segment!r}")
        return current.properties[segment].type
    if isinstance(current, ListSchema):
        if not isinstance(segment, int):
            raise InferenceError(f"cannot access {segment!r} on a list; an index is required")
        return current.items
    if isinstance(current, MapSchema):
        try:
            current.keys.unserialize(segment)
        except ValueError as exc:
            raise InferenceError(f"invalid map key {segment!r} ({exc})") from exc
        return current.values
    raise InferenceError(f"cannot access {segment!r} on type {current.type_id.value}")


@dataclass
class OptionalExpression:
    """An expression used in an object as an optional field."""

    expr: Expression
    wait_for_completion: bool = False
    group_node_path: str = ""
    parent_node_path: str = ""


@dataclass
class OneOfExpression:
    """A discriminator and the possible option values, keyed by discriminator value."""

    discriminator: str
    options: dict[str, Any] = field(default_factory=dict)
    node_path: str = ""

    def __str__(self) -> str:
        return (
            f"{{OneOf Expression; Discriminator: {self.discriminator}; "
            f"Options: {self.options}}}"
        )

    def type(
        self,
        internal_data_model: SchemaType | None,
        functions: Mapping[str, Any] | None,
        workflow_context: Mapping[str, bytes] | None,
    ) -> OneOfStringSchema:
        """Infer the one-of type from the types of all options."""
        schemas: dict[str, SchemaType] = {}
        for option_id, data in self.options.items():
            inferred = infer_type(data, internal_data_model, functions, workflow_context)
            if not isinstance(inferred, (ObjectSchema, ScopeSchema)):
                raise InferenceError(
                    f"type of OneOf option is not an object; got {type(inferred).__name__}"
                )
            schemas[option_id] = inferred
        return OneOfStringSchema(schemas, self.discriminator, False)


def output_schema(
    data: Any,
    output_id: str,
    output_schema: StepOutputSchema | None,
    internal_data_model: SchemaType | None,
    functions: Mapping[str, Any] | None,
    workflow_context: Mapping[str, bytes] | None,
) -> StepOutputSchema:
    """Return the given output schema, or infer one from the data."""
    if output_schema is not None:
        return output_schema
    try:
        scope = infer_scope(data, internal_data_model, functions, workflow_context)
    except InferenceError as exc:
        raise InferenceError(f"unable to infer output schema for {output_id} ({exc})") from exc
    return StepOutputSchema(scope, None, output_id == "error")


def infer_scope(
    data: Any,
    internal_data_model: SchemaType | None,
    functions: Mapping[str, Any] | None,
    workflow_context: Mapping[str, bytes] | None,
) -> ScopeSchema:
    """Infer a scope from the data; the data must describe an object."""
    try:
        data_type = infer_type(data, internal_data_model, functions, workflow_context)
    except InferenceError as exc:
        raise InferenceError(f"failed to infer data type ({exc})") from exc
    if isinstance(data_type, ScopeSchema):
        return data_type
    if isinstance(data_type, ObjectSchema):
        return ScopeSchema(data_type)
    raise InferenceError(
        f"invalid type for output root object: {data_type.type_id.value} (must be an object)"
    )


def infer_type(
    data: Any,
    internal_data_model: SchemaType | None,
    functions: Mapping[str, Any] | None,
    workflow_context: Mapping[str, bytes] | None,
) -> SchemaType:
    """Infer the schema of the data, evaluating the types of any expressions."""
    if isinstance(data, (Expression, OneOfExpression)):
        try:
            return data.type(internal_data_model, functions, workflow_context)
        except InferenceError as exc:
            raise InferenceError(
                f"failed to evaluate type of expression {data} ({exc})"
            ) from exc
    if isinstance(data, OptionalExpression):
        return infer_type(data.expr, internal_data_model, functions, workflow_context)
    if isinstance(data, Mapping):
        return _map_type(data, internal_data_model, functions, workflow_context)
    if isinstance(data, (list, tuple)):
        return ListSchema(
            _item_type(list(data), internal_data_model, functions, workflow_context)
        )
    if isinstance(data, str):
        return StringSchema()
    if isinstance(data, bool):
        return BoolSchema()
    if isinstance(data, int):
        return IntSchema(_INT64_MIN, _INT64_MAX)
    if isinstance(data, float):
        return FloatSchema()
    if isinstance(data, re.Pattern):
        return PatternSchema()
    raise InferenceError(f"unsupported type for workflow outputs: {type(data).__name__}")


def _map_type(
    data: Mapping[Any, Any],
    internal_data_model: SchemaType | None,
    functions: Mapping[str, Any] | None,
    workflow_context: Mapping[str, bytes] | None,
) -> SchemaType:
    try:
        key_type = _item_type(list(data.keys()), internal_data_model, functions, workflow_context)
    except InferenceError as exc:
        raise InferenceError(f"failed to infer map key type ({exc})") from exc
    if key_type.type_id in (TypeID.STRING, TypeID.STRING_ENUM):
        return _object_type(data, internal_data_model, functions, workflow_context)
    if key_type.type_id not in (TypeID.INT, TypeID.INT_ENUM):
        raise InferenceError(f"unsupported type for map keys: {key_type.type_id.value}")
    found: SchemaType | None = None
    for value in data.values():
        try:
            value_type = infer_type(value, internal_data_model, functions, workflow_context)
        except InferenceError as exc:
            raise InferenceError(f"failed to infer type of {value!r} ({exc})") from exc
        if found is None:
            found = value_type
        elif found.type_id != value_type.type_id:
            raise InferenceError(
                f"type mismatch in map type (expected: {found.type_id.value}, "
                f"found: {value_type.type_id.value})"
            )
    if found is None:
        return MapSchema(key_type, StringSchema(None, 0), None, 0)
    return MapSchema(key_type, found)


def _object_type(
    data: Mapping[str, Any],
    internal_data_model: SchemaType | None,
    functions: Mapping[str, Any] | None,
    workflow_context: Mapping[str, bytes] | None,
) -> ObjectSchema:
    properties: dict[str, PropertySchema] = {}
    for key, value in data.items():
        try:
            property_type = infer_type(value, internal_data_model, functions, workflow_context)
        except InferenceError as exc:
            raise InferenceError(f"failed to infer property {key} type ({exc})") from exc
        properties[key] = PropertySchema(
            property_type, required=not isinstance(value, OptionalExpression)
        )
    return ObjectSchema(
        _generate_random_object_id("inferred_schema"), properties, id_unenforced=True
    )


def _item_type(
    values: list[Any],
    internal_data_model: SchemaType | None,
    functions: Mapping[str, Any] | None,
    workflow_context: Mapping[str, bytes] | None,
) -> SchemaType:
    found: SchemaType | None = None
    for index, value in enumerate(values):
        try:
            item_type = infer_type(value, internal_data_model, functions, workflow_context)
        except InferenceError as exc:
            raise InferenceError(f"failed to infer type for item {index} ({exc})") from exc
        if found is None:
            found = item_type
        elif found.type_id != item_type.type_id:
            raise InferenceError(
                f"mismatching types in list (expected: {found.type_id.value}, "
                f"found: {item_type.type_id.value})"
            )
    return found if found is not None else StringSchema()


def _generate_random_object_id(purpose: str) -> str:
    return purpose + "_" + "".join(_OBJECT_ID_RANDOM.choices(_CHARACTERS, k=32))