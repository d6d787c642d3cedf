# flowengine

Building blocks of a workflow engine, as a plain Python library with no
runtime dependencies:

- `flowengine.schema` – schema types (`StringSchema`, `IntSchema`,
  `FloatSchema`, `BoolSchema`, `AnySchema`, `PatternSchema`, `ListSchema`,
  `MapSchema`, `ObjectSchema`, `ScopeSchema`, `OneOfStringSchema`) and
  `StepOutputSchema`. Every type has `unserialize(data)`, which validates the
  data and returns the typed value, raising `SchemaError` on bad input.
- `flowengine.goformat` – number formatting and parsing with fixed rules:
  `format_float`, `parse_float`, `parse_int`, `parse_bool`.
- `flowengine.infer` – infers a schema from workflow data, including path
  expressions (`Expression`), one-of expressions (`OneOfExpression`) and
  optional expressions (`OptionalExpression`).
- `flowengine.config` – the engine configuration, loaded from plain data with
  defaults applied.
- `flowengine.step` – step lifecycle types, running-step states and
  `ProviderNotFoundError`.
- `flowengine.dummy` – a small example step provider that greets by name.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Schemas

```python
from flowengine.schema import ObjectSchema, PropertySchema, SchemaError, StringSchema

person = ObjectSchema("person", {
    "name": PropertySchema(StringSchema(min_length=1), required=True),
})
person.unserialize({"name": "Arca Lot"})   # {"name": "Arca Lot"}

try:
    person.unserialize({})
except SchemaError as err:
    print(err)                              # missing required property 'name' ...
```

## Number formatting and parsing

```python
from flowengine.goformat import format_float, parse_bool, parse_float, parse_int

format_float(5000.5, "f", -1)    # "5000.5"
format_float(123.0, "e", 1)      # "1.2e+02"
format_float(0.125, "x", -1)     # "0x1p-03"
parse_int("-00005")              # -5
parse_float("5E-5")              # 5e-05
parse_bool("T")                  # True
```

The format directive is one of `b`, `e`, `E`, `f`, `g`, `G`, `x`, `X`; a
negative precision gives the fewest digits that represent the value exactly.
Infinities format as `+Inf` and `-Inf`, NaN as `NaN`. The parsers raise
`ValueError` on invalid input or values out of range.

## Inferring schemas

```python
from flowengine.infer import Expression, infer_scope, infer_type
from flowengine.schema import ObjectSchema, PropertySchema, ScopeSchema, StringSchema

infer_type({"foo": "bar", "baz": 42}, None, None, None)   # an ObjectSchema

model = ScopeSchema(ObjectSchema("root", {
    "a": PropertySchema(StringSchema(), required=True),
}))
infer_type(Expression("$.a"), model, None, None)           # StringSchema()
```

`infer_scope` requires the data to describe an object, and `output_schema`
returns a given output schema or infers one, marking it as an error output when
the output ID is `"error"`. Failures raise `InferenceError`.

## Configuration

```python
from flowengine import config

cfg = config.default()
cfg.log.level                    # LogLevel.INFO
cfg.local_deployers              # {"image": {"deployer_name": "podman"}}

cfg = config.load({"log": {"level": "debug"}})
```

Invalid data raises `config.ConfigError`.

## The example step provider

```python
from flowengine import dummy

class Handler:
    def on_stage_change(self, step, previous_stage, output_id, output, stage, waiting):
        pass

    def on_step_complete(self, step, previous_stage, output_id, output):
        print(output["message"])                  # Hello Arca Lot!

provider = dummy.new()
provider.kind()                                    # "dummy"
runnable = provider.load_schema({}, {})
running = runnable.start({}, "run-1", Handler())
running.provide_stage_input("greet", {"name": "Arca Lot"})
```

The step runs in a background thread; `close()` stops it if it is still
waiting for input.

## What this package does not do

It does not parse or run workflow files, has no command-line program, does not
deploy or talk to plugins, and does not provide a set of functions for
expressions to call. Expressions are only resolved to their types against a
schema; they are not evaluated against data.