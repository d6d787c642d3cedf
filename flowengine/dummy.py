"""A step provider that just says hello, intended for testing."""

from __future__ import annotations

import enum
import threading
from collections.abc import Mapping
from typing import Any, Protocol

from flowengine.schema import (
    ObjectSchema,
    PropertySchema,
    ScopeSchema,
    StepOutputSchema,
    StringSchema,
)
from flowengine.step import (
    Lifecycle,
    LifecycleStage,
    LifecycleStageWithSchema,
    RunningStepState,
)


class StageID(str, enum.Enum):
    """Valid stage IDs of the dummy step."""

    GREET = "greet"


class _StageChangeHandler(Protocol):
    def on_stage_change(
        self,
        step: RunningStep,
        previous_stage: str | None,
        previous_stage_output_id: str | None,
        previous_stage_output: Any,
        stage: str,
        waiting_for_input: bool,
    ) -> None: ...

    def on_step_complete(
        self,
        step: RunningStep,
        previous_stage: str,
        previous_stage_output_id: str | None,
        previous_stage_output: Any,
    ) -> None: ...


_GREETING_STAGE = LifecycleStage(
    id=StageID.GREET.value,
    waiting_name="waiting for greeting",
    running_name="greeting",
    finished_name="greeted",
    input_fields=frozenset({"name", "nickname"}),
    next_stages=None,
    fatal=False,
)

_INPUT_SCHEMA: dict[str, PropertySchema] = {
    "name": PropertySchema(StringSchema(min_length=1), {"name": "Name"}, required=True),
    "nickname": PropertySchema(StringSchema(min_length=1), {"name": "Name2"}, required=False),
}


def _outputs() -> dict[str, StepOutputSchema]:
    return {
        "success": StepOutputSchema(
            ScopeSchema(
                ObjectSchema(
                    "greeting",
                    {"message": PropertySchema(StringSchema(), {"name": "Message"}, required=True)},
                )
            ),
            {"name": "Success", "description": "A nice greeting!"},
            error=False,
        ),
        "error": StepOutputSchema(
            ScopeSchema(
                ObjectSchema(
                    "error",
                    {"reason": PropertySchema(StringSchema(), {"name": "Message"}, required=True)},
                )
            ),
            None,
            error=True,
        ),
    }


class DummyProvider:
    """Provider of the dummy step kind."""

    def kind(self) -> str:
        return "dummy"

    def provider_schema(self) -> dict[str, PropertySchema]:
        return {}

    def run_properties(self) -> set[str]:
        return set()

    def lifecycle(self) -> Lifecycle[LifecycleStage]:
        return Lifecycle(StageID.GREET.value, (_GREETING_STAGE,))

    def load_schema(
        self, inputs: Mapping[str, Any], workflow_context: Mapping[str, bytes]
    ) -> RunnableStep:
        return RunnableStep()


class RunnableStep:
    """A dummy step that is ready to be started."""

    def run_schema(self) -> dict[str, PropertySchema]:
        return {}

    def lifecycle(self, input: Mapping[str, Any]) -> Lifecycle[LifecycleStageWithSchema]:
        stage = LifecycleStageWithSchema(
            **vars(_GREETING_STAGE),
            input_schema=dict(_INPUT_SCHEMA),
            outputs=_outputs(),
        )
        return Lifecycle(StageID.GREET.value, (stage,))

    def start(
        self,
        input: Mapping[str, Any],
        run_id: str,
        stage_change_handler: _StageChangeHandler,
    ) -> RunningStep:
        step = RunningStep(run_id, stage_change_handler)
        step._thread.start()
        return step


class RunningStep:
    """A running dummy step that greets once its name is provided."""

    def __init__(self, run_id: str, stage_change_handler: _StageChangeHandler) -> None:
        self.run_id = run_id
        self._handler = stage_change_handler
        self._cond = threading.Condition()
        self._state = RunningStepState.STARTING
        self._input_available = False
        self._name: str | None = None
        self._closed = False
        self._thread = threading.Thread(target=self._run, name=f"dummy-{run_id}", daemon=True)

    def state(self) -> RunningStepState:
        with self._cond:
            return self._state

    def provide_stage_input(self, stage: str, input: Mapping[str, Any]) -> None:
        """Provide the input of a stage; only the greet stage takes input."""
        with self._cond:
            if stage != StageID.GREET.value:
                raise ValueError(f"bug: invalid stage: {stage}")
            if self._input_available:
                raise RuntimeError("bug: input provided more than once")
            input_data = ObjectSchema("input", _INPUT_SCHEMA).unserialize(input)
            self._input_available = True
            self._state = RunningStepState.RUNNING
            self._name = input_data["name"]
            self._cond.notify_all()

    def current_stage(self) -> str:
        with self._cond:
            return StageID.GREET.value

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def force_close(self) -> None:
        self.close()

    def _run(self) -> None:
        with self._cond:
            waiting_for_input = not self._input_available
            self._state = (
                RunningStepState.WAITING_FOR_INPUT
                if waiting_for_input
                else RunningStepState.RUNNING
            )
        self._handler.on_stage_change(
            self, None, None, None, StageID.GREET.value, waiting_for_input
        )
        with self._cond:
            self._cond.wait_for(lambda: self._name is not None or self._closed)
            if self._closed:
                return
            name = self._name
            self._state = RunningStepState.FINISHED
        self._handler.on_step_complete(
            self, StageID.GREET.value, "success", {"message": f"Hello {name}!"}
        )


def new() -> DummyProvider:
    """Create a dummy step provider."""
    return DummyProvider()