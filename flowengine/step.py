"""Abstract definitions of workflow steps.

Step providers implement how a kind of step (for example a plugin) is run.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar


class ProviderNotFoundError(LookupError):
    """Raised when a step provider kind is not supported."""

    def __init__(self, kind: str, valid_kinds: Iterable[str]) -> None:
        self.kind = kind
        self.valid_kinds = list(valid_kinds)
        super().__init__(
            f"the following step provider is not supported: {kind} "
            f"(only the following providers are supported: {', '.join(self.valid_kinds)})"
        )


class RunningStepState(str, enum.Enum):
    """State of a running step."""

    STARTING = "starting"
    WAITING_FOR_INPUT = "waiting_for_input"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass(frozen=True)
class LifecycleStage:
    """One stage of a step lifecycle."""

    id: str
    waiting_name: str
    running_name: str
    finished_name: str
    input_fields: frozenset[str] = frozenset()
    next_stages: dict[str, Any] | None = None
    fatal: bool = False


@dataclass(frozen=True)
class LifecycleStageWithSchema(LifecycleStage):
    """A lifecycle stage together with its input and output schemas."""

    input_schema: dict[str, Any] = field(default_factory=dict)
    outputs: dict[str, Any] = field(default_factory=dict)


StageT = TypeVar("StageT", bound=LifecycleStage)


@dataclass(frozen=True)
class Lifecycle(Generic[StageT]):
    """The stages of a step and the stage it starts in."""

    initial_stage: str
    stages: tuple[StageT, ...] = ()