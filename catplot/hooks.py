from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Protocol

if TYPE_CHECKING:
    from catplot.plot import Plot
    from catplot.series import Datapoints, Series

PROCESS_RAW_DATA = "process_raw_data"
PROCESS_DATAPOINTS = "process_datapoints"
HOOK_NAMES = (PROCESS_RAW_DATA, PROCESS_DATAPOINTS)


class PipelineStage(Protocol):
    def __call__(self, series: "Series", datapoints: "Datapoints") -> None:
        ...


@dataclass(frozen=True)
class Plugin:
    name: str
    version: str
    init: Callable[["Plot"], None]
    options: dict[str, Any] = field(default_factory=dict)


class HookRegistry:
    """Ordered extension points; stages run in registration order."""

    def __init__(self, names: tuple[str, ...] = HOOK_NAMES) -> None:
        self._stages: dict[str, list[PipelineStage]] = {name: [] for name in names}

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._stages)

    def register(self, name: str, stage: PipelineStage) -> None:
        self._stage_list(name).append(stage)

    def stages(self, name: str) -> tuple[PipelineStage, ...]:
        return tuple(self._stage_list(name))

    def run(self, name: str, series: "Series", datapoints: "Datapoints") -> None:
        for stage in self._stage_list(name):
            stage(series, datapoints)

    def _stage_list(self, name: str) -> list[PipelineStage]:
        try:
            return self._stages[name]
        except KeyError:
            raise KeyError(f"unknown hook: {name}") from None
