from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

from src.control.base_controller import BaseController
from src.geometry.point import Point
from src.utils.logger import get_logger
from src.utils.timing import StageTimer, TickRateMeter
from src.utils.types import StepResult


@dataclass
class RunSummary:
    steps: int = 0
    arrived: bool = False
    fallback_steps: int = 0
    max_abs_heading_delta: float = 0.0
    max_manhattan_move: float = 0.0
    final_position: Optional[Point] = None
    final_heading: float = 0.0
    step_ms: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "steps": self.steps,
            "arrived": self.arrived,
            "fallback_steps": self.fallback_steps,
            "max_abs_heading_delta": self.max_abs_heading_delta,
            "max_manhattan_move": self.max_manhattan_move,
            "final_position": list(self.final_position.to_tuple()) if self.final_position else None,
            "final_heading": self.final_heading,
            "avg_step_ms": (sum(self.step_ms) / len(self.step_ms)) if self.step_ms else None,
        }


class SimulationDriver:
    """
    Tick driver: calls controller.step() once per tick until arrival or max_steps.

    The controller only reports the current position; the trail of visited
    positions is accumulated here.
    """

    def __init__(
        self,
        controller: BaseController,
        max_steps: int = 2000,
        tick_interval_s: float = 0.0,
        on_step: Optional[Callable[[StepResult], None]] = None,
    ):
        self.controller = controller
        self.max_steps = int(max_steps)
        self.tick_interval_s = float(tick_interval_s)
        self.on_step = on_step
        self.logger = get_logger(__name__)
        self.rate_meter = TickRateMeter()
        self.trail: List[Point] = []
        self.summary = RunSummary()
        self.metrics: List[Dict[str, Any]] = []

    def iter_steps(self) -> Iterator[StepResult]:
        self.logger.info("Simulation started (max_steps=%d)", self.max_steps)
        while not self.controller.arrived and self.summary.steps < self.max_steps:
            timer = StageTimer()
            with timer.stage("step"):
                result = self.controller.step()

            self._record(result, timer)
            if self.on_step is not None:
                self.on_step(result)
            yield result

            if self.tick_interval_s > 0 and not result.arrived:
                time.sleep(self.tick_interval_s)

        if not self.controller.arrived:
            self.logger.warning("Step limit reached (%d) before arrival", self.max_steps)
        self.logger.info("Simulation stopped after %d steps (arrived=%s)", self.summary.steps, self.controller.arrived)

    def run(self) -> RunSummary:
        for _ in self.iter_steps():
            pass
        return self.summary

    def _record(self, result: StepResult, timer: StageTimer) -> None:
        tick_rate = self.rate_meter.tick()
        position = result.state.position
        self.trail.append(position)

        manhattan = abs(result.move.x) + abs(result.move.y)
        s = self.summary
        s.steps = result.step_index
        s.arrived = result.arrived
        s.fallback_steps += int(result.used_fallback)
        s.max_abs_heading_delta = max(s.max_abs_heading_delta, abs(result.heading_delta))
        s.max_manhattan_move = max(s.max_manhattan_move, manhattan)
        s.final_position = position
        s.final_heading = result.state.heading
        s.step_ms.append(timer.stages_ms["step"])

        self.metrics.append(
            {
                "step": result.step_index,
                "tick_rate": tick_rate,
                "stages_ms": dict(timer.stages_ms),
                "position": [position.x, position.y],
                "heading_deg": result.state.heading,
                "heading_delta": result.heading_delta,
                "target": list(result.target.point.to_tuple()) if result.target else None,
                "bearing_deg": result.target.bearing if result.target else None,
                "candidate_count": len(result.candidates),
                "fallback": result.used_fallback,
                "arrived": result.arrived,
            }
        )
