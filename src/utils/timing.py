from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator


@dataclass
class StageTimer:
    """Wall time per named stage of one simulation tick."""

    stages_ms: Dict[str, float] = field(default_factory=dict)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.stages_ms[name] = (time.perf_counter() - start) * 1000.0


@dataclass
class TickRateMeter:
    """Exponential moving average of ticks per second."""

    smoothing: float = 0.9
    rate: float = 0.0
    _last_ts: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        inst = 1.0 / max(now - self._last_ts, 1e-9)
        self.rate = inst if self.rate <= 0 else self.smoothing * self.rate + (1 - self.smoothing) * inst
        self._last_ts = now
        return self.rate
