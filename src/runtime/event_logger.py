import json
from pathlib import Path

from src.utils.types import StepResult


def controller_mode(result: StepResult) -> str:
    if result.arrived:
        return "ARRIVED"
    if result.used_fallback:
        return "FALLBACK"
    return "TRACKING"


class EventLogger:
    def __init__(self, run_dir: Path):
        self.log_path = Path(run_dir) / "events.jsonl"
        self.last_mode = None
        self.log_path.touch(exist_ok=True)

    def log(self, result: StepResult) -> bool:
        """Append an event only when the controller mode changes. Returns True if written."""
        mode = controller_mode(result)
        if mode == self.last_mode:
            return False
        event = {
            "step": result.step_index,
            "mode": mode,
            "position": [round(result.state.position.x, 3), round(result.state.position.y, 3)],
            "heading_deg": round(result.state.heading, 3),
            "target": list(result.target.point.to_tuple()) if result.target else None,
            "candidates": len(result.candidates),
        }
        with open(self.log_path, "a") as f:
            f.write(json.dumps(event) + "\n")
        self.last_mode = mode
        return True
