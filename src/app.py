from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

try:
    import cv2
except ImportError:  # pragma: no cover
    cv2 = None

from rich.console import Console
from tqdm import tqdm

from src.control.pure_pursuit import PurePursuitController
from src.runtime.driver import SimulationDriver
from src.runtime.event_logger import EventLogger
from src.utils.config import get, load_yaml, merge
from src.utils.errors import PursuitError
from src.utils.logger import setup_logger


def make_run_dir(base_dir: str | Path) -> Path:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = Path(base_dir) / f"run_{ts}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pure pursuit path-following simulator")
    parser.add_argument("--config", default="configs/sim.yaml", help="Path to YAML config")
    parser.add_argument("--max-steps", type=int, default=None, help="Override runtime.max_steps")
    parser.add_argument("--output-dir", default=None, help="Override runtime.output_dir")
    parser.add_argument("--no-video", action="store_true", help="Skip sim.mp4 / snapshots")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    cfg: Dict[str, Any] = load_yaml(args.config)

    overrides: Dict[str, Any] = {"runtime": {}}
    if args.max_steps is not None:
        overrides["runtime"]["max_steps"] = args.max_steps
    if args.output_dir is not None:
        overrides["runtime"]["output_dir"] = args.output_dir
    if args.no_video:
        overrides["runtime"]["save_video"] = False
    cfg = merge(cfg, overrides)

    run_dir = make_run_dir(get(cfg, "runtime.output_dir", "results"))
    logger = setup_logger(log_dir=run_dir, level=get(cfg, "runtime.log_level", "INFO"))

    console = Console()
    console.print(f"[bold]Pure pursuit[/bold] run dir: {run_dir}")

    try:
        controller = PurePursuitController.from_config(cfg)
    except PursuitError as exc:
        logger.error("Invalid simulation setup: %s", exc)
        console.print(f"[bold red]Setup error:[/bold red] {exc}")
        return 2

    event_logger = EventLogger(run_dir)
    driver = SimulationDriver(
        controller,
        max_steps=int(get(cfg, "runtime.max_steps", 2000)),
        tick_interval_s=float(get(cfg, "runtime.tick_interval_s", 0.0)),
        on_step=event_logger.log,
    )

    save_video = bool(get(cfg, "runtime.save_video", True))
    save_metrics = bool(get(cfg, "runtime.save_metrics", True))

    renderer = None
    writer = None
    if save_video:
        if cv2 is None:
            raise ImportError("opencv-python is required to save video output")
        from src.visualization.renderer import SimRenderer

        renderer = SimRenderer(
            tile_size=float(get(cfg, "render.tile_size", 24)),
            tiles=int(get(cfg, "render.tiles", 6)),
            pixels_per_unit=float(get(cfg, "render.pixels_per_unit", 5)),
        )
        fourcc = cv2.VideoWriter_fourcc(*"mp4v")
        writer = cv2.VideoWriter(
            str(run_dir / "sim.mp4"), fourcc, float(get(cfg, "render.fps", 60)), (renderer.size, renderer.size)
        )
        if not writer.isOpened():
            raise RuntimeError("Could not open VideoWriter (mp4v). Try a different codec/container.")

    snapshot_every = int(get(cfg, "render.snapshot_every", 100))
    frame = None
    try:
        for result in tqdm(driver.iter_steps(), total=driver.max_steps, desc="Stepping"):
            if renderer is None:
                continue
            frame = renderer.render(controller.path_segments(), result.state, driver.trail, result.candidates)
            writer.write(frame)
            if snapshot_every > 0 and result.step_index % snapshot_every == 0:
                cv2.imwrite(str(run_dir / f"frame_{result.step_index:05d}.png"), frame)
    finally:
        if writer is not None:
            writer.release()
    if writer is not None:
        logger.info("Saved video: %s", run_dir / "sim.mp4")
    if frame is not None:
        cv2.imwrite(str(run_dir / "final.png"), frame)

    summary = driver.summary
    if save_metrics:
        metrics = {
            "project": cfg.get("project", {}),
            "config": {k: cfg.get(k, {}) for k in ("robot", "path", "controller")},
            "summary": summary.to_dict(),
            "steps": driver.metrics,
        }
        metrics_path = run_dir / "metrics.json"
        metrics_path.write_text(json.dumps(metrics, indent=2), encoding="utf-8")
        (run_dir / "trail.json").write_text(json.dumps([p.to_tuple() for p in driver.trail]), encoding="utf-8")
        logger.info("Saved metrics: %s", metrics_path)

    status = "[green]arrived[/green]" if summary.arrived else "[yellow]step limit reached[/yellow]"
    console.print(f"{status} after {summary.steps} steps, final position {summary.final_position}")
    logger.info("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
