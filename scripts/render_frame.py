"""
Quick renderer check (no simulation loop).
Places the robot at its configured start on the default square path and writes an image.
"""

from pathlib import Path

from src.control.pure_pursuit import PurePursuitController
from src.utils.config import load_yaml
from src.visualization.renderer import SimRenderer


def main():
    cfg = load_yaml("configs/sim.yaml")
    controller = PurePursuitController.from_config(cfg)
    state = controller.state
    hits = controller.path.circle_intersections(state.position, state.lookahead)

    renderer = SimRenderer()
    img = renderer.render(controller.path_segments(), state, intersections=hits)

    out_path = Path("results") / "render_frame.png"
    out_path.parent.mkdir(parents=True, exist_ok=True)

    import cv2  # local import to keep dependency localized

    cv2.imwrite(str(out_path), img)
    print(f"Frame written to {out_path} ({len(hits)} intersections)")


if __name__ == "__main__":
    main()
