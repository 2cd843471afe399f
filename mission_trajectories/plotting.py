from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from mission_trajectories.context import ReferenceFrame
from mission_trajectories.engine import TrajectoryEngine


def _set_equal_aspect(ax, points: np.ndarray, padding: float = 0.1) -> None:
    if points.size == 0:
        return
    mins = points.min(axis=0)
    maxs = points.max(axis=0)
    centers = 0.5 * (mins + maxs)
    span = (maxs - mins).max()
    radius = 0.5 * span if span > 0 else 1.0
    radius *= 1.0 + max(0.0, padding)
    ax.set_xlim(centers[0] - radius, centers[0] + radius)
    ax.set_ylim(centers[1] - radius, centers[1] + radius)
    ax.set_zlim(centers[2] - radius, centers[2] + radius)


def plot_trajectories(engine: TrajectoryEngine, mission_ids: Optional[Sequence[str]] = None, ax=None,
                      *, orbits: bool = True, save_path: Optional[Path] = None, show: bool = False):
    """
    Draw the absolute trajectories (AU) of the given missions on 3D axes.

    With orbits set, the custom orbits the missions are pinned to are drawn
    as dotted lines. Orbit lines are heliocentric, so they are only drawn in
    the heliocentric frame.

    Returns the axes drawn on.
    """
    ids = engine.store.ids() if not mission_ids else list(mission_ids)
    if ax is None:
        fig = plt.figure(figsize=(8, 6))
        ax = fig.add_subplot(111, projection="3d")
    fig = ax.figure
    ax.grid(True, linestyle="--", alpha=0.3)

    drawn = [np.zeros((1, 3))]
    for mission_id in ids:
        trajectory = engine.trajectory(mission_id)
        if trajectory is None or len(trajectory) == 0:
            continue
        mission = engine.catalog.get(mission_id)
        positions = trajectory.absolute / engine.scale
        ax.plot(positions[:, 0], positions[:, 1], positions[:, 2],
                color=mission.color or "gray", linewidth=1.0, label=mission.display_name)
        ax.scatter(*positions[0], color="green", s=12)
        ax.scatter(*positions[-1], color="red", s=12)
        drawn.append(positions)

    heliocentric = engine.context is None or engine.context.frame is ReferenceFrame.HELIOCENTRIC
    if orbits and heliocentric:
        names = set()
        for mission_id in ids:
            mission = engine.catalog.get(mission_id)
            if mission is not None:
                names |= mission.orbit_names()
        for name in sorted(names):
            line = engine.orbits[name].orbit_line()
            ax.plot(line[:, 0], line[:, 1], line[:, 2], color="gray", linestyle=":", linewidth=0.6)
            drawn.append(line)

    ax.scatter([0.0], [0.0], [0.0], color="#e0c200", s=80, depthshade=False, edgecolors="k")
    frame = engine.context.frame.value if engine.context is not None else ""
    ax.set_title(f"Mission trajectories ({frame})" if frame else "Mission trajectories")
    ax.set_xlabel("x (AU)")
    ax.set_ylabel("y (AU)")
    ax.set_zlabel("z (AU)")
    if len(drawn) > 1:
        ax.legend(loc="upper left", fontsize=7)
    _set_equal_aspect(ax, np.vstack(drawn))

    if save_path is not None:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, bbox_inches="tight")
        print(f"Saved plot to {save_path}")
    if show:
        plt.show()
    return ax
