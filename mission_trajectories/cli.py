"""
Command line access to the mission trajectory engine.

    mission-trajectories list
    mission-trajectories state voyager1 1990-02-14 --frame geocentric
    mission-trajectories export cassini cassini.json --samples 500
    mission-trajectories plot voyager1 voyager2 --output tour.png
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

import numpy as np

from mission_trajectories.config import make_engine_config
from mission_trajectories.context import ReferenceFrame, SimulationContext
from mission_trajectories.engine import TrajectoryEngine
from mission_trajectories.errors import ConfigurationError
from mission_trajectories.mission import DEFAULT_CATALOG_PATH, MissionCatalog
from mission_trajectories.timescales import from_j2000_days

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mission-trajectories",
        description="Compute and query historic probe trajectories.",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        default=DEFAULT_CATALOG_PATH,
        help="Mission catalog JSON file (default: the bundled historic missions).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List missions and their date spans.")

    state = sub.add_parser("state", help="Print a mission's position and direction at a date.")
    state.add_argument("mission", help="Mission id.")
    state.add_argument("date", help="ISO date or datetime (UTC).")
    state.add_argument("--frame", default="heliocentric", help="Reference frame (default: heliocentric).")

    export = sub.add_parser("export", help="Write a mission's dense trajectory to JSON.")
    export.add_argument("mission", help="Mission id.")
    export.add_argument("output", type=Path, help="Output JSON path.")
    export.add_argument("--frame", default="heliocentric", help="Reference frame (default: heliocentric).")
    export.add_argument("--samples", type=int, default=None, help="Spline sample count.")

    plot = sub.add_parser("plot", help="Plot trajectories in 3D.")
    plot.add_argument("missions", nargs="*", help="Mission ids (default: all).")
    plot.add_argument("--frame", default="heliocentric", help="Reference frame (default: heliocentric).")
    plot.add_argument("--output", type=Path, default=None, help="Save the figure instead of showing it.")
    return parser


def _engine(args, samples=None) -> TrajectoryEngine:
    catalog = MissionCatalog.load(args.catalog)
    return TrajectoryEngine(catalog, config=make_engine_config(sample_count=samples))


def _cmd_list(args) -> int:
    catalog = MissionCatalog.load(args.catalog)
    for mission in catalog:
        start = from_j2000_days(mission.start_time).date().isoformat()
        end = from_j2000_days(mission.end_time).date().isoformat()
        print(f"{mission.id:<18} {mission.display_name:<20} {start} .. {end}  ({len(mission.waypoints)} waypoints)")
    return 0


def _cmd_state(args) -> int:
    engine = _engine(args)
    if engine.catalog.get(args.mission) is None:
        print(f"Unknown mission '{args.mission}'", file=sys.stderr)
        return 1
    context = SimulationContext.create(args.date, args.frame)
    engine.initialize(context)
    state = engine.state(args.mission)
    if state is None:
        print(f"{args.mission} is not in flight at {args.date}")
        return 1
    position_au = state.position / engine.scale
    print(f"Mission:   {args.mission}")
    print(f"Frame:     {context.frame.value}")
    print(f"Position:  [{position_au[0]:.6f}, {position_au[1]:.6f}, {position_au[2]:.6f}] AU")
    print(f"Distance:  {np.linalg.norm(position_au):.6f} AU")
    print(f"Direction: [{state.direction[0]:.6f}, {state.direction[1]:.6f}, {state.direction[2]:.6f}]")
    print(f"Progress:  {engine.progress(args.mission):.1%}")
    return 0


def _cmd_export(args) -> int:
    engine = _engine(args, samples=args.samples)
    if engine.catalog.get(args.mission) is None:
        print(f"Unknown mission '{args.mission}'", file=sys.stderr)
        return 1
    context = SimulationContext.create(frame=args.frame)
    report = engine.initialize(context)
    trajectory = engine.trajectory(args.mission)
    if trajectory is None:
        print(f"No trajectory could be built for '{args.mission}'", file=sys.stderr)
        return 1

    payload = {
        "mission": args.mission,
        "frame": context.frame.value,
        "units": {"position": "AU", "time": "days since J2000"},
        "warnings": [str(w) for w in report.warnings if f"'{args.mission}'" in str(w)],
        "times": trajectory.times.tolist(),
        "positions": (trajectory.absolute / engine.scale).tolist(),
    }
    args.output.parent.mkdir(parents=True, exist_ok=True)
    with args.output.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
    print(f"Wrote {len(trajectory)} samples to {args.output}")
    return 0


def _cmd_plot(args) -> int:
    import matplotlib.pyplot as plt

    from mission_trajectories.plotting import plot_trajectories

    engine = _engine(args)
    unknown = [m for m in args.missions if engine.catalog.get(m) is None]
    if unknown:
        print(f"Unknown mission(s): {', '.join(unknown)}", file=sys.stderr)
        return 1
    engine.initialize(SimulationContext.create(frame=args.frame))
    ax = plot_trajectories(engine, args.missions, save_path=args.output, show=args.output is None)
    plt.close(ax.figure)
    return 0


_COMMANDS = {
    "list": _cmd_list,
    "state": _cmd_state,
    "export": _cmd_export,
    "plot": _cmd_plot,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if getattr(args, "frame", None) is not None:
        try:
            ReferenceFrame.parse(args.frame)
        except ValueError as exc:
            print(exc, file=sys.stderr)
            return 2
    try:
        return _COMMANDS[args.command](args)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
