"""Float Planner CLI — plan float trips from a river data snapshot.

Usage:
    float-planner --data snapshot.json plan current akers pulltite --vessel canoe
    float-planner --data snapshot.json gauges --river current --format json
    float-planner --data snapshot.json snap current 37.37 -91.55

Options:
    --data PATH         JSON snapshot of rivers, access points and gauges
    --config PATH       JSON config overriding planner defaults
    --verbose           Show detailed logging
    --quiet             Only show warnings and errors
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone

from float_planner.config import load_config
from float_planner.errors import FloatPlanError
from float_planner.mile_index import MileIndexCache, snap_coordinate
from float_planner.models import Coordinate
from float_planner.planner import PlanAssembler, list_conditions
from float_planner.report import render_conditions, render_plan
from float_planner.store import SnapshotStore, parse_timestamp

logger = logging.getLogger("float_planner")

EXIT_PLAN_ERROR = 2


def as_of_arg(value: str) -> datetime:
    """argparse type for --as-of: ISO-8601 timestamp or 'now'."""
    if value == "now":
        return datetime.now(timezone.utc)
    try:
        return parse_timestamp(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 timestamp: {value!r}") from None


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="float-planner",
        description="Plan river float trips: distance, float time and "
                    "current flow condition between two access points.",
    )
    parser.add_argument("--data", required=True, help="JSON snapshot file")
    parser.add_argument("--config", default=None, help="JSON config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only show warnings")

    sub = parser.add_subparsers(dest="command", required=True)

    plan = sub.add_parser("plan", help="Plan a float between two access points")
    plan.add_argument("river", help="River id or slug")
    plan.add_argument("put_in", help="Put-in access point id")
    plan.add_argument("take_out", help="Take-out access point id")
    plan.add_argument("--vessel", default=None, help="Vessel type id or slug")
    plan.add_argument("--as-of", type=as_of_arg, default=None, help="Request time (ISO-8601); 'now' for current time")
    plan.add_argument("--format", choices=["markdown", "json"], default="markdown")

    gauges = sub.add_parser("gauges", help="List gauge conditions by severity")
    gauges.add_argument("--river", action="append", default=None, help="River id (repeatable)")
    gauges.add_argument("--as-of", type=as_of_arg, default=None, help="Request time (ISO-8601); 'now' for current time")
    gauges.add_argument("--format", choices=["markdown", "json"], default="markdown")

    snap = sub.add_parser("snap", help="Snap a coordinate onto a river")
    snap.add_argument("river", help="River id or slug")
    snap.add_argument("lat", type=float)
    snap.add_argument("lon", type=float)
    snap.add_argument("--tolerance", type=float, default=None, help="Review threshold in miles")

    return parser.parse_args(argv)


def setup_logging(verbose: bool, quiet: bool):
    """Configure logging based on verbosity flags."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def cmd_plan(args, store, config) -> str:
    plan = PlanAssembler(store, config).plan(
        args.river, args.put_in, args.take_out,
        vessel_id=args.vessel, as_of=args.as_of,
    )
    if args.format == "json":
        return json.dumps({"plan": plan.to_dict()}, indent=2)
    return render_plan(plan)


def cmd_gauges(args, store, config) -> str:
    rows = list_conditions(store, args.river, as_of=args.as_of, config=config)
    if args.format == "json":
        return json.dumps({"gauges": [r.to_dict() for r in rows]}, indent=2)
    return render_conditions(rows)


def cmd_snap(args, store, config) -> str:
    river = store.get_river(args.river)
    index = MileIndexCache().get(river)
    tolerance = args.tolerance if args.tolerance is not None else config.snap_tolerance_miles
    result = snap_coordinate(index, Coordinate(args.lat, args.lon), tolerance)
    return json.dumps({
        "riverId": river.id,
        "riverMile": result.mile,
        "snapped": result.snapped.to_dict(),
        "offsetMiles": round(result.offset_miles, 3),
        "needsReview": result.needs_review,
    }, indent=2)


COMMANDS = {
    "plan": cmd_plan,
    "gauges": cmd_gauges,
    "snap": cmd_snap,
}


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose, args.quiet)
    config = load_config(args.config)
    store = SnapshotStore.from_json(args.data)

    try:
        output = COMMANDS[args.command](args, store, config)
    except FloatPlanError as e:
        logger.debug("Request failed: %s %s", e.code, e.context)
        print(f"ERROR [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_PLAN_ERROR

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
