"""River float trip planning library.

Turns a river, a put-in and a take-out into a float plan: paddling
distance along the river, direction of travel, estimated float time for
a vessel type, and the current flow condition from the governing gauge.

Usage::

    from float_planner.store import SnapshotStore
    from float_planner.planner import PlanAssembler

    store = SnapshotStore.from_json("snapshot.json")
    plan = PlanAssembler(store).plan("current", "akers", "pulltite")
    print(plan.float_time.formatted)   # '4h 48m'
"""

__version__ = "0.1.0"
