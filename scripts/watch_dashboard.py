#!/usr/bin/env python3
"""Run a headless dashboard session and print what the map would show.

Loads facilities from a URL or a local JSON file, runs the position
simulation for a while, and prints change events, facility statuses and
an optional search.

Usage
-----
::

    export AQUAROUTE_FACILITIES_URL="https://example.com/ports.json"
    python scripts/watch_dashboard.py --seconds 10 --search Manila

Options::

    --file PATH          Read facilities from a JSON file instead of a URL
    --seconds N          How long to keep the session active (default: 10)
    --search QUERY       Run a search after loading facilities
    --json               Print the final state as JSON
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from aquaroute import (  # noqa: E402
    CallableFacilitySource,
    Dashboard,
    DashboardConfig,
    EntityChangeEvent,
)


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _print_event(event: EntityChangeEvent) -> None:
    fields = ", ".join(sorted(event.changed_fields)) or "-"
    print(f"  [{event.observed_at:%H:%M:%S}] {event.collection}/{event.entity_id} {event.kind} ({fields})")


def _state(dashboard: Dashboard) -> dict[str, Any]:
    store = dashboard.store
    return {
        "current_hour": store.current_hour,
        "last_update": dashboard.simulator.last_update_label,
        "vessels": [v.model_dump(mode="json") for v in store.vessels()],
        "waypoints": [w.model_dump(mode="json") for w in store.waypoints()],
        "facilities": [
            {**f.model_dump(mode="json"), "display_status": f.display_status(store.current_hour)}
            for f in store.facilities()
        ],
        "selection": dashboard.selection.current.model_dump(mode="json") if dashboard.selection.current else None,
    }


async def main() -> None:
    parser = argparse.ArgumentParser(description="Run a headless aquaroute dashboard session.")
    parser.add_argument("--file", help="Read facility records from a JSON file")
    parser.add_argument("--seconds", type=float, default=10.0, help="Session duration in seconds")
    parser.add_argument("--search", help="Search query to run after loading")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = DashboardConfig.from_env()
    source = None
    if args.file:
        path = Path(args.file)
        source = CallableFacilitySource(lambda: json.loads(path.read_text(encoding="utf-8")), name=str(path))

    async with Dashboard(config, source=source) as dashboard:
        if not args.json_mode:
            dashboard.subscribe_changes(_print_event)
        dashboard.start()

        if args.file or config.facilities_url:
            report = await dashboard.refresh_facilities()
            if not args.json_mode:
                print(_section("FACILITIES"))
                print(f"  {report.summary}")
                for facility in dashboard.store.facilities():
                    print(f"  {facility.name}: {dashboard.facility_status(facility.id)} [{facility.hours_label}]")

        if args.search:
            result = dashboard.search(args.search)
            if not args.json_mode:
                print(_section(f"SEARCH {args.search!r}"))
                print(f"  {result.total_count} matches; focus: {result.focus.entity_id if result.focus else None}")

        if not args.json_mode:
            print(_section("LIVE"))
        await asyncio.sleep(args.seconds)
        dashboard.stop()

        if args.json_mode:
            print(json.dumps(_state(dashboard), indent=2, default=str, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
