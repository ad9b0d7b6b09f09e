#!/usr/bin/env python3
"""Drive a running site-plan backend through a typical user session.

Usage:
    # Start the backend first:
    uvicorn siteplan.web.app:create_app --factory --port 8080

    # Run the walkthrough:
    python3 scripts/walkthrough.py

    # Against a different host:
    python3 scripts/walkthrough.py --base-url http://localhost:9000

Steps: pan and zoom the map, flip north-up, search for a parcel, select
it, turn the status view on and wait for the sweep to finish, then reset
the view.
"""

from __future__ import annotations

import argparse
import sys
import time

import httpx

DEFAULT_BASE_URL = "http://localhost:8080"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def api(
    client: httpx.Client,
    method: str,
    path: str,
    *,
    json: dict | None = None,
    params: dict | None = None,
) -> dict | list | None:
    """Make an API call and return parsed JSON, or None on failure."""
    resp = client.request(method, path, json=json, params=params)
    if resp.status_code >= 400:
        print(f"  FAILED {method} {path} -> {resp.status_code}: {resp.text[:200]}")
        return None
    return resp.json()


def section(title: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}")


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def pan_and_zoom(client: httpx.Client) -> None:
    section("Pan & Zoom")
    api(client, "POST", "/api/view/drag/begin", json={"x": 400, "y": 300})
    api(client, "POST", "/api/view/drag/move", json={"x": 460, "y": 340})
    view = api(client, "POST", "/api/view/drag/end")
    if view:
        print(f"  Pan:   ({view['pan']['x']:.0f}, {view['pan']['y']:.0f})")
    for _ in range(3):
        view = api(client, "POST", "/api/view/wheel", json={"delta": -100})
    if view:
        print(f"  Zoom:  {view['zoom']:.3f}")
    view = api(client, "POST", "/api/view/north-up")
    if view:
        print(f"  Mode:  {view['rotation_mode']}")
        print(f"  CSS:   {view['transform']['inner_css']}")


def search_and_select(client: httpx.Client, text: str) -> None:
    section(f"Search {text!r}")
    result = api(client, "POST", "/api/search", json={"text": text})
    if not result or not result["matches"]:
        print("  No matching parcels")
        return
    print(f"  Matches: {result['matches']}")
    first = result["matches"][0]
    selection = api(client, "POST", f"/api/selection/{first}")
    if selection and selection["parcel"]:
        parcel = selection["parcel"]
        print(
            f"  Selected #{parcel['number']}: {parcel['status']}, "
            f"{parcel['area_sq_m']} m², facing {parcel['facing']}"
        )


def reveal_status(client: httpx.Client, timeout: float) -> None:
    section("Status View")
    api(client, "POST", "/api/status-view", json={"on": True})
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        state = api(client, "GET", "/api/status-view")
        if state and not state["running"]:
            break
        time.sleep(0.1)
    state = api(client, "GET", "/api/status-view")
    if state:
        counts: dict[str, int] = {}
        for status in state["displayed"].values():
            counts[status] = counts.get(status, 0) + 1
        for status, count in sorted(counts.items()):
            print(f"  {status:<10} {count}")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Walk a running site-plan backend through a user session"
    )
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"Backend base URL (default: {DEFAULT_BASE_URL})",
    )
    parser.add_argument("--search", default="10", help="Search text (default: 10)")
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Seconds to wait for the status sweep (default: 5)",
    )
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        try:
            health = api(client, "GET", "/api/health")
        except httpx.ConnectError:
            health = None
        if not health:
            print(f"\nERROR: Cannot reach {args.base_url}. Start the backend first:")
            print("  uvicorn siteplan.web.app:create_app --factory --port 8080")
            sys.exit(1)

        print(f"Backend: {health['status']} with {health['parcels']} parcels")

        pan_and_zoom(client)
        search_and_select(client, args.search)
        reveal_status(client, args.timeout)

        section("Reset")
        view = api(client, "POST", "/api/view/reset")
        if view:
            print(f"  Zoom {view['zoom']}, pan ({view['pan']['x']}, {view['pan']['y']}), {view['rotation_mode']}")


if __name__ == "__main__":
    main()
