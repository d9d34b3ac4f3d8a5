"""Replay a parking scenario against the HTTP API.

Usage examples:

- Default (built-in presets):
    `python usecase_parking.py`

- Provide a JSON/YAML scenario:
    `python usecase_parking.py --config my_scenario.yaml`

- Preview without sending requests:
    `python usecase_parking.py --dry-run`

The config file may define `baseUrl`, `vehicles` and `timeline`.
Timeline keys are minutes from the start; each holds a list of actions
`{"type": "register" | "exit" | "pay", "registrationNumber": ...}`.
"""
from __future__ import annotations

import argparse
import json
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
import yaml
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

BASE_URL = "http://localhost:8000"
SESSION = requests.Session()
DRY_RUN = False
CONSOLE = Console()

# ---------------------------------------------------------------------------
# Vehicles arriving during the scenario.
VEHICLES: List[Dict[str, Any]] = [
    {"registrationNumber": "KA01AB1234", "ownerName": "Asha", "phoneNumber": "9800000001",
     "vehicleType": "car", "zone": "A", "slot": "A1"},
    {"registrationNumber": "KA02CD5678", "ownerName": "Ravi", "phoneNumber": "9800000002",
     "vehicleType": "motorcycle", "zone": "A", "slot": "A2"},
    {"registrationNumber": "MH12XY0001", "ownerName": "Meera", "phoneNumber": "9800000003",
     "vehicleType": "bus", "zone": "E", "slot": "E10"},
]

# Minute -> actions. Registrations refer to VEHICLES above.
TIMELINE: Dict[int, List[Dict[str, Any]]] = {
    0: [
        {"type": "register", "registrationNumber": "KA01AB1234"},
        {"type": "register", "registrationNumber": "KA02CD5678"},
    ],
    1: [
        {"type": "register", "registrationNumber": "MH12XY0001"},
    ],
    2: [
        {"type": "exit", "registrationNumber": "KA01AB1234"},
        {"type": "pay", "registrationNumber": "KA01AB1234"},
    ],
    3: [
        {"type": "exit", "registrationNumber": "KA02CD5678"},
        {"type": "exit", "registrationNumber": "MH12XY0001"},
        {"type": "pay", "registrationNumber": "MH12XY0001"},
    ],
}


def load_config(path: Optional[str]) -> None:
    """Override baseUrl, vehicles and timeline from a JSON or YAML file."""
    global BASE_URL, VEHICLES, TIMELINE
    if not path:
        return

    file = Path(path)
    if not file.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if file.suffix.lower() in (".yml", ".yaml"):
        content = yaml.safe_load(file.read_text(encoding="utf-8")) or {}
    else:
        content = json.loads(file.read_text(encoding="utf-8")) or {}

    if isinstance(content.get("baseUrl"), str):
        BASE_URL = content["baseUrl"].rstrip("/")
    if isinstance(content.get("vehicles"), list):
        VEHICLES = content["vehicles"]
    if isinstance(content.get("timeline"), dict):
        timeline: Dict[int, List[Dict[str, Any]]] = {}
        for key, actions in content["timeline"].items():
            try:
                minute = int(key)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Timeline minute keys must be integers: got {key}") from exc
            if not isinstance(actions, list):
                raise ValueError(f"Timeline minute {minute} must be a list of actions")
            timeline[minute] = actions
        TIMELINE = timeline


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a parking lot scenario over HTTP")
    parser.add_argument("--config", type=str, default=None, help="Path to JSON/YAML scenario")
    parser.add_argument("--dry-run", action="store_true", help="Print requests without sending")
    parser.add_argument("--base-url", type=str, default=None, help="Override backend base URL")
    parser.add_argument(
        "--minute-seconds",
        type=float,
        default=0.0,
        help="Real seconds to wait per scenario minute (60 replays in real time)",
    )
    return parser.parse_args()


def main() -> None:
    global BASE_URL, DRY_RUN
    args = parse_args()
    load_config(args.config)
    DRY_RUN = bool(args.dry_run)
    if args.base_url:
        BASE_URL = args.base_url.rstrip("/")

    initialize_parking()
    simulate_timeline(args.minute_seconds)
    show_history()


# --- HTTP helpers ---------------------------------------------------------

def _request(method: str, path: str, **kwargs) -> Optional[requests.Response]:
    if DRY_RUN:
        detail = kwargs.get("json") or kwargs.get("params") or ""
        CONSOLE.print(Panel.fit(f"[DRY] {method} {BASE_URL}{path}\n{detail}", title="Dry Run", border_style="magenta"))
        return None
    return SESSION.request(method, f"{BASE_URL}{path}", timeout=5, **kwargs)


def _report(label: str, response: Optional[requests.Response]) -> None:
    if response is None:
        return
    body = response.json()
    text = body.get("message") or body.get("detail") or body
    if response.ok:
        CONSOLE.print(f"[green]✔ {label}[/] {text}")
    else:
        CONSOLE.print(f"[yellow]⚠ {label} ({response.status_code})[/] {text}")


def initialize_parking() -> None:
    _report("initialize", _request("POST", "/api/initialize-parking"))


def send_action(action: Dict[str, Any]) -> None:
    registration = action["registrationNumber"]
    kind = action["type"]
    if kind == "register":
        vehicle = next((v for v in VEHICLES if v["registrationNumber"] == registration), None)
        if vehicle is None:
            CONSOLE.print(f"[red]✖ No vehicle preset for {registration}[/]")
            return
        response = _request("POST", "/api/register", json=vehicle)
    elif kind == "exit":
        response = _request("POST", "/api/exit", params={"registrationNumber": registration})
    elif kind == "pay":
        response = _request("POST", "/api/pay", params={"registrationNumber": registration})
    else:
        CONSOLE.print(f"[red]✖ Unknown action type {kind}[/]")
        return
    _report(f"{kind} {registration}", response)


def simulate_timeline(minute_seconds: float) -> None:
    previous = None
    for minute in sorted(TIMELINE):
        if previous is not None and minute_seconds > 0 and not DRY_RUN:
            time.sleep((minute - previous) * minute_seconds)
        previous = minute
        CONSOLE.rule(f"Minute {minute}")
        for action in TIMELINE[minute]:
            try:
                send_action(action)
            except requests.RequestException as exc:
                CONSOLE.print(Panel(f"[red]{exc}[/]", title="Request failed", border_style="red"))


def show_history() -> None:
    response = _request("GET", "/api/history")
    if response is None or not response.ok:
        return
    table = Table(title="Billing History", box=box.SIMPLE)
    for column in ("Registration", "Type", "Slot", "Minutes", "Amount", "Status"):
        table.add_column(column)
    for row in response.json():
        table.add_row(
            row["registrationNumber"],
            row["vehicleType"],
            row["parkingSlot"],
            str(row["totalDuration"]),
            f"{row['amount']:.2f}",
            row["status"],
        )
    CONSOLE.print(table)


if __name__ == "__main__":
    main()
