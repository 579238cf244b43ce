"""Campus Wayfinder CLI.

Usage:
    python -m wayfinder [--settings FILE] [--verbose] <command> [args]

Every command prints JSON to stdout: {"ok": true, ...} on success and
{"ok": false, "error": ...} (exit code 1) when it cannot run.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from wayfinder import __version__
from wayfinder.generators.campus import generate_sample_campus
from wayfinder.graph.builder import build_graph
from wayfinder.graph.index import LinearScanIndex
from wayfinder.models.geometry import LatLng
from wayfinder.models.spatial import Campus, LandmarkKind
from wayfinder.routing.astar import AStarPathfinder, PathfindingResult, SearchOptions
from wayfinder.routing.queries import nearest_landmark
from wayfinder.settings import NavigationSettings
from wayfinder.validators.network import validate as validate_network

app = typer.Typer(
    name="wayfinder",
    help="Campus Wayfinder — navigation graph, routing and network validation.",
    no_args_is_help=True,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _output(data: dict) -> None:
    """Print JSON output to stdout."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _fail(message: str) -> None:
    _output({"ok": False, "error": message})
    raise typer.Exit(1)


def _load_campus(path: str) -> Campus:
    """Load a campus JSON file."""
    campus_path = Path(path)
    if not campus_path.exists():
        _fail(f"Campus file not found: {campus_path}")
    try:
        return Campus.load(campus_path)
    except ValidationError as e:
        _fail(f"Invalid campus file {campus_path}: {e.error_count()} error(s): {e.errors()[0]['msg']}")


def _parse_latlng(value: str) -> LatLng:
    """Parse 'LAT,LON'."""
    try:
        lat, lon = (float(part) for part in value.split(","))
        return LatLng(lat=lat, lon=lon)
    except (ValueError, ValidationError):
        _fail(f"Expected a coordinate as LAT,LON, got '{value}'")


def _point(p: LatLng) -> list[float]:
    return [p.lat, p.lon]


def _route_json(result: PathfindingResult, settings: NavigationSettings) -> dict:
    if not result.success:
        return {
            "success": False,
            "failure": result.failure.value if result.failure else None,
            "message": result.message,
            "expanded": result.expanded,
        }
    return {
        "success": True,
        "nodes": result.node_ids,
        "distance_m": round(result.total_distance, 2),
        "cost": round(result.cost, 2),
        "start_offset_m": round(result.start_offset_m, 2),
        "goal_offset_m": round(result.goal_offset_m, 2),
        "duration_s": round(result.estimated_duration(settings.walking_speed_mps).total_seconds()),
        "expanded": result.expanded,
        "floor_transitions": [
            {
                "from_floor": t.from_floor_id,
                "to_floor": t.to_floor_id,
                "via": t.transition.value,
            }
            for t in result.floor_transitions
        ],
        "instructions": [
            {"maneuver": step.maneuver.value, "text": step.text, "distance_m": round(step.distance_m, 1)}
            for step in result.instructions
        ],
        "polyline": [_point(p) for p in result.polyline],
    }


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------

@app.callback()
def main(
    ctx: typer.Context,
    settings: Optional[str] = typer.Option(None, "--settings", help="Navigation settings JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
):
    """Campus Wayfinder."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = NavigationSettings()
    if settings:
        path = Path(settings)
        if not path.exists():
            _fail(f"Settings file not found: {path}")
        try:
            ctx.obj = NavigationSettings.load(path)
        except ValidationError as e:
            _fail(f"Invalid settings file {path}: {e.errors()[0]['msg']}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def version():
    """Print the package version."""
    _output({"ok": True, "version": __version__})


@app.command()
def sample(output: str = typer.Argument(..., help="Where to write the campus JSON")):
    """Write the sample campus to a file."""
    campus = generate_sample_campus()
    path = campus.save(output)
    _output({
        "ok": True,
        "path": str(path),
        "buildings": len(campus.buildings),
        "intersections": len(campus.outdoor_intersections),
    })


@app.command()
def stats(ctx: typer.Context, campus_file: str = typer.Argument(..., help="Campus JSON file")):
    """Build the graph and print its statistics."""
    campus = _load_campus(campus_file)
    graph = build_graph(campus, ctx.obj)
    _output({
        "ok": True,
        "campus": campus.name,
        "statistics": graph.statistics(),
        "degraded": [
            {"id": d.element_id, "reason": d.reason} for d in graph.degraded
        ],
    })


@app.command()
def validate(ctx: typer.Context, campus_file: str = typer.Argument(..., help="Campus JSON file")):
    """Validate the campus network. Issues do not change the exit code."""
    campus = _load_campus(campus_file)
    settings: NavigationSettings = ctx.obj
    result = validate_network(build_graph(campus, settings), campus, settings)
    _output({"ok": True, "campus": campus.name, "validation": result.to_dict()})


@app.command()
def route(
    ctx: typer.Context,
    campus_file: str = typer.Argument(..., help="Campus JSON file"),
    start: str = typer.Option(..., "--from", help="Start as LAT,LON"),
    goal: str = typer.Option(..., "--to", help="Destination as LAT,LON"),
    from_floor: Optional[str] = typer.Option(None, "--from-floor", help="Floor id at the start"),
    to_floor: Optional[str] = typer.Option(None, "--to-floor", help="Floor id at the destination"),
    avoid_elevator_preference: bool = typer.Option(
        False, "--avoid-elevator-preference", help="Weigh stairs and elevators equally"
    ),
):
    """Find a walking route between two coordinates."""
    campus = _load_campus(campus_file)
    settings: NavigationSettings = ctx.obj
    options = SearchOptions.from_settings(
        settings,
        prefer_elevator=not avoid_elevator_preference,
        start_floor_id=from_floor,
        goal_floor_id=to_floor,
    )
    pathfinder = AStarPathfinder(build_graph(campus, settings))
    result = pathfinder.find_path(_parse_latlng(start), _parse_latlng(goal), options)
    _output({"ok": True, "route": _route_json(result, settings)})


@app.command()
def nearest(
    ctx: typer.Context,
    campus_file: str = typer.Argument(..., help="Campus JSON file"),
    position: str = typer.Argument(..., help="Position as LAT,LON"),
    floor: Optional[str] = typer.Option(None, "--floor", help="Floor id of the position"),
    kind: Optional[str] = typer.Option(None, "--kind", help="Landmark kind to look for"),
):
    """Nearest graph node, or nearest landmark of a kind."""
    campus = _load_campus(campus_file)
    where = _parse_latlng(position)

    if kind:
        try:
            landmark_kind = LandmarkKind(kind)
        except ValueError:
            _fail(f"Unknown landmark kind: {kind}. Available: {', '.join(k.value for k in LandmarkKind)}")
        landmark = nearest_landmark(campus, where, landmark_kind, current_floor_id=floor)
        if landmark is None:
            _output({"ok": True, "landmark": None})
            return
        _output({
            "ok": True,
            "landmark": {
                "id": landmark.id,
                "name": landmark.name,
                "kind": landmark.kind.value,
                "position": _point(landmark.position),
                "distance_m": round(where.distance_to(landmark.position), 2),
            },
        })
        return

    settings: NavigationSettings = ctx.obj
    graph = build_graph(campus, settings)
    node_id = LinearScanIndex.from_graph(graph).nearest(
        where, floor_id=floor, max_distance=settings.search_radius_m
    )
    if node_id is None:
        _output({"ok": True, "node": None})
        return
    node = graph.nodes[node_id]
    _output({
        "ok": True,
        "node": {
            "id": node.id,
            "name": node.name,
            "kind": node.kind.value,
            "floor_id": node.floor_id,
            "position": _point(node.position),
            "distance_m": round(where.distance_to(node.position), 2),
        },
    })


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
