"""Sample campus generator.

Produces a small, fully deterministic campus used by the CLI `sample`
command, by the examples and by the tests:

```
  row 3  o----o----o----o        Food Court near (3,1)
         |    |    |    |
  row 2  o----o----o----o        Bell Tower near (2,2)
         |    | [] |    |        [] Science Library, entrance facing (1,1)
  row 1  o----o----o----o
         |    |    |    |
  row 0  o----o----o----o        Lot 30 south of (0,0)
```

Grid spacing is 0.001° in both directions (about 111 m north-south and
92 m east-west at this latitude). The library has two floors, each with a
corridor, an elevator and a staircase stacked at the same spot.
"""

from __future__ import annotations

from wayfinder.models.geometry import LatLng
from wayfinder.models.spatial import (
    Building,
    Campus,
    Floor,
    Intersection,
    Landmark,
    LandmarkKind,
    Road,
    RoadKind,
)

ORIGIN = LatLng(lat=33.9737, lon=-117.3281)
GRID_SPACING_DEG = 0.001
GRID_SIZE = 4

_ROW_NAMES = ["Aberdeen Drive", "Canyon Crest Drive", "University Avenue", "Linden Street"]
_COLUMN_NAMES = ["West Campus Drive", "Campus Drive", "Library Mall", "East Campus Drive"]


def _at(dlat: float, dlon: float) -> LatLng:
    return LatLng(lat=round(ORIGIN.lat + dlat, 7), lon=round(ORIGIN.lon + dlon, 7))


def grid_intersection_id(row: int, col: int) -> str:
    return f"grid-{row}-{col}"


def _grid_roads(intersections: dict[str, Intersection]) -> list[Road]:
    roads: list[Road] = []
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            here = intersections[grid_intersection_id(row, col)]
            if col + 1 < GRID_SIZE:
                east = intersections[grid_intersection_id(row, col + 1)]
                roads.append(Road(
                    id=f"road-r{row}-c{col}-east",
                    name=_ROW_NAMES[row],
                    points=[here.position, east.position],
                    connected_intersections=[here.id, east.id],
                ))
            if row + 1 < GRID_SIZE:
                north = intersections[grid_intersection_id(row + 1, col)]
                roads.append(Road(
                    id=f"road-r{row}-c{col}-north",
                    name=_COLUMN_NAMES[col],
                    points=[here.position, north.position],
                    kind=RoadKind.WALKWAY,
                    width=4.0,
                    connected_intersections=[here.id, north.id],
                ))
    return roads


def _library_floor(prefix: str, level: int, other_floor_id: str) -> Floor:
    """One library floor: a corridor with circulation and rooms along it."""
    lat = 1.5 * GRID_SPACING_DEG
    lon = 1.5 * GRID_SPACING_DEG
    west = Intersection(id=f"{prefix}-west", name="West Hall", position=_at(lat, lon - 0.0003))
    east = Intersection(id=f"{prefix}-east", name="East Hall", position=_at(lat, lon + 0.0003))
    corridor = Road(
        id=f"{prefix}-corridor",
        name="Main Corridor",
        kind=RoadKind.CORRIDOR,
        width=3.0,
        points=[west.position, _at(lat, lon), east.position],
        connected_intersections=[west.id, east.id],
    )
    number = level + 1
    floor = Floor(
        id=prefix,
        name="Ground Floor" if level == 0 else f"Floor {level}",
        level=level,
        intersections=[west, east],
        roads=[corridor],
        landmarks=[
            Landmark(
                id=f"{prefix}-elevator",
                name="Elevator A",
                kind=LandmarkKind.ELEVATOR,
                position=_at(lat + 0.00004, lon - 0.0001),
                connected_floors=[other_floor_id],
            ),
            Landmark(
                id=f"{prefix}-stairs",
                name="Stairwell B",
                kind=LandmarkKind.STAIRS,
                position=_at(lat + 0.00004, lon + 0.00025),
                connected_floors=[other_floor_id],
            ),
            Landmark(
                id=f"{prefix}-room-{number}01",
                name=f"Room {number}01",
                kind=LandmarkKind.CLASSROOM,
                position=_at(lat - 0.00004, lon + 0.0001),
            ),
        ],
    )
    if level == 0:
        lobby = Intersection(
            id=f"{prefix}-lobby", name="Lobby", position=_at(0.0012, lon - 0.0003)
        )
        floor.intersections.append(lobby)
        floor.roads.append(Road(
            id=f"{prefix}-lobby-hall",
            name="Lobby Hall",
            kind=RoadKind.CORRIDOR,
            width=4.0,
            points=[lobby.position, west.position],
            connected_intersections=[lobby.id, west.id],
        ))
        floor.landmarks.extend([
            Landmark(
                id=f"{prefix}-entrance",
                name="Main Entrance",
                kind=LandmarkKind.ENTRANCE,
                position=_at(0.00108, lon - 0.0003),
                accessible=True,
            ),
            Landmark(
                id=f"{prefix}-restroom",
                name="Restrooms",
                kind=LandmarkKind.RESTROOM,
                position=_at(lat - 0.00004, lon - 0.00025),
            ),
        ])
    else:
        floor.landmarks.extend([
            Landmark(
                id=f"{prefix}-lounge",
                name="Study Lounge",
                kind=LandmarkKind.OTHER,
                position=_at(lat - 0.00004, lon - 0.00025),
            ),
            Landmark(
                id=f"{prefix}-restroom",
                name="Restrooms",
                kind=LandmarkKind.RESTROOM,
                position=_at(lat - 0.00004, lon + 0.00025),
            ),
        ])
    return floor


def generate_sample_campus() -> Campus:
    """Generate the sample campus. Every call returns an equal model."""
    intersections = {
        grid_intersection_id(row, col): Intersection(
            id=grid_intersection_id(row, col),
            name=f"{_ROW_NAMES[row]} & {_COLUMN_NAMES[col]}",
            position=_at(row * GRID_SPACING_DEG, col * GRID_SPACING_DEG),
        )
        for row in range(GRID_SIZE)
        for col in range(GRID_SIZE)
    }

    library = Building(
        id="library",
        name="Science Library",
        center=_at(1.5 * GRID_SPACING_DEG, 1.5 * GRID_SPACING_DEG),
        floors=[
            _library_floor("library-0", 0, other_floor_id="library-1"),
            _library_floor("library-1", 1, other_floor_id="library-0"),
        ],
    )

    return Campus(
        id="sample-campus",
        name="Sample Campus",
        outdoor_intersections=list(intersections.values()),
        outdoor_roads=_grid_roads(intersections),
        outdoor_landmarks=[
            Landmark(
                id="bell-tower",
                name="Bell Tower",
                kind=LandmarkKind.OTHER,
                position=_at(0.0021, 0.0021),
            ),
            Landmark(
                id="lot-30",
                name="Lot 30",
                kind=LandmarkKind.PARKING,
                position=_at(-0.0002, 0.0),
            ),
            Landmark(
                id="food-court",
                name="Food Court",
                kind=LandmarkKind.FOOD,
                position=_at(0.0031, 0.0008),
            ),
        ],
        buildings=[library],
    )
