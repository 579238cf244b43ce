"""Coffee run: a two-building campus built by hand.

A footpath links the Admin Building to the Student Union. The café is on
the Union's first floor, reached by an escalator or the stairs.

   N
   ↑
   |
   +--- E

Layout (top view, not to scale):

   [Admin]--path--(plaza)--path--[Union]
    door                           door
                                   escalator + stairs -> Café (level 1)
"""

from pathlib import Path

from wayfinder.graph import build_graph
from wayfinder.models import (
    Building,
    Campus,
    Floor,
    Intersection,
    Landmark,
    LandmarkKind,
    LatLng,
    Road,
    RoadKind,
)
from wayfinder.routing import SearchOptions, find_path_between_nodes
from wayfinder.validators import validate

LAT = 40.0
LON = -105.27
STEP = 0.0005  # about 43 m east-west at this latitude


def at(dlat: float, dlon: float) -> LatLng:
    return LatLng(lat=LAT + dlat, lon=LON + dlon)


# --- Outdoor layer ---
admin_door = Intersection(id="admin-door", name="Admin Steps", position=at(0, 0))
plaza = Intersection(id="plaza", name="Central Plaza", position=at(0, STEP))
union_door = Intersection(id="union-door", name="Union Steps", position=at(0, 2 * STEP))

paths = [
    Road(
        id="admin-path",
        name="Admin Path",
        kind=RoadKind.WALKWAY,
        points=[admin_door.position, at(0.0001, STEP / 2), plaza.position],
        connected_intersections=[admin_door.id, plaza.id],
    ),
    Road(
        id="union-path",
        name="Union Path",
        kind=RoadKind.WALKWAY,
        points=[plaza.position, union_door.position],
        connected_intersections=[plaza.id, union_door.id],
    ),
]

# --- Admin Building (single floor) ---
admin = Building(
    id="admin",
    name="Admin Building",
    floors=[
        Floor(
            id="admin-0",
            level=0,
            intersections=[
                Intersection(id="admin-hall-s", position=at(0.00005, 0)),
                Intersection(id="admin-hall-n", position=at(0.0003, 0)),
            ],
            roads=[
                Road(
                    id="admin-hall",
                    name="Admin Hall",
                    kind=RoadKind.CORRIDOR,
                    points=[at(0.00005, 0), at(0.0003, 0)],
                    connected_intersections=["admin-hall-s", "admin-hall-n"],
                ),
            ],
            landmarks=[
                Landmark(id="admin-entrance", name="Admin Entrance", kind=LandmarkKind.ENTRANCE,
                         position=at(0.00002, 0), accessible=True),
                Landmark(id="registrar", name="Registrar", kind=LandmarkKind.OFFICE,
                         position=at(0.0003, 0.00005)),
            ],
        ),
    ],
)

# --- Student Union (two floors) ---
UNION_LON = 2 * STEP


def union_floor(level: int) -> Floor:
    prefix = f"union-{level}"
    south, north = at(0.00005, UNION_LON), at(0.0003, UNION_LON)
    other = f"union-{1 - level}"
    landmarks = [
        Landmark(id=f"{prefix}-escalator", name="Escalator", kind=LandmarkKind.ESCALATOR,
                 position=at(0.00015, UNION_LON + 0.00003), connected_floors=[other]),
        Landmark(id=f"{prefix}-stairs", name="Stairs", kind=LandmarkKind.STAIRS,
                 position=at(0.00028, UNION_LON - 0.00003), connected_floors=[other]),
    ]
    if level == 0:
        landmarks.append(Landmark(id="union-entrance", name="Union Entrance",
                                  kind=LandmarkKind.ENTRANCE, position=at(0.00002, UNION_LON)))
    else:
        landmarks.append(Landmark(id="cafe", name="Café", kind=LandmarkKind.FOOD,
                                  position=at(0.00025, UNION_LON + 0.00004)))
    return Floor(
        id=prefix,
        name="Ground Floor" if level == 0 else "Upper Level",
        level=level,
        intersections=[
            Intersection(id=f"{prefix}-s", position=south),
            Intersection(id=f"{prefix}-n", position=north),
        ],
        roads=[
            Road(id=f"{prefix}-hall", name="Union Hall", kind=RoadKind.CORRIDOR,
                 points=[south, north], connected_intersections=[f"{prefix}-s", f"{prefix}-n"]),
        ],
        landmarks=landmarks,
    )


union = Building(id="union", name="Student Union", floors=[union_floor(0), union_floor(1)])

campus = Campus(
    id="coffee-run",
    name="Coffee Run",
    outdoor_intersections=[admin_door, plaza, union_door],
    outdoor_roads=paths,
    buildings=[admin, union],
)

# --- Validate ---
graph = build_graph(campus)
result = validate(graph, campus)
if result.is_valid:
    print(f"✅ Network valid ({result.warning_count} warnings, {result.info_count} notes)")
else:
    print("⚠️  Validation errors:")
for issue in result.issues:
    print(f"  [{issue.code}] {issue.title}: {issue.message}")

# --- Route ---
route = find_path_between_nodes(graph, "registrar", "cafe", SearchOptions(prefer_elevator=False))
if not route.success:
    print(f"❌ No route: {route.message}")
else:
    print(f"🚶 Registrar → Café: {route.total_distance:.0f} m, "
          f"about {route.estimated_duration().total_seconds() / 60:.1f} min")
    for step in route.instructions:
        print(f"   {step.text}")

# --- Save ---
output = Path(__file__).parent / "output"
output.mkdir(exist_ok=True)
saved = campus.save(output / "coffee_run.json")
print(f"📁 Saved to: {saved}")
print(f"   Nodes: {graph.node_count}")
print(f"   Edges: {graph.edge_count}")
