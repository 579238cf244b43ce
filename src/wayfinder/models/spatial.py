"""Spatial model: campus → buildings → floors → roads, landmarks, intersections.

This is the read-only snapshot the navigation core consumes. The outdoor
layer (roads, landmarks and intersections outside any building) hangs
directly off the Campus. Indoor elements belong to a Floor, and every
Floor belongs to a Building.

Ids are caller-supplied strings and become graph node ids, so they must be
unique across the whole campus (the validator reports duplicates).
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from wayfinder.models.geometry import LatLng, polyline_length
from wayfinder.models.ids import generate_id


class RoadKind(str, Enum):
    """Kind of traversable path."""

    ROAD = "road"
    WALKWAY = "walkway"
    CORRIDOR = "corridor"


class TransitionKind(str, Enum):
    """How a vertical transition is made. NONE for ordinary edges."""

    ELEVATOR = "elevator"
    STAIRS = "stairs"
    ESCALATOR = "escalator"
    NONE = "none"


class LandmarkKind(str, Enum):
    """Closed set of landmark kinds.

    ELEVATOR, STAIRS and ESCALATOR are vertical circulation and may list
    connected floors. ENTRANCE and EXIT mark building access points.
    """

    ENTRANCE = "entrance"
    EXIT = "exit"
    ELEVATOR = "elevator"
    STAIRS = "stairs"
    ESCALATOR = "escalator"
    RESTROOM = "restroom"
    CLASSROOM = "classroom"
    OFFICE = "office"
    FOOD = "food"
    PARKING = "parking"
    OTHER = "other"

    @property
    def is_vertical_circulation(self) -> bool:
        return self in _VERTICAL_KINDS

    @property
    def is_entrance(self) -> bool:
        return self in (LandmarkKind.ENTRANCE, LandmarkKind.EXIT)

    @property
    def transition_kind(self) -> TransitionKind:
        return _VERTICAL_KINDS.get(self, TransitionKind.NONE)


_VERTICAL_KINDS: dict[LandmarkKind, TransitionKind] = {
    LandmarkKind.ELEVATOR: TransitionKind.ELEVATOR,
    LandmarkKind.STAIRS: TransitionKind.STAIRS,
    LandmarkKind.ESCALATOR: TransitionKind.ESCALATOR,
}


class Intersection(BaseModel):
    """A junction point between one or more roads."""

    id: str = Field(default_factory=generate_id)
    name: str = ""
    position: LatLng


class Road(BaseModel):
    """A path drawn as an ordered polyline.

    Roads with fewer than two points are kept in the model (so the validator
    can report them) but contribute nothing to the navigation graph.
    """

    id: str = Field(default_factory=generate_id)
    name: str = ""
    points: list[LatLng] = Field(default_factory=list)
    kind: RoadKind = RoadKind.ROAD
    width: float = Field(default=5.0, gt=0, description="Width in meters")
    one_way: bool = Field(default=False, description="Traversable only in point order")
    connected_intersections: list[str] = Field(
        default_factory=list,
        description="Intersection ids; first/last pin the road's endpoints",
    )
    cul_de_sac: bool = Field(default=False, description="Dead end by design")

    @property
    def length(self) -> float:
        """Polyline length in meters."""
        return polyline_length(self.points)


class Landmark(BaseModel):
    """A named point of interest.

    Vertical circulation landmarks list the ids of the other floors they
    reach. Each floor carries its own instance of the elevator or staircase.
    """

    id: str = Field(default_factory=generate_id)
    name: str = ""
    kind: LandmarkKind = LandmarkKind.OTHER
    position: LatLng
    description: str = ""
    connected_floors: list[str] = Field(default_factory=list)
    accessible: bool = Field(default=False, description="Step-free access (entrances)")

    @model_validator(mode="after")
    def floors_only_on_vertical_circulation(self) -> Landmark:
        if self.connected_floors and not self.kind.is_vertical_circulation:
            raise ValueError(
                f"Landmark kind '{self.kind.value}' cannot list connected floors"
            )
        return self


class Floor(BaseModel):
    """One level of a building. Level 0 is the ground floor."""

    id: str = Field(default_factory=generate_id)
    name: str = ""
    level: int = 0
    roads: list[Road] = Field(default_factory=list)
    landmarks: list[Landmark] = Field(default_factory=list)
    intersections: list[Intersection] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name or f"Level {self.level}"


class Building(BaseModel):
    """A building with one or more floors."""

    id: str = Field(default_factory=generate_id)
    name: str = ""
    center: LatLng | None = None
    floors: list[Floor] = Field(default_factory=list)

    def get_floor(self, floor_id: str) -> Floor | None:
        """Find a floor by id."""
        return next((f for f in self.floors if f.id == floor_id), None)

    @property
    def ground_floor(self) -> Floor | None:
        return next((f for f in self.floors if f.level == 0), None)

    @property
    def is_multi_floor(self) -> bool:
        return len(self.floors) > 1

    def iter_landmarks(self) -> Iterator[tuple[Floor, Landmark]]:
        for floor in self.floors:
            for landmark in floor.landmarks:
                yield floor, landmark


class Campus(BaseModel):
    """Top-level spatial model: the outdoor layer plus its buildings.

    `revision` is bumped by the owning application on every edit; together
    with the content digest it forms the graph cache identity.
    """

    id: str = Field(default_factory=generate_id)
    name: str = "Untitled Campus"
    revision: int = Field(default=0, ge=0)
    buildings: list[Building] = Field(default_factory=list)
    outdoor_roads: list[Road] = Field(default_factory=list)
    outdoor_landmarks: list[Landmark] = Field(default_factory=list)
    outdoor_intersections: list[Intersection] = Field(default_factory=list)

    # ── File I/O ──────────────────────────────────────────────────────

    @classmethod
    def load(cls, path: str | Path) -> Campus:
        """Load a campus from a JSON file."""
        path = Path(path)
        return cls.model_validate_json(path.read_text())

    def save(self, path: str | Path) -> Path:
        """Save the campus to a JSON file. Creates parent dirs if needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))
        return path

    # ── Traversal ─────────────────────────────────────────────────────
    #
    # Scoped iterators yield (building, floor, element); both are None for
    # the outdoor layer.

    def iter_roads(self) -> Iterator[tuple[Building | None, Floor | None, Road]]:
        for road in self.outdoor_roads:
            yield None, None, road
        for building in self.buildings:
            for floor in building.floors:
                for road in floor.roads:
                    yield building, floor, road

    def iter_landmarks(
        self,
    ) -> Iterator[tuple[Building | None, Floor | None, Landmark]]:
        for landmark in self.outdoor_landmarks:
            yield None, None, landmark
        for building in self.buildings:
            for floor, landmark in building.iter_landmarks():
                yield building, floor, landmark

    def iter_intersections(
        self,
    ) -> Iterator[tuple[Building | None, Floor | None, Intersection]]:
        for intersection in self.outdoor_intersections:
            yield None, None, intersection
        for building in self.buildings:
            for floor in building.floors:
                for intersection in floor.intersections:
                    yield building, floor, intersection

    def find_floor(self, floor_id: str) -> tuple[Building, Floor] | None:
        """Find a floor (and its building) by floor id."""
        for building in self.buildings:
            floor = building.get_floor(floor_id)
            if floor is not None:
                return building, floor
        return None

    @property
    def is_empty(self) -> bool:
        return not (self.buildings or self.outdoor_roads or self.outdoor_intersections)

    def cache_key(self) -> str:
        """Identity of this snapshot for graph caching."""
        digest = hashlib.sha1(self.model_dump_json().encode("utf-8")).hexdigest()
        return f"{self.id}:{self.revision}:{digest[:16]}"
