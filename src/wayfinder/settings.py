"""Tunable parameters for graph building, search and validation.

Settings are passed explicitly to the builder, the pathfinder and the
validator. Defaults suit a pedestrian campus.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class NavigationSettings(BaseModel):
    """Configuration surface of the navigation core."""

    model_config = ConfigDict(extra="forbid")

    landmark_connection_radius_m: float = Field(
        default=50.0, gt=0, description="Max landmark-to-road link length"
    )
    landmark_link_count: int = Field(
        default=1, ge=1, description="Nearest road nodes linked per landmark"
    )
    search_radius_m: float = Field(
        default=100.0, gt=0, description="Radius for resolving coordinates to nodes"
    )
    vertical_transition_penalty_m: float = Field(
        default=15.0, ge=0, description="Meters-equivalent cost per floor spanned"
    )
    elevator_preference_factor: float = Field(
        default=1.5,
        ge=1.0,
        description="Multiplier on stairs/escalator edges when elevators are preferred",
    )
    max_expansions: int = Field(
        default=100_000, ge=1, description="A* node-expansion cap"
    )
    snap_tolerance_m: float = Field(
        default=1.0, ge=0, description="Road points this close reuse an existing node"
    )
    straight_threshold_deg: float = Field(default=20.0, gt=0, lt=180)
    sharp_turn_threshold_deg: float = Field(default=120.0, gt=0, lt=180)
    walking_speed_mps: float = Field(default=1.4, gt=0)
    short_road_m: float = Field(default=1.0, ge=0)
    dense_segment_m: float = Field(default=0.5, ge=0)

    @classmethod
    def load(cls, path: str | Path) -> NavigationSettings:
        """Load settings from a JSON file."""
        path = Path(path)
        return cls.model_validate_json(path.read_text())
