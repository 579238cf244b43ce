"""Campus generators."""

from wayfinder.generators.campus import generate_sample_campus, grid_intersection_id

__all__ = ["generate_sample_campus", "grid_intersection_id"]
