"""Validation issue and result types shared by all network validators."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from wayfinder.models.geometry import LatLng


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Category(str, Enum):
    CONNECTIVITY = "connectivity"
    NAVIGATION = "navigation"
    DATA_INTEGRITY = "data-integrity"
    PERFORMANCE = "performance"
    ACCESSIBILITY = "accessibility"


@dataclass
class ValidationIssue:
    """A single validation issue."""

    code: str  # e.g. "E001"; the letter mirrors the severity
    severity: Severity
    category: Category
    title: str
    message: str
    suggested_fix: str | None = None
    related_id: str | None = None
    location: LatLng | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "category": self.category.value,
            "title": self.title,
            "message": self.message,
            "suggested_fix": self.suggested_fix,
            "related_id": self.related_id,
            "location": (
                {"lat": self.location.lat, "lon": self.location.lon}
                if self.location is not None
                else None
            ),
        }


@dataclass
class ValidationResult:
    """Issues found in a network plus aggregate statistics."""

    issues: list[ValidationIssue] = field(default_factory=list)
    statistics: dict[str, Any] = field(default_factory=dict)

    def _count(self, severity: Severity) -> int:
        return sum(1 for issue in self.issues if issue.severity is severity)

    @property
    def is_valid(self) -> bool:
        """True when no issue has Error severity."""
        return self.error_count == 0

    @property
    def error_count(self) -> int:
        return self._count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(Severity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(Severity.INFO)

    def by_category(self, category: Category) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.category is category]

    def by_code(self, code: str) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.code == code]

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
            "issues": [issue.to_dict() for issue in self.issues],
            "statistics": self.statistics,
        }
