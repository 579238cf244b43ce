"""Network validation for navigation graphs.

- connectivity: isolated nodes, dead-end roads, disconnected components
- accessibility: unreachable landmarks, vertical circulation, entrances
- integrity: duplicate ids, malformed roads, elements the builder skipped
- statistics: counts and road lengths reported with every result
"""

from wayfinder.validators.issues import (
    Category,
    Severity,
    ValidationIssue,
    ValidationResult,
)
from wayfinder.validators.network import validate, validate_campus

__all__ = [
    "Category",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "validate",
    "validate_campus",
]
