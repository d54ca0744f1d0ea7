"""Plan module - YAML run plan parsing and validation."""

from .filters import apply_filters
from .parser import parse_plan, parse_plan_data, split_names
from .schema import RunPlan, ValidationError, ValidationResult
from .validator import validate_plan

__all__ = [
    "apply_filters",
    "parse_plan",
    "parse_plan_data",
    "split_names",
    "RunPlan",
    "ValidationError",
    "ValidationResult",
    "validate_plan",
]
