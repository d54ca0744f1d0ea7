"""YAML run plan parser.

Parses run plan files into RunPlan objects.
"""

from dataclasses import fields
from pathlib import Path
from typing import Any, Union

import yaml

from ..errors import PlanError
from .schema import RunPlan

_LIST_FIELDS = ("suites", "tests", "skip")


def parse_plan(file_path: Union[str, Path]) -> RunPlan:
    """Parse a YAML run plan file into a RunPlan.

    Args:
        file_path: Path to the YAML plan file.

    Returns:
        Parsed RunPlan.

    Raises:
        PlanError: If the file is missing, is not YAML, or is malformed.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise PlanError(f"Run plan file not found: {file_path}")

    if file_path.suffix not in (".yaml", ".yml"):
        raise PlanError(f"Expected .yaml or .yml file, got: {file_path.suffix}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PlanError(f"Malformed YAML in {file_path}: {e}") from e

    if data is None:
        raise PlanError(f"Empty run plan file: {file_path}")

    return parse_plan_data(data, source=str(file_path))


def parse_plan_data(data: Any, source: str = "<inline>") -> RunPlan:
    """Parse a run plan from an already loaded mapping.

    List fields accept either a YAML list or a comma-separated string.

    Raises:
        PlanError: If the data is not a mapping or a field has the wrong type.
    """
    if not isinstance(data, dict):
        raise PlanError(f"Run plan must be a YAML mapping, got {type(data).__name__}")

    known = {f.name for f in fields(RunPlan)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise PlanError(f"Unknown field(s) {', '.join(unknown)} in {source}")

    values = dict(data)
    for name in _LIST_FIELDS:
        if name in values:
            values[name] = split_names(values[name], name, source)

    if "timeout" in values:
        try:
            values["timeout"] = float(values["timeout"])
        except (TypeError, ValueError) as e:
            raise PlanError(f"'timeout' must be a number in {source}") from e

    for name in ("provider", "cluster", "region", "zone", "output"):
        if name in values and not isinstance(values[name], str):
            raise PlanError(f"'{name}' must be a string in {source}")

    return RunPlan(**values)


def split_names(value: Any, field_name: str = "names", source: str = "<inline>") -> list[str]:
    """Normalize a list or comma-separated string of names."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return [v.strip() for v in value if v.strip()]
    raise PlanError(f"'{field_name}' must be a list of names in {source}")
