"""
YAML input/output utilities for geometry, validation cases and results.

Surfaces in YAML are given in one of three forms:

  vertices:  [[x, y, z], ...]
  rectangle: {origin: [x, y, z], u: [...], v: [...]}
  disk:      {center: [x, y, z], normal: [...], radius: r, sides: n}
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, List
from datetime import datetime
import csv
import json
import os

import numpy as np
import yaml

from .constants import DEFAULT_QUADRATURE_ORDER
from .errors import YamlError
from .geometry import rectangle, regular_polygon

SURFACE_KEYS = ("surface_a", "surface_b")
RESULT_FIELDS = ("F12", "F21", "A1", "A2")


def _read_yaml(path: str | Path) -> Any:
    if not os.path.isfile(path):
        raise YamlError(f"YAML not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise YamlError(f"Failed to parse YAML: {e}") from e


def surface_from_dict(spec: Dict[str, Any], label: str = "surface") -> np.ndarray:
    """Build a vertex array from one surface description."""
    if not isinstance(spec, dict):
        raise YamlError(f"{label}: mapping required")
    try:
        if "vertices" in spec:
            return np.asarray(spec["vertices"], dtype=float)
        if "rectangle" in spec:
            r = spec["rectangle"]
            return rectangle(r["origin"], r["u"], r["v"])
        if "disk" in spec:
            d = spec["disk"]
            return regular_polygon(d["center"], d.get("normal", (0.0, 0.0, 1.0)),
                                   float(d["radius"]), int(d["sides"]))
    except KeyError as e:
        raise YamlError(f"{label}: missing key {e}") from e
    except (TypeError, ValueError) as e:
        raise YamlError(f"{label}: invalid surface description ({e})") from e
    raise YamlError(f"{label}: expected one of 'vertices', 'rectangle', 'disk'")


def load_geometry(path: str | Path) -> Dict[str, Any]:
    """
    Load a single surface pair, with an optional closed-form reference.

    Returns:
        {"surface_a": ndarray, "surface_b": ndarray} plus "reference" (a
        mapping for reference_view_factor) when the file gives one
    """
    data = _read_yaml(path)
    if not isinstance(data, dict):
        raise YamlError("Invalid geometry file: top-level mapping required")
    geom = data.get("geometry", data)
    if not isinstance(geom, dict):
        raise YamlError("Invalid geometry file: 'geometry' must be a mapping")
    missing = [k for k in SURFACE_KEYS if k not in geom]
    if missing:
        raise YamlError(f"Geometry missing key(s): {', '.join(missing)}")
    result = {k: surface_from_dict(geom[k], k) for k in SURFACE_KEYS}
    reference = geom.get("reference", data.get("reference"))
    _check_mapping(reference, "Geometry 'reference'")
    if reference is not None:
        result["reference"] = reference
    return result


def load_cases(path: str | Path) -> List[Dict[str, Any]]:
    """
    Load a YAML file of validation cases.
    Returns a list of cases (dicts). Raises YamlError on problems.
    """
    data = _read_yaml(path)
    if not isinstance(data, dict) or "cases" not in data or not isinstance(data["cases"], list):
        raise YamlError("Invalid YAML structure: top-level 'cases' list required")
    return data["cases"]


def _check_mapping(value: Any, label: str) -> None:
    if value is not None and not isinstance(value, dict):
        raise YamlError(f"{label} must be a mapping, got {type(value).__name__}")


def validate_case_schema(case: Dict[str, Any]) -> None:
    """
    Minimal schema check for a case.
    Required: id (str), enabled (bool), geometry with surface_a and surface_b
    Optional: quadrature_order (int >= 1), expected and reference (mappings)
    """
    if not isinstance(case, dict):
        raise YamlError("Case must be a mapping")
    if "id" not in case or not isinstance(case["id"], str):
        raise YamlError("Case missing 'id' (str)")
    if "enabled" not in case or not isinstance(case["enabled"], bool):
        raise YamlError(f"Case {case.get('id')} missing 'enabled' (bool)")
    if "geometry" not in case or not isinstance(case["geometry"], dict):
        raise YamlError(f"Case {case['id']}: 'geometry' dict required")
    for k in SURFACE_KEYS:
        if k not in case["geometry"]:
            raise YamlError(f"Case {case['id']}: geometry missing key '{k}'")
    order = case.get("quadrature_order", DEFAULT_QUADRATURE_ORDER)
    if isinstance(order, bool) or not isinstance(order, int) or order < 1:
        raise YamlError(f"Case {case['id']}: 'quadrature_order' must be a positive integer")
    for key in ("expected", "reference"):
        _check_mapping(case.get(key), f"Case {case['id']}: '{key}'")
    expected = case.get("expected") or {}
    f12 = expected.get("F12")
    if f12 is not None and (isinstance(f12, bool) or not isinstance(f12, (int, float))):
        raise YamlError(f"Case {case['id']}: 'expected.F12' must be a number")
    _check_mapping(expected.get("tolerance"), f"Case {case['id']}: 'expected.tolerance'")


def coerce_case_to_kwargs(case: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a YAML case dict into keyword arguments for the case runner.
    """
    geom = case["geometry"]
    expected = case.get("expected") or {}
    return {
        "id": case["id"],
        "polygon_a": surface_from_dict(geom["surface_a"], f"{case['id']}.surface_a"),
        "polygon_b": surface_from_dict(geom["surface_b"], f"{case['id']}.surface_b"),
        "quadrature_order": int(case.get("quadrature_order", DEFAULT_QUADRATURE_ORDER)),
        "validate": bool(case.get("validate", False)),
        "expected": expected.get("F12"),
        "expected_tol": (expected.get("tolerance") or {}),
        "reference": case.get("reference"),
    }


def _result_row(name: str, result: Any) -> Dict[str, Any]:
    if isinstance(result, dict):
        row = {k: float(result[k]) for k in RESULT_FIELDS if k in result}
        if "quadrature_order" in result:
            row["quadrature_order"] = int(result["quadrature_order"])
    else:
        row = {k: float(getattr(result, k)) for k in RESULT_FIELDS}
    row["name"] = name
    return row


def save_results(results: Dict[str, Any], output_path: Path, format: str | None = None) -> None:
    """Save named view factor results to file.

    Args:
        results: Mapping of run name to a ViewFactorResult or dict with F12/F21/A1/A2
        output_path: Output file path
        format: 'csv', 'json' or 'yaml'; inferred from the suffix when None
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fmt = (format or output_path.suffix.lstrip(".")).lower()
    timestamp = datetime.now().isoformat()
    rows = [_result_row(name, res) for name, res in results.items()]

    if fmt == "csv":
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["timestamp", "name", "quadrature_order", *RESULT_FIELDS])
            for row in rows:
                writer.writerow([timestamp, row["name"], row.get("quadrature_order", ""),
                                 *(f"{row[k]:.10g}" for k in RESULT_FIELDS)])
    elif fmt in ("json", "yaml", "yml"):
        data = {"timestamp": timestamp,
                "results": {row.pop("name"): row for row in rows}}
        with open(output_path, "w", encoding="utf-8") as f:
            if fmt == "json":
                json.dump(data, f, indent=2)
            else:
                yaml.dump(data, f, default_flow_style=False, indent=2)
    else:
        raise ValueError(f"Unsupported output format: {fmt}")


def create_sample_cases() -> Dict[str, Any]:
    """Sample validation cases covering each surface form."""
    return {
        "version": 1,
        "cases": [
            {
                "id": "coaxial_disks_r1_h3",
                "enabled": True,
                "description": "Coaxial unit disks 3 apart, 119-gon approximation",
                "quadrature_order": 2,
                "geometry": {
                    "surface_a": {"disk": {"center": [0.0, 0.0, 0.0], "normal": [0.0, 0.0, 1.0],
                                           "radius": 1.0, "sides": 119}},
                    "surface_b": {"disk": {"center": [0.0, 0.0, 3.0], "normal": [0.0, 0.0, 1.0],
                                           "radius": 1.0, "sides": 119}},
                },
                "reference": {"type": "coaxial_disks", "r1": 1.0, "r2": 1.0, "separation": 3.0},
                "expected": {"F12": 0.0917, "tolerance": {"rel": 0.05}},
            },
            {
                "id": "parallel_unit_squares",
                "enabled": True,
                "description": "Directly opposed unit squares 1 apart",
                "quadrature_order": 7,
                "geometry": {
                    "surface_a": {"rectangle": {"origin": [0.0, 0.0, 0.0],
                                                "u": [1.0, 0.0, 0.0], "v": [0.0, 1.0, 0.0]}},
                    "surface_b": {"vertices": [[0.0, 0.0, 1.0], [1.0, 0.0, 1.0],
                                               [1.0, 1.0, 1.0], [0.0, 1.0, 1.0]]},
                },
                "reference": {"type": "parallel_rectangles", "a": 1.0, "b": 1.0, "separation": 1.0},
                "expected": {"F12": 0.19982, "tolerance": {"rel": 0.001}},
            },
        ],
    }


def save_sample_cases(output_path: Path) -> None:
    """Write the sample cases file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        yaml.dump(create_sample_cases(), f, default_flow_style=False, indent=2, sort_keys=False)
