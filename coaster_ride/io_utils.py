from __future__ import annotations

"""Utility functions for reading and writing CSV data.

This module centralises the I/O helpers used by the ride demo.  It provides
a loader for coaster track files, a light-weight parser for the ``key,value``
ride parameter files and a convenience wrapper around :mod:`pandas` for
saving results.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Mapping

import csv
import pandas as pd

try:  # pragma: no cover - import shim
    from .track_tilt import TrackPoint
except ImportError:  # pragma: no cover - direct execution support
    from track_tilt import TrackPoint


def read_track_points_csv(path: str | Path) -> List[TrackPoint]:
    """Read coaster control points from ``path``.

    The file must contain ``x_m``, ``y_m`` and ``z_m`` columns.  An optional
    ``tilt_deg`` column gives the banking at each point and defaults to zero.
    """
    df = pd.read_csv(path)
    required = {"x_m", "y_m", "z_m"}
    missing = required.difference(df.columns)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ValueError(f"track file missing required columns: {missing_str}")

    tilt = df.get("tilt_deg", pd.Series(0.0, index=df.index)).fillna(0.0)
    return [
        TrackPoint(float(x), float(y), float(z), float(b))
        for x, y, z, b in zip(df["x_m"], df["y_m"], df["z_m"], tilt)
    ]


def read_ride_params_csv(path: str | Path) -> Dict[str, float | bool | None]:
    """Read ride parameters from ``path``.

    Values of ``true``/``false`` are interpreted as booleans and ``none`` as
    ``None`` (used to switch off optional limits such as ``max_delta_time``),
    while other entries are parsed as floating point numbers.  Rows without a
    value or with an unparsable value are skipped, as are lines starting with
    ``#``.
    """
    params: Dict[str, float | bool | None] = {}
    with Path(path).open(newline="") as f:
        reader = csv.reader(f)
        for row in reader:
            if not row or all(cell.strip() == "" for cell in row):
                continue
            key = row[0].strip()
            if key.startswith("#"):
                continue
            try:
                raw_value = row[1].strip()
            except IndexError:
                continue

            value_lower = raw_value.lower()
            if value_lower == "true":
                params[key] = True
            elif value_lower == "false":
                params[key] = False
            elif value_lower == "none":
                params[key] = None
            else:
                try:
                    params[key] = float(raw_value)
                except ValueError:
                    continue
    return params


def write_csv(data: Mapping[str, Iterable] | pd.DataFrame, file_path: str | Path) -> None:
    """Write ``data`` to ``file_path`` ensuring parent directories exist."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(data, pd.DataFrame):
        data.to_csv(file_path, index=False)
    else:
        pd.DataFrame(data).to_csv(file_path, index=False)
