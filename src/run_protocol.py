"""Output-folder protocol: per-polygon file names and manifest I/O."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict


def safe_label(value: str) -> str:
    """Label as given, with path-unsafe character runs replaced by ``-``."""
    value = value.strip()
    value = re.sub(r"[^A-Za-z0-9_.-]+", "-", value)
    value = re.sub(r"-+", "-", value)
    return value.strip("-.") or "shape"


def artifact_name(label: str, index: int) -> str:
    """``<label>_<index>``; index is zero-based over processed polygons."""
    return f"{label}_{index}"


def artifact_path(output_dir: str, label: str, index: int, file_format: str) -> Path:
    return Path(output_dir) / f"{artifact_name(label, index)}.{file_format}"


def prepare_output_dir(output_dir: str) -> Path:
    path = Path(output_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
