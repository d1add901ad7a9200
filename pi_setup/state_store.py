from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}

    if _detect_format(p) in {"yaml", "yml"}:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        data = json.loads(p.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"State file must be an object/dict, got {type(data)}")

    return data


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(state, sort_keys=False) + "\n", encoding="utf-8")
    else:
        p.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.debug("Saved state to %s", p)


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    """Fill required keys with sane defaults (without overriding user values)."""

    state.setdefault("version", 1)
    state.setdefault("host", {})
    state.setdefault("execution", {})

    exe = state["execution"]
    exe.setdefault("current_step", None)
    exe.setdefault("completed_steps", {})
    exe.setdefault("errors", [])

    # Older state files recorded completed steps as a plain list.
    if isinstance(exe["completed_steps"], list):
        exe["completed_steps"] = {step_id: 0.0 for step_id in exe["completed_steps"]}

    return state


def mark_step_completed(state: Dict[str, Any], step_id: str, *, at: float) -> None:
    exe = state.setdefault("execution", {})
    exe.setdefault("completed_steps", {})[step_id] = at


def clear_step_completed(state: Dict[str, Any], step_id: str) -> None:
    completed = (state.get("execution") or {}).get("completed_steps")
    if isinstance(completed, dict):
        completed.pop(step_id, None)


def last_completed_at(state: Dict[str, Any], step_id: str) -> Optional[float]:
    exe = state.get("execution") or {}
    completed = exe.get("completed_steps") or {}
    at = completed.get(step_id)
    return float(at) if at is not None else None


def record_error(state: Dict[str, Any], step_id: Optional[str], error: str) -> None:
    state.setdefault("execution", {}).setdefault("errors", []).append({"step": step_id, "error": error})
