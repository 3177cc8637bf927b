from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _json_dump(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)


def _json_load(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def run_root(artifact_root: Path) -> Path:
    path = artifact_root / "runs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_run(artifact_root: Path, run: dict[str, Any]) -> Path:
    root = run_root(artifact_root)
    rid = run["run_id"]
    target = root / rid
    target.mkdir(parents=True, exist_ok=True)
    _json_dump(target / "run.json", run)

    requested = len(run.get("dates", []))
    assigned = len(run.get("assignments", {}))
    summary = run.get("summary") or {}
    manifest = {
        "run_id": rid,
        "generated_at": run.get("generated_at"),
        "strategy": run.get("strategy"),
        "range": run.get("range"),
        "counts": {
            "requested_dates": requested,
            "assigned_dates": assigned,
            "skipped_dates": max(requested - assigned, 0),
            "members": len(run.get("member_ids", [])),
        },
        "fill_rate": summary.get("fill_rate"),
        "gini": summary.get("gini"),
        "path": str(target.resolve()),
    }
    _json_dump(target / "manifest.json", manifest)
    _json_dump(root / "latest.json", manifest)
    return target


def list_runs(artifact_root: Path, limit: int = 20) -> list[dict[str, Any]]:
    root = run_root(artifact_root)
    manifests: list[dict[str, Any]] = []
    for child in root.iterdir():
        if not child.is_dir():
            continue
        manifest_file = child / "manifest.json"
        if not manifest_file.exists():
            continue
        try:
            manifests.append(_json_load(manifest_file))
        except (OSError, json.JSONDecodeError):
            logger.warning("skipping unreadable run manifest %s", manifest_file)
            continue
    manifests.sort(key=lambda row: row.get("generated_at") or "", reverse=True)
    return manifests[:limit]


def load_run(artifact_root: Path, run_id: str | None = None) -> dict[str, Any]:
    root = run_root(artifact_root)
    if run_id:
        manifest_path = root / run_id / "manifest.json"
    else:
        manifest_path = root / "latest.json"
    if not manifest_path.exists():
        raise FileNotFoundError("run manifest not found")
    manifest = _json_load(manifest_path)
    rid = manifest["run_id"]
    path = root / rid / "run.json"
    if not path.exists():
        raise FileNotFoundError(f"run payload not found: {rid}")
    return _json_load(path)
