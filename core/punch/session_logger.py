import csv
import json
import time
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

import numpy as np

from .config import PunchConfig
from .punch_detector import SIDES, PunchEvent

logger = logging.getLogger(__name__)


def _now_tag() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


class SessionLogger:
    def __init__(self, base_dir: str = "data/sessions", cfg: Optional[PunchConfig] = None):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.session_id = _now_tag()
        self.started_t = time.time()
        self.cfg = cfg
        self.punches: List[Dict[str, Any]] = []

    def add_punch(self, event: PunchEvent):
        entry = asdict(event)
        entry["t"] = time.time()
        self.punches.append(entry)

    def counts(self) -> Dict[str, int]:
        out = {side: 0 for side in SIDES}
        for p in self.punches:
            out[p["side"]] = out.get(p["side"], 0) + 1
        return out

    def total(self) -> int:
        return len(self.punches)

    def summary(self) -> Dict[str, Dict[str, float]]:
        """Per-arm count plus mean/peak wrist speed and median extension at detection."""
        out: Dict[str, Dict[str, float]] = {}
        for side in SIDES:
            rows = [p for p in self.punches if p["side"] == side]
            if not rows:
                out[side] = {"count": 0, "mean_speed": 0.0, "peak_speed": 0.0, "median_extension": 0.0}
                continue
            speeds = np.array([p["velocity"] for p in rows], dtype=np.float32)
            exts = np.array([p["extension"] for p in rows], dtype=np.float32)
            out[side] = {
                "count": len(rows),
                "mean_speed": round(float(np.mean(speeds)), 1),
                "peak_speed": round(float(np.max(speeds)), 1),
                "median_extension": round(float(np.median(exts)), 3),
            }
        return out

    def reset(self):
        self.punches = []
        self.started_t = time.time()

    def export_json(self, filename: Optional[str] = None) -> Path:
        if filename is None:
            filename = f"session-{self.session_id}.json"
        path = self.base_dir / filename

        payload = {
            "meta": {
                "session_id": self.session_id,
                "started_t": self.started_t,
                "exported_t": time.time(),
            },
            "config": (self.cfg.to_dict() if self.cfg else None),
            "counts": self.counts(),
            "summary": self.summary(),
            "punches": self.punches,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Exported %d punches to %s", len(self.punches), path)
        return path

    def export_csv(self, filename: Optional[str] = None) -> Path:
        if filename is None:
            filename = f"session-{self.session_id}.csv"
        path = self.base_dir / filename

        fieldnames = ["t", "side", "frame_index", "timestamp", "velocity", "extension", "votes"]

        with path.open("w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=fieldnames)
            w.writeheader()
            for p in self.punches:
                w.writerow({k: p.get(k) for k in fieldnames})

        logger.info("Exported %d punches to %s", len(self.punches), path)
        return path
