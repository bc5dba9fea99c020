"""Run logging for the cosmic command-line tool.

Console messages go to stderr through :mod:`logging`.  A run can also be
persisted as ``<base_dir>/<run_id>/events.jsonl`` next to JSON and CSV
artifacts such as ``metadata.json`` or the evaluated batch table.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import math
import platform
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from hashlib import sha256
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Mapping, Optional, TextIO

import numpy as np
import pandas as pd
import yaml

EVENTS_FILENAME = "events.jsonl"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_jsonable(value: Any) -> Any:
    """Convert engine results into strict JSON values.

    Objects exposing ``as_dict`` and dataclass instances are expanded, numpy
    scalars and arrays become Python numbers and lists, and non-finite floats
    (an infinite inverse scale at z = 0, NaN distances) become ``None``.
    """
    if isinstance(value, (float, np.floating)):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, np.integer)):
        return int(value)
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, np.ndarray):
        return [to_jsonable(item) for item in value.tolist()]
    if hasattr(value, "as_dict"):
        return to_jsonable(value.as_dict())
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(item) for item in value]
    return str(value)


def compute_sha256(path: str | Path) -> Optional[str]:
    """SHA-256 of ``path``, or ``None`` when it is not an existing file."""
    target = Path(path).expanduser()
    if not target.is_file():
        return None
    digest = sha256()
    with target.open("rb") as handle:
        for block in iter(lambda: handle.read(1 << 20), b""):
            digest.update(block)
    return digest.hexdigest()


@dataclass
class StructuredLogger:
    """Console logger for one run, optionally persisted as JSONL events.

    Messages always reach ``stream`` (stderr unless given), filtered by
    ``console_level``, so that reports on stdout stay clean.  Nothing touches
    the filesystem unless ``persist`` is true.
    """

    run_id: Optional[str] = None
    base_dir: Path = Path("results") / "runs"
    console_level: int = logging.WARNING
    persist: bool = False
    stream: Optional[TextIO] = None
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.run_id = self.run_id or _utc_now().strftime("%Y%m%d_%H%M%S")
        self.base_dir = Path(self.base_dir)
        self.run_dir = self.base_dir / self.run_id
        if self.persist:
            self.run_dir.mkdir(parents=True, exist_ok=True)
        self._logger = self._console_logger()

    def _console_logger(self) -> logging.Logger:
        logger = logging.getLogger(f"cosmic.run.{self.run_id}")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        handler = logging.StreamHandler(self.stream if self.stream is not None else sys.stderr)
        handler.setLevel(self.console_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        return logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def events_path(self) -> Path:
        return self.run_dir / EVENTS_FILENAME

    def log_event(
        self,
        event_type: str,
        payload: Optional[Mapping[str, Any]] = None,
        *,
        level: int = logging.INFO,
        message: Optional[str] = None,
    ) -> None:
        """Echo ``message`` to the console and, when persisting, append the event."""
        if message:
            self._logger.log(level, message)
        if not self.persist:
            return
        record: Dict[str, Any] = {
            "timestamp": _utc_now().isoformat(timespec="seconds"),
            "run_id": self.run_id,
            "event": event_type,
            "level": logging.getLevelName(level),
        }
        if payload:
            record["payload"] = to_jsonable(payload)
        line = json.dumps(record, sort_keys=True)
        with self._lock, self.events_path.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")

    def log_state(self, event_type: str, cosmo, *, message: Optional[str] = None) -> None:
        """Record the parameters and current redshift state of a cosmology engine."""
        self.log_event(event_type, cosmo.as_dict(), message=message)

    def _artifact(self, name: str | Path) -> Path:
        path = self.run_dir / Path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def save_json(self, name: str | Path, data: Any) -> Path:
        path = self._artifact(name)
        path.write_text(json.dumps(to_jsonable(data), indent=2, sort_keys=True) + "\n",
                        encoding="utf-8")
        return path

    def save_dataframe(self, name: str | Path, frame: pd.DataFrame, *, index: bool = False) -> Path:
        path = self._artifact(name)
        frame.to_csv(path, index=index, float_format="%.10g")
        return path


def collect_environment_metadata() -> Dict[str, Any]:
    """Interpreter, platform and numerical stack versions for ``metadata.json``."""
    return {
        "python_version": platform.python_version(),
        "python_executable": sys.executable,
        "platform": platform.platform(),
        "numpy_version": np.__version__,
        "pandas_version": pd.__version__,
        "yaml_version": getattr(yaml, "__version__", "unknown"),
    }


__all__ = [
    "StructuredLogger",
    "collect_environment_metadata",
    "compute_sha256",
    "to_jsonable",
]
