"""
Run store: local persistence of past projections.

Purpose
-------
Keeps ``{id, name, inputs, results, timestamp}`` records keyed by id in a
single JSON document::

    {
      "schema_version": "1.0.0",
      "runs": [ {"id": ..., "name": ..., "inputs": {...},
                 "results": {...}, "timestamp": "2025-01-01T12:00:00+00:00"} ]
    }

Writes go to a temporary file that then replaces the document, so a crash
never leaves a half-written store behind.

Example
-------
>>> from pathlib import Path
>>> store = RunStore(Path("runs.json"))
>>> record = store.save("Baseline", inputs, project(inputs))
>>> store.get(record.id).results == record.results
True
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .exceptions import ConfigurationError, RunNotFoundError
from .serialization import (
    SCHEMA_VERSION,
    check_schema_version,
    input_from_dict,
    input_to_dict,
    result_from_dict,
    result_to_dict,
)
from .types import RunRecordDict

if TYPE_CHECKING:
    from .engine import SimulationInput, SimulationResult

__all__ = [
    "RunRecord",
    "RunStore",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunRecord:
    """
    One stored projection.

    Attributes
    ----------
    id : str
        Unique identifier (uuid4 hex).
    name : str
        User-chosen label.
    inputs : SimulationInput
        Inputs the projection ran with.
    results : SimulationResult
        Complete projection output.
    timestamp : datetime
        Creation time, timezone-aware UTC.
    """
    id: str
    name: str
    inputs: SimulationInput
    results: SimulationResult
    timestamp: datetime

    def to_dict(self) -> RunRecordDict:
        return {
            "id": self.id,
            "name": self.name,
            "inputs": input_to_dict(self.inputs),
            "results": result_to_dict(self.results),
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunRecord":
        try:
            timestamp = datetime.fromisoformat(data["timestamp"])
            return cls(
                id=str(data["id"]),
                name=str(data["name"]),
                inputs=input_from_dict(data["inputs"]),
                results=result_from_dict(data["results"]),
                timestamp=timestamp,
            )
        except KeyError as e:
            raise ConfigurationError(f"Stored run is missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Stored run has an invalid field: {e}") from e


class RunStore:
    """
    JSON-file backed collection of RunRecords.

    Parameters
    ----------
    path : Path
        Location of the store document. Created on first save.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"RunStore(path={str(self.path)!r})"

    # -------------------- Reading --------------------

    def _read(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Run store {self.path} is not valid JSON: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get("runs"), list):
            raise ConfigurationError(
                f"Run store {self.path} is not a JSON object with a 'runs' list."
            )
        check_schema_version(document, source=f"Run store {self.path.name}")
        return document["runs"]

    def list(self) -> List[RunRecord]:
        """All stored runs, newest first."""
        records = [RunRecord.from_dict(r) for r in self._read()]
        return sorted(records, key=lambda r: r.timestamp, reverse=True)

    def get(self, run_id: str) -> RunRecord:
        """Return the run with *run_id*; raise RunNotFoundError if absent."""
        for raw in self._read():
            if raw.get("id") == run_id:
                return RunRecord.from_dict(raw)
        raise RunNotFoundError(f"No run with id '{run_id}' in {self.path}")

    def __len__(self) -> int:
        return len(self._read())

    def __contains__(self, run_id: object) -> bool:
        return any(raw.get("id") == run_id for raw in self._read())

    # -------------------- Writing --------------------

    def _write(self, runs: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {"schema_version": SCHEMA_VERSION, "runs": runs}
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def save(
        self,
        name: str,
        inputs: SimulationInput,
        results: SimulationResult,
        *,
        timestamp: Optional[datetime] = None,
    ) -> RunRecord:
        """
        Store a projection and return its record.

        Parameters
        ----------
        name : str
            Label for the run (non-empty).
        inputs, results
            The projection to store.
        timestamp : datetime, optional
            Defaults to now (UTC). Naive datetimes are taken as UTC.
        """
        if not name or not name.strip():
            raise ValueError("Run name must not be empty.")
        timestamp = timestamp or datetime.now(timezone.utc)
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        record = RunRecord(
            id=uuid.uuid4().hex,
            name=name.strip(),
            inputs=inputs,
            results=results,
            timestamp=timestamp,
        )
        runs = self._read()
        runs.append(record.to_dict())
        self._write(runs)
        logger.info("Saved run %s (%s) to %s", record.id, record.name, self.path)
        return record

    def delete(self, run_id: str) -> bool:
        """Remove the run with *run_id*. Returns False if it was not stored."""
        runs = self._read()
        kept = [r for r in runs if r.get("id") != run_id]
        if len(kept) == len(runs):
            return False
        self._write(kept)
        logger.info("Deleted run %s from %s", run_id, self.path)
        return True

    def clear(self) -> int:
        """Remove every run. Returns the number removed."""
        runs = self._read()
        if runs:
            self._write([])
        return len(runs)
