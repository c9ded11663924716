"""CAMPEX — Result Sinks.

Each sink receives the finished export document exactly once per successful
run.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Union

from sqlalchemy.engine import Engine
from sqlmodel import Session

from campex.models.export_models import ExportRun
from campex.core.logging import get_logger

logger = get_logger("sinks")


class ResultSink(ABC):
    """Destination for a finished export document."""

    @abstractmethod
    def persist(self, document: Dict[str, Any]) -> None:
        ...


class JsonFileSink(ResultSink):
    """Writes the document as pretty-printed JSON."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def persist(self, document: Dict[str, Any]) -> None:
        self.path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        logger.info(f"Results saved to: {self.path}")


class DatabaseSink(ResultSink):
    """Archives the run into the ``export_runs`` table."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.last_run_id: int | None = None

    def persist(self, document: Dict[str, Any]) -> None:
        summary = document.get("summary", {})
        run = ExportRun(
            test_mode=summary.get("testMode", True),
            total_fetched=summary.get("totalFetched", 0),
            total_kept=summary.get("totalKept", 0),
            total_with_errors=summary.get("totalWithErrors", 0),
            duration_seconds=summary.get("durationSeconds", 0.0),
            result_json=json.dumps(document),
        )
        with Session(self.engine) as session:
            session.add(run)
            session.commit()
            session.refresh(run)
            self.last_run_id = run.id
        logger.info(f"Export archived as run id {self.last_run_id}")


class MemorySink(ResultSink):
    """Keeps the last document in memory (API responses, tests)."""

    def __init__(self):
        self.document: Dict[str, Any] | None = None
        self.calls = 0

    def persist(self, document: Dict[str, Any]) -> None:
        self.document = document
        self.calls += 1
