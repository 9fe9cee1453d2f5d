"""Trace context for embedding, upsert and search operations.

Provides trace_id, trace_type (query/ingestion), per-stage timing,
a ``stage_timer`` context manager, finish() lifecycle and to_dict()
serialisation for JSON Lines output.
"""

import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Literal, Optional


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class TraceContext:
    """Request-scoped record of the stages one operation went through.

    Attributes:
        trace_type: ``"ingestion"`` for upserts, ``"query"`` for searches.
        trace_id: Unique identifier for this trace.
        started_at: ISO-8601 creation timestamp.
        finished_at: ISO-8601 timestamp set by ``finish()``, or None.
        stages: Recorded stage entries in order.
        metadata: Arbitrary key/value pairs (collection, provider...).
    """

    trace_type: Literal["query", "ingestion"] = "query"
    trace_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: str = field(default_factory=_utc_now)
    finished_at: Optional[str] = field(default=None)
    stages: List[Dict[str, Any]] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    _start_mono: float = field(default_factory=time.monotonic, repr=False)
    _finish_mono: Optional[float] = field(default=None, repr=False)
    _stage_timings: Dict[str, float] = field(default_factory=dict, repr=False)

    def record_stage(
        self,
        stage_name: str,
        data: Dict[str, Any],
        elapsed_ms: Optional[float] = None,
    ) -> None:
        """Append a stage entry.

        Args:
            stage_name: Stage name, e.g. ``"embedding_generation"``.
            data: Stage payload (provider, counts, ...).
            elapsed_ms: Optional elapsed time to attach to the stage.
        """
        entry: Dict[str, Any] = {
            "stage": stage_name,
            "timestamp": _utc_now(),
            "data": data,
        }
        if elapsed_ms is not None:
            entry["elapsed_ms"] = round(elapsed_ms, 2)
            self._stage_timings[stage_name] = elapsed_ms
        self.stages.append(entry)

    @contextmanager
    def stage_timer(self, stage_name: str, data: Optional[Dict[str, Any]] = None) -> Iterator[Dict[str, Any]]:
        """Time a block and record it as a stage.

        The yielded dict may be filled in by the block; it becomes the
        stage payload. The stage is recorded even if the block raises.
        """
        payload: Dict[str, Any] = dict(data or {})
        start = time.monotonic()
        try:
            yield payload
        finally:
            self.record_stage(stage_name, payload, elapsed_ms=(time.monotonic() - start) * 1000.0)

    def finish(self) -> None:
        self._finish_mono = time.monotonic()
        self.finished_at = _utc_now()

    def elapsed_ms(self, stage_name: Optional[str] = None) -> float:
        """Return elapsed milliseconds for a stage, or for the whole trace.

        Raises:
            KeyError: If *stage_name* has no recorded timing.
        """
        if stage_name is not None:
            if stage_name not in self._stage_timings:
                raise KeyError(f"Stage '{stage_name}' has no recorded timing")
            return self._stage_timings[stage_name]

        end = self._finish_mono if self._finish_mono is not None else time.monotonic()
        return (end - self._start_mono) * 1000.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trace_id": self.trace_id,
            "trace_type": self.trace_type,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "total_elapsed_ms": round(self.elapsed_ms(), 2),
            "stages": list(self.stages),
            "metadata": dict(self.metadata),
        }

    def get_stage_data(self, stage_name: str) -> Optional[Dict[str, Any]]:
        """Return the payload of the latest stage with this name, or None."""
        for entry in reversed(self.stages):
            if entry.get("stage") == stage_name:
                return entry.get("data")
        return None
