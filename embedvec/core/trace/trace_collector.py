"""Trace collector: persists finished traces as JSON Lines."""

import logging
from pathlib import Path

from embedvec.core.settings import resolve_path
from embedvec.core.trace.trace_context import TraceContext
from embedvec.observability.logger import write_trace

logger = logging.getLogger(__name__)

_DEFAULT_TRACES_PATH = resolve_path("logs/traces.jsonl")


class TraceCollector:
    """Appends traces to a ``traces.jsonl`` file, one object per line.

    Args:
        traces_path: Output file; parent directories are created.
    """

    def __init__(self, traces_path: str | Path = _DEFAULT_TRACES_PATH) -> None:
        self._path = Path(traces_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def collect(self, trace: TraceContext) -> None:
        """Write *trace*, finishing it first if needed.

        Write failures are logged, not raised.
        """
        if trace.finished_at is None:
            trace.finish()
        try:
            write_trace(trace.to_dict(), self._path)
        except OSError:
            logger.exception("Failed to write trace %s", trace.trace_id)

    @property
    def path(self) -> Path:
        return self._path
