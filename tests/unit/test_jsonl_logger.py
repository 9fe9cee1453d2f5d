"""Tests for the JSON Lines logging helpers."""

import io
import json
import logging
import sys
from pathlib import Path

import pytest

from embedvec.core.trace import TraceContext
from embedvec.observability.logger import JSONFormatter, configure_logging, get_logger, write_trace


def _record(msg: str = "hello", level: int = logging.INFO, exc_info=None, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="embedvec.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_required_keys(self) -> None:
        obj = json.loads(JSONFormatter().format(_record("upserted", level=logging.WARNING)))

        assert obj["message"] == "upserted"
        assert obj["level"] == "WARNING"
        assert obj["logger"] == "embedvec.test"
        assert "timestamp" in obj

    def test_extra_fields_merged(self) -> None:
        obj = json.loads(JSONFormatter().format(_record(collection="hotels", count=3)))

        assert obj["collection"] == "hotels"
        assert obj["count"] == 3

    def test_non_serialisable_extra_stringified(self) -> None:
        obj = json.loads(JSONFormatter().format(_record(path=Path("data"))))

        assert obj["path"] == "data"

    def test_single_line(self) -> None:
        assert "\n" not in JSONFormatter().format(_record("multi\nline"))

    def test_exception_included(self) -> None:
        try:
            raise ValueError("bad vector")
        except ValueError:
            exc_info = sys.exc_info()

        obj = json.loads(JSONFormatter().format(_record("failed", level=logging.ERROR, exc_info=exc_info)))

        assert "ValueError: bad vector" in obj["exception"]


class TestConfigureLogging:
    @pytest.fixture
    def root_handler(self):
        root = logging.getLogger()
        handler = logging.StreamHandler(io.StringIO())
        previous_level = root.level
        root.addHandler(handler)
        yield handler
        root.removeHandler(handler)
        root.setLevel(previous_level)

    def test_json_format_and_level(self, root_handler) -> None:
        configure_logging({"log_level": "warning", "log_format": "json"})

        logging.getLogger("embedvec.test.configure").warning("store ready", extra={"count": 3})

        assert logging.getLogger().level == logging.WARNING
        obj = json.loads(root_handler.stream.getvalue().strip().splitlines()[-1])
        assert obj["message"] == "store ready"
        assert obj["count"] == 3

    def test_text_format_by_default(self, root_handler) -> None:
        configure_logging({})

        logging.getLogger("embedvec.test.configure").info("plain")

        assert logging.getLogger().level == logging.INFO
        assert root_handler.stream.getvalue().rstrip().endswith("INFO embedvec.test.configure plain")

    def test_unknown_format_rejected(self, root_handler) -> None:
        with pytest.raises(ValueError, match="log_format"):
            configure_logging({"log_format": "xml"})


class TestWriteTrace:
    def test_appends_trace_dicts(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "traces.jsonl"
        tc = TraceContext(trace_type="ingestion")
        tc.record_stage("vector_upsert", {"count": 5}, elapsed_ms=1.0)
        tc.finish()

        write_trace(tc.to_dict(), path)
        write_trace({"trace_type": "query", "stages": []}, path)

        lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        assert [line["trace_type"] for line in lines] == ["ingestion", "query"]
        assert lines[0]["stages"][0]["stage"] == "vector_upsert"


def test_get_logger_returns_named_logger() -> None:
    lgr = get_logger("embedvec.test.named", log_level="debug")

    assert lgr.name == "embedvec.test.named"
    assert logging.getLogger("chromadb").level == logging.WARNING
