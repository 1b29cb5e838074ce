import logging
import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from infrastructure.utils import EventLogger, format_kv, reset_correlation_id, set_correlation_id


class TestLogFormat(unittest.TestCase):
    def test_format_kv_skips_none_and_quotes_strings(self) -> None:
        line = format_kv(event="saved", user_id="u1", missing=None, chars=5, created=True)
        self.assertEqual(line, 'event="saved" user_id="u1" chars=5 created=true')

    def test_format_kv_clips_long_values(self) -> None:
        line = format_kv(content="x" * 500)
        self.assertIn("...(+380)", line)
        self.assertLess(len(line), 200)

    def test_format_kv_renders_datetimes(self) -> None:
        ts = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        self.assertEqual(format_kv(at=ts), "at=2026-01-02T03:04:05+00:00")

    def test_event_logger_includes_correlation_id(self) -> None:
        logger = logging.getLogger("test.memo.events")
        token = set_correlation_id("corr-1")
        try:
            with self.assertLogs(logger, level="INFO") as captured:
                EventLogger(logger, "[memo]", base_fields={"op": "save"}).info("saved", chars=3)
        finally:
            reset_correlation_id(token)
        self.assertEqual(len(captured.output), 1)
        self.assertIn('correlation_id="corr-1"', captured.output[0])
        self.assertIn('event="saved"', captured.output[0])
        self.assertIn('op="save"', captured.output[0])
