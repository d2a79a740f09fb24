import logging
import os
from typing import Any

import pytest

# Coverage in subprocesses; the collector teardown assertion breaks under act
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture  # type: ignore[misc]
def debug_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Captures DEBUG records from every ``lumen.*`` logger."""
    caplog.set_level(logging.DEBUG, logger="lumen")
    return caplog
