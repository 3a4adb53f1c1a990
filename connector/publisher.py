from __future__ import annotations

"""Turns records into ``{"action", "data"}`` messages and delivers them.

With the publisher flag on, messages go to the configured queue through
the default exchange. With it off they are printed to stdout instead, so
the same calls can run without a broker. Either way the message string is
returned to the caller.
"""

import logging
import time
from typing import Optional, TextIO

from common.retry import RETRY_ON_FAILURE_ATTEMPTS, RETRY_ON_FAILURE_DELAY, retry_on_failure
from protocol.rabbit_wrapper import ConnectionManager

from .domain.entries import BuildEntry, ReportEntry, TestEntry
from .domain.entry import Entry

publisher_logger = logging.getLogger("batam.publisher")

ACTION_FIELD = "action"
DATA_FIELD = "data"

CREATE_BUILD_ACTION = "create_build"
UPDATE_BUILD_ACTION = "update_build"
CREATE_REPORT_ACTION = "create_report"
UPDATE_REPORT_ACTION = "update_report"
CREATE_TEST_ACTION = "create_test"
UPDATE_TEST_ACTION = "update_test"
RUN_ANALYSIS_ACTION = "run_analysis"

ACTIONS = (
    CREATE_BUILD_ACTION,
    UPDATE_BUILD_ACTION,
    CREATE_REPORT_ACTION,
    UPDATE_REPORT_ACTION,
    CREATE_TEST_ACTION,
    UPDATE_TEST_ACTION,
    RUN_ANALYSIS_ACTION,
)


def build_envelope(action: str, data: str) -> str:
    """Wrap already serialized JSON *data*; it is embedded raw, not quoted."""
    return f'{{"{ACTION_FIELD}": "{action}", "{DATA_FIELD}": {data}}}'


class MessagePublisher:

    def __init__(
        self,
        connection: ConnectionManager,
        output: Optional[TextIO] = None,
        retry_attempts: int = RETRY_ON_FAILURE_ATTEMPTS,
        retry_delay: float = RETRY_ON_FAILURE_DELAY,
        sleep=time.sleep,
    ) -> None:
        self._connection = connection
        # None means whatever sys.stdout is at print time
        self._output = output
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self.sleep = sleep

    @property
    def connection(self) -> ConnectionManager:
        return self._connection

    def _publish(self, action: str, entry: Entry) -> str:
        with self._connection.lock:
            self._connection.ensure_ready()

            message = build_envelope(action, entry.to_json())
            if self._connection.publish_enabled:
                self._connection.publish(message.encode("utf-8"))
                publisher_logger.info(f"Published {action} to queue '{self._connection.queue}'")
            else:
                print(message, file=self._output)
                publisher_logger.debug(f"Printed {action} message, publisher is off")

            return message

    @retry_on_failure
    def create_build(self, build: BuildEntry) -> str:
        return self._publish(CREATE_BUILD_ACTION, build)

    @retry_on_failure
    def update_build(self, build: BuildEntry) -> str:
        return self._publish(UPDATE_BUILD_ACTION, build)

    @retry_on_failure
    def run_analysis(self, build: BuildEntry) -> str:
        """Ask BATAM to analyze a build. The build's ``override`` flag tells
        whether test results replace those of an already analyzed build."""
        return self._publish(RUN_ANALYSIS_ACTION, build)

    @retry_on_failure
    def create_report(self, report: ReportEntry) -> str:
        return self._publish(CREATE_REPORT_ACTION, report)

    @retry_on_failure
    def update_report(self, report: ReportEntry) -> str:
        return self._publish(UPDATE_REPORT_ACTION, report)

    @retry_on_failure
    def create_test(self, test: TestEntry) -> str:
        return self._publish(CREATE_TEST_ACTION, test)

    @retry_on_failure
    def update_test(self, test: TestEntry) -> str:
        return self._publish(UPDATE_TEST_ACTION, test)
