from __future__ import annotations

"""Keyword-argument API on top of :class:`MessagePublisher`.

Typical use::

    connector = Connector()
    connector.begin_connection()
    connector.create_build(name="nightly-42", start_date=date.today())
    connector.end_connection()

Every method validates its arguments before any broker interaction and
raises ``InvalidArgumentError`` when a required field is missing.
"""

import functools
import logging
import time
from datetime import date, datetime
from typing import List, Mapping, Optional, Union

import pika

from common.retry import RETRY_ON_FAILURE_ATTEMPTS, RETRY_ON_FAILURE_DELAY
from protocol.rabbit_wrapper import ConnectionManager

from .config.config_init import initialize_config
from .domain.entries import BuildEntry, ReportEntry, TestEntry
from .domain.parts import Commit, Pair, Step
from .domain.validation import (
    require,
    require_one_of,
    validate_build_identity,
    validate_custom_format,
    validate_report_identity,
)
from .publisher import MessagePublisher

connector_logger = logging.getLogger("batam.connector")

DateLike = Union[date, datetime, str, None]


class Connector:

    def __init__(
        self,
        config_file: Optional[str] = None,
        connection_factory=pika.BlockingConnection,
        config_loader=None,
        output=None,
        retry_attempts: int = RETRY_ON_FAILURE_ATTEMPTS,
        retry_delay: float = RETRY_ON_FAILURE_DELAY,
        sleep=time.sleep,
    ) -> None:
        if config_loader is None:
            config_loader = functools.partial(initialize_config, config_file)

        self.connection = ConnectionManager(
            connection_factory=connection_factory,
            config_loader=config_loader,
            retry_attempts=retry_attempts,
            retry_delay=retry_delay,
            sleep=sleep,
        )
        self.publisher = MessagePublisher(
            self.connection,
            output=output,
            retry_attempts=retry_attempts,
            retry_delay=retry_delay,
            sleep=sleep,
        )

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------
    def begin_connection(self, host=None, username=None, password=None, port=None, vhost=None, queue=None,
                         publisher=None) -> None:
        """Connect using explicit values, falling back to the ones already
        in use and then to BATAM_* env vars and the property file.

        ``publisher`` set to anything but "on"/"true" prints messages to
        stdout instead of sending them.
        """
        self.connection.begin_connection(host=host, username=username, password=password, port=port,
                                         vhost=vhost, queue=queue, publisher=publisher)
        connector_logger.info(f"Connector ready, publisher is {'on' if self.connection.publish_enabled else 'off'}")

    def end_connection(self) -> None:
        self.connection.end_connection()
        connector_logger.info("Connector connection ended")

    # ------------------------------------------------------------------
    # Builds
    # ------------------------------------------------------------------
    def create_build(
        self,
        id: Optional[str] = None,
        name: Optional[str] = None,
        start_date: DateLike = None,
        end_date: DateLike = None,
        status: Optional[str] = None,
        description: Optional[str] = None,
        criterias: Optional[List[Pair]] = None,
        infos: Optional[List[Pair]] = None,
        reports: Optional[List[Pair]] = None,
        steps: Optional[List[Step]] = None,
        commits: Optional[List[Commit]] = None,
        is_custom_format_enabled: bool = False,
        custom_format: Optional[str] = None,
        custom_entry: Optional[str] = None,
        screenshot_url: Optional[str] = None,
        custom_attributes: Optional[Mapping[str, str]] = None,
    ) -> str:
        require(name, "name")
        require(start_date, "start_date")
        validate_custom_format(is_custom_format_enabled, custom_format)

        build = BuildEntry(id=id, name=name, start_date=start_date, end_date=end_date, status=status,
                           description=description, criterias=criterias, infos=infos, reports=reports,
                           steps=steps, commits=commits, is_custom_format_enabled=is_custom_format_enabled,
                           custom_format=custom_format, custom_entry=custom_entry,
                           screenshot_url=screenshot_url, custom_attributes=custom_attributes)
        return self.publisher.create_build(build)

    def add_build_commits(self, id: Optional[str] = None, name: Optional[str] = None,
                          commits: Optional[List[Commit]] = None) -> str:
        validate_build_identity(id, name)
        return self.publisher.update_build(BuildEntry(id=id, name=name, commits=commits))

    def add_build_infos(self, id: Optional[str] = None, name: Optional[str] = None,
                        infos: Optional[List[Pair]] = None) -> str:
        validate_build_identity(id, name)
        return self.publisher.update_build(BuildEntry(id=id, name=name, infos=infos))

    def add_build_reports(self, id: Optional[str] = None, name: Optional[str] = None,
                          reports: Optional[List[Pair]] = None) -> str:
        validate_build_identity(id, name)
        return self.publisher.update_build(BuildEntry(id=id, name=name, reports=reports))

    def add_build_steps(self, id: Optional[str] = None, name: Optional[str] = None,
                        steps: Optional[List[Step]] = None) -> str:
        validate_build_identity(id, name)
        return self.publisher.update_build(BuildEntry(id=id, name=name, steps=steps))

    def update_build_end_date(self, id: Optional[str] = None, name: Optional[str] = None,
                              end_date: DateLike = None) -> str:
        validate_build_identity(id, name)
        return self.publisher.update_build(BuildEntry(id=id, name=name, end_date=end_date))

    def update_build_status(self, id: Optional[str] = None, name: Optional[str] = None,
                            status: Optional[str] = None) -> str:
        validate_build_identity(id, name)
        return self.publisher.update_build(BuildEntry(id=id, name=name, status=status))

    def run_analysis(self, id: Optional[str] = None, name: Optional[str] = None, override: bool = False) -> str:
        """``override`` is True when tests overwrite results of an already analyzed build."""
        validate_build_identity(id, name)
        return self.publisher.run_analysis(BuildEntry(id=id, name=name, override=override))

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    def create_report(
        self,
        id: Optional[str] = None,
        name: Optional[str] = None,
        build_id: Optional[str] = None,
        build_name: Optional[str] = None,
        description: Optional[str] = None,
        start_date: DateLike = None,
        end_date: DateLike = None,
        status: Optional[str] = None,
        logs: Optional[List[str]] = None,
        is_custom_format_enabled: bool = False,
        custom_format: Optional[str] = None,
        custom_entry: Optional[str] = None,
        screenshot_url: Optional[str] = None,
        custom_attributes: Optional[Mapping[str, str]] = None,
    ) -> str:
        require(name, "name")
        require_one_of(build_id=build_id, build_name=build_name)
        validate_custom_format(is_custom_format_enabled, custom_format)

        report = ReportEntry(id=id, name=name, build_id=build_id, build_name=build_name,
                             description=description, start_date=start_date, end_date=end_date,
                             status=status, logs=logs, is_custom_format_enabled=is_custom_format_enabled,
                             custom_format=custom_format, custom_entry=custom_entry,
                             screenshot_url=screenshot_url, custom_attributes=custom_attributes)
        return self.publisher.create_report(report)

    def add_report_logs(self, id: Optional[str] = None, name: Optional[str] = None, build_id: Optional[str] = None,
                        build_name: Optional[str] = None, logs: Optional[List[str]] = None) -> str:
        validate_report_identity(id, name, build_id, build_name)
        return self.publisher.update_report(
            ReportEntry(id=id, name=name, build_id=build_id, build_name=build_name, logs=logs))

    def update_report_status(self, id: Optional[str] = None, name: Optional[str] = None,
                             build_id: Optional[str] = None, build_name: Optional[str] = None,
                             status: Optional[str] = None) -> str:
        validate_report_identity(id, name, build_id, build_name)
        return self.publisher.update_report(
            ReportEntry(id=id, name=name, build_id=build_id, build_name=build_name, status=status))

    def update_report_end_date(self, id: Optional[str] = None, name: Optional[str] = None,
                               build_id: Optional[str] = None, build_name: Optional[str] = None,
                               end_date: DateLike = None) -> str:
        validate_report_identity(id, name, build_id, build_name)
        return self.publisher.update_report(
            ReportEntry(id=id, name=name, build_id=build_id, build_name=build_name, end_date=end_date))

    # ------------------------------------------------------------------
    # Tests
    # ------------------------------------------------------------------
    def create_test(
        self,
        build_id: Optional[str] = None,
        build_name: Optional[str] = None,
        report_id: Optional[str] = None,
        report_name: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        start_date: DateLike = None,
        end_date: DateLike = None,
        status: Optional[str] = None,
        criterias: Optional[List[Pair]] = None,
        tags: Optional[List[str]] = None,
        steps: Optional[List[Step]] = None,
        log: Optional[str] = None,
    ) -> str:
        """Create a test inside an existing report.

        The report is found by ``report_id``, or by ``report_name`` when it
        is unique in its build (then ``build_id`` or a unique ``build_name``
        narrows it down). The test id is assigned by BATAM.
        """
        require(name, "name")
        require_one_of(report_id=report_id, report_name=report_name)

        test = TestEntry(build_id=build_id, build_name=build_name, report_id=report_id, report_name=report_name,
                         name=name, description=description, start_date=start_date, end_date=end_date,
                         status=status, criterias=criterias, tags=tags, steps=steps, log=log)
        return self.publisher.create_test(test)

    def update_test(
        self,
        id: Optional[str] = None,
        build_id: Optional[str] = None,
        build_name: Optional[str] = None,
        report_id: Optional[str] = None,
        report_name: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        start_date: DateLike = None,
        end_date: DateLike = None,
        status: Optional[str] = None,
        criterias: Optional[List[Pair]] = None,
        tags: Optional[List[str]] = None,
        steps: Optional[List[Step]] = None,
        log: Optional[str] = None,
        override: bool = False,
        is_custom_format_enabled: bool = False,
        custom_format: Optional[str] = None,
        custom_entry: Optional[str] = None,
        jira_test_id: Optional[str] = None,
        jira_req_id: Optional[str] = None,
        execution_type: Optional[str] = None,
        custom_attributes: Optional[Mapping[str, str]] = None,
        authored_by: Optional[str] = None,
        date_created: DateLike = None,
        approval_status: Optional[str] = None,
        approved_by: Optional[str] = None,
        approved_date: DateLike = None,
        comments: Optional[str] = None,
    ) -> str:
        require(name, "name")
        require_one_of(report_id=report_id, report_name=report_name)
        validate_custom_format(is_custom_format_enabled, custom_format)

        test = TestEntry(id=id, build_id=build_id, build_name=build_name, report_id=report_id,
                         report_name=report_name, name=name, description=description, start_date=start_date,
                         end_date=end_date, status=status, criterias=criterias, tags=tags, steps=steps, log=log,
                         override=override, is_custom_format_enabled=is_custom_format_enabled,
                         custom_format=custom_format, custom_entry=custom_entry, jira_test_id=jira_test_id,
                         jira_req_id=jira_req_id, execution_type=execution_type,
                         custom_attributes=custom_attributes, authored_by=authored_by, date_created=date_created,
                         approval_status=approval_status, approved_by=approved_by, approved_date=approved_date,
                         comments=comments)
        return self.publisher.update_test(test)
