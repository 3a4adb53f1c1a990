from __future__ import annotations

"""Build, report and test records as understood by the BATAM ingestion side.

Fields map one to one onto the camelCase keys of the JSON payload. Nothing
is validated here; the required-field rules depend on the operation and
live in ``connector.domain.validation``.
"""

from typing import Any, Dict, List, Mapping, Optional

from .entry import Entry, format_date, serialize_list
from .parts import Commit, Pair, Step


class BuildEntry(Entry):
    def __init__(
        self,
        id: Optional[str] = None,
        name: Optional[str] = None,
        start_date=None,
        end_date=None,
        status: Optional[str] = None,
        description: Optional[str] = None,
        criterias: Optional[List[Pair]] = None,
        infos: Optional[List[Pair]] = None,
        reports: Optional[List[Pair]] = None,
        steps: Optional[List[Step]] = None,
        commits: Optional[List[Commit]] = None,
        override: bool = False,
        is_custom_format_enabled: bool = False,
        custom_format: Optional[str] = None,
        custom_entry: Optional[str] = None,
        screenshot_url: Optional[str] = None,
        custom_attributes: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.id = id
        self.name = name
        self.start_date = start_date
        self.end_date = end_date
        self.status = status
        self.description = description
        self.criterias = criterias
        self.infos = infos
        self.reports = reports
        self.steps = steps
        self.commits = commits
        self.override = override
        self.is_custom_format_enabled = is_custom_format_enabled
        self.custom_format = custom_format
        self.custom_entry = custom_entry
        self.screenshot_url = screenshot_url
        self.custom_attributes = custom_attributes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "startDate": format_date(self.start_date),
            "endDate": format_date(self.end_date),
            "status": self.status,
            "description": self.description,
            "criterias": serialize_list(self.criterias),
            "infos": serialize_list(self.infos),
            "reports": serialize_list(self.reports),
            "steps": serialize_list(self.steps),
            "commits": serialize_list(self.commits),
            "override": self.override,
            "isCustomFormatEnabled": self.is_custom_format_enabled,
            "customFormat": self.custom_format,
            "customEntry": self.custom_entry,
            "screenshotUrl": self.screenshot_url,
            "customAttributes": dict(self.custom_attributes) if self.custom_attributes is not None else None,
        }


class ReportEntry(Entry):
    def __init__(
        self,
        id: Optional[str] = None,
        name: Optional[str] = None,
        build_id: Optional[str] = None,
        build_name: Optional[str] = None,
        description: Optional[str] = None,
        start_date=None,
        end_date=None,
        status: Optional[str] = None,
        logs: Optional[List[str]] = None,
        is_custom_format_enabled: bool = False,
        custom_format: Optional[str] = None,
        custom_entry: Optional[str] = None,
        screenshot_url: Optional[str] = None,
        custom_attributes: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.id = id
        self.name = name
        self.build_id = build_id
        self.build_name = build_name
        self.description = description
        self.start_date = start_date
        self.end_date = end_date
        self.status = status
        self.logs = logs
        self.is_custom_format_enabled = is_custom_format_enabled
        self.custom_format = custom_format
        self.custom_entry = custom_entry
        self.screenshot_url = screenshot_url
        self.custom_attributes = custom_attributes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "buildId": self.build_id,
            "buildName": self.build_name,
            "description": self.description,
            "startDate": format_date(self.start_date),
            "endDate": format_date(self.end_date),
            "status": self.status,
            "logs": serialize_list(self.logs),
            "isCustomFormatEnabled": self.is_custom_format_enabled,
            "customFormat": self.custom_format,
            "customEntry": self.custom_entry,
            "screenshotUrl": self.screenshot_url,
            "customAttributes": dict(self.custom_attributes) if self.custom_attributes is not None else None,
        }


class TestEntry(Entry):
    # keeps pytest from collecting this class when imported into test modules
    __test__ = False

    def __init__(
        self,
        id: Optional[str] = None,
        build_id: Optional[str] = None,
        build_name: Optional[str] = None,
        report_id: Optional[str] = None,
        report_name: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        start_date=None,
        end_date=None,
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
        date_created=None,
        approval_status: Optional[str] = None,
        approved_by: Optional[str] = None,
        approved_date=None,
        comments: Optional[str] = None,
    ) -> None:
        self.id = id
        self.build_id = build_id
        self.build_name = build_name
        self.report_id = report_id
        self.report_name = report_name
        self.name = name
        self.description = description
        self.start_date = start_date
        self.end_date = end_date
        self.status = status
        self.criterias = criterias
        self.tags = tags
        self.steps = steps
        self.log = log
        self.override = override
        self.is_custom_format_enabled = is_custom_format_enabled
        self.custom_format = custom_format
        self.custom_entry = custom_entry
        self.jira_test_id = jira_test_id
        self.jira_req_id = jira_req_id
        self.execution_type = execution_type
        self.custom_attributes = custom_attributes
        self.authored_by = authored_by
        self.date_created = date_created
        self.approval_status = approval_status
        self.approved_by = approved_by
        self.approved_date = approved_date
        self.comments = comments

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "buildId": self.build_id,
            "buildName": self.build_name,
            "reportId": self.report_id,
            "reportName": self.report_name,
            "name": self.name,
            "description": self.description,
            "startDate": format_date(self.start_date),
            "endDate": format_date(self.end_date),
            "status": self.status,
            "criterias": serialize_list(self.criterias),
            "tags": serialize_list(self.tags),
            "steps": serialize_list(self.steps),
            "log": self.log,
            "override": self.override,
            "isCustomFormatEnabled": self.is_custom_format_enabled,
            "customFormat": self.custom_format,
            "customEntry": self.custom_entry,
            "jiraTestId": self.jira_test_id,
            "jiraReqId": self.jira_req_id,
            "executionType": self.execution_type,
            "customAttributes": dict(self.custom_attributes) if self.custom_attributes is not None else None,
            "authoredBy": self.authored_by,
            "dateCreated": format_date(self.date_created),
            "approvalStatus": self.approval_status,
            "approvedBy": self.approved_by,
            "approvedDate": format_date(self.approved_date),
            "comments": self.comments,
        }
