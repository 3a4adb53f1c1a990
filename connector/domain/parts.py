from __future__ import annotations

from typing import Any, Dict

from .entry import Entry, format_date


class Pair(Entry):
    """Name/value couple used for criterias, infos and build reports."""

    def __init__(self, name=None, value=None) -> None:
        self.name = name
        self.value = value

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value}


class Step(Entry):
    def __init__(self, name=None, description=None, start_date=None, end_date=None,
                 status=None, result=None, order=None) -> None:
        self.name = name
        self.description = description
        self.start_date = start_date
        self.end_date = end_date
        self.status = status
        self.result = result
        self.order = order

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "startDate": format_date(self.start_date),
            "endDate": format_date(self.end_date),
            "status": self.status,
            "result": self.result,
            "order": self.order,
        }


class Commit(Entry):
    def __init__(self, build_id=None, build_name=None, commit_id=None, url=None,
                 author=None, date_committed=None) -> None:
        self.build_id = build_id
        self.build_name = build_name
        self.commit_id = commit_id
        self.url = url
        self.author = author
        self.date_committed = date_committed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "buildId": self.build_id,
            "buildName": self.build_name,
            "commitId": self.commit_id,
            "url": self.url,
            "author": self.author,
            "dateCommitted": format_date(self.date_committed),
        }
