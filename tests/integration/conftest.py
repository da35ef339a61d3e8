"""
Integration test fixtures and configuration.

This module provides an in-memory WorkflowMax transport so that the whole
pipeline (Timetrap database, YAML mapping, HTTP client, XML parsing,
reconciliation and upload) can run end-to-end without network access.
"""

import xml.etree.ElementTree as ET
from typing import Dict, List
from urllib.parse import urlparse

import pytest
import requests


class FakeWorkflowMaxSession:
    """
    Stands in for requests.Session and answers like the WorkflowMax API.

    Time added through /time.api/add is stored and returned by later
    /time.api/staff/{id} queries, so repeated sync runs see their own
    uploads.
    """

    def __init__(self, staff: List[Dict[str, str]], api_key: str, account_key: str):
        self.staff = staff
        self.api_key = api_key
        self.account_key = account_key
        self.times: List[Dict[str, str]] = []
        self.calls: List[tuple] = []
        self.fail_next_add = False

    def _respond(self, body: str, status_code: int = 200) -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        response.reason = "OK" if status_code == 200 else "Error"
        response._content = body.encode("utf-8")
        return response

    def request(self, method, url, params=None, data=None, headers=None, timeout=None):
        path = urlparse(url).path
        self.calls.append((method, path, dict(params or {})))

        if (params or {}).get("apiKey") != self.api_key or (params or {}).get(
            "accountKey"
        ) != self.account_key:
            return self._respond("", status_code=401)

        if method == "GET" and path == "/staff.api/list":
            staff_xml = "".join(
                f"<Staff><ID>{s['id']}</ID><Name>{s['name']}</Name>"
                f"<Email>{s['email']}</Email></Staff>"
                for s in self.staff
            )
            return self._respond(
                f"<Response><Status>OK</Status><StaffList>{staff_xml}</StaffList></Response>"
            )

        if method == "GET" and path.startswith("/time.api/staff/"):
            staff_id = path.rsplit("/", 1)[-1]
            day = params["from"]
            times_xml = "".join(
                f"<Time><ID>{i}</ID><Job><ID>{t['job']}</ID></Job>"
                f"<Task><ID>{t['task']}</ID></Task><Minutes>{t['minutes']}</Minutes></Time>"
                for i, t in enumerate(self.times, start=1)
                if t["staff"] == staff_id and t["date"] == day
            )
            return self._respond(
                f"<Response><Status>OK</Status><Times>{times_xml}</Times></Response>"
            )

        if method == "POST" and path == "/time.api/add":
            if self.fail_next_add:
                self.fail_next_add = False
                return self._respond(
                    "<Response><Status>ERROR</Status>"
                    "<ErrorDescription>Job is closed</ErrorDescription></Response>"
                )
            timesheet = ET.fromstring(data)
            self.times.append(
                {
                    "job": timesheet.findtext("Job"),
                    "task": timesheet.findtext("Task"),
                    "staff": timesheet.findtext("Staff"),
                    "date": timesheet.findtext("Date"),
                    "minutes": timesheet.findtext("Minutes"),
                    "note": timesheet.findtext("Note"),
                }
            )
            return self._respond("<Response><Status>OK</Status></Response>")

        return self._respond("", status_code=404)

    def count(self, method: str, prefix: str) -> int:
        """Number of calls made with a method to paths starting with prefix."""
        return sum(1 for m, p, _ in self.calls if m == method and p.startswith(prefix))


@pytest.fixture
def fake_session(test_env_vars) -> FakeWorkflowMaxSession:
    """Fake WorkflowMax with the configured user on its staff list."""
    return FakeWorkflowMaxSession(
        staff=[
            {"id": "100", "name": "Someone Else", "email": "else@example.org"},
            {"id": "200", "name": "Me", "email": "me@example.org"},
        ],
        api_key=test_env_vars["WFM_API_KEY"],
        account_key=test_env_vars["WFM_ACCOUNT_KEY"],
    )
