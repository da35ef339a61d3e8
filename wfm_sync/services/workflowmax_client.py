"""
WorkflowMax API client with XML handling and retry support.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Union

import requests

from wfm_sync.calculators.time_utils import next_day_key
from wfm_sync.models.remote import StaffMember, UploadRequest
from wfm_sync.services.exceptions import MissingCredentialsError, WorkflowMaxAPIError
from wfm_sync.services.retry_handler import RetryHandler
from wfm_sync.utils.logging_utils import redact_auth_params

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.workflowmax.com"

# Parsed XML: leaf text, a child mapping, or a list for repeated child tags
XmlValue = Union[None, str, Dict[str, Any], List[Any]]

# Characters XML 1.0 does not allow, even escaped
_XML_INVALID_CHARS = re.compile(
    r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]"
)


def element_to_value(element: ET.Element) -> XmlValue:
    """
    Convert an XML element into plain Python values.

    Leaf elements become their stripped text (None when empty). Elements
    with children become a dict keyed by child tag; a tag that occurs more
    than once becomes a list, a tag that occurs once stays a single value.
    This mirrors how WorkflowMax responses are usually consumed, and is why
    a day with one time record comes back as a mapping rather than a list.

    Args:
        element: Element to convert

    Returns:
        Converted value
    """
    children = list(element)
    if not children:
        text = element.text
        if text is None or not text.strip():
            return None
        return text.strip()

    result: Dict[str, Any] = {}
    for child in children:
        value = element_to_value(child)
        if child.tag not in result:
            result[child.tag] = value
        elif isinstance(result[child.tag], list):
            result[child.tag].append(value)
        else:
            result[child.tag] = [result[child.tag], value]
    return result


def _xml_text(value: str) -> str:
    """Drop characters that cannot appear in an XML document."""
    return _XML_INVALID_CHARS.sub("", value)


def _as_list(value: XmlValue) -> List[Any]:
    """Wrap a single parsed record in a list; pass lists through."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _describe_http_error(response: requests.Response) -> str:
    """Convert HTTP errors to user-friendly messages."""
    status = response.status_code

    messages = {
        401: "WorkflowMax: Authentication failed. Check your API and account keys!",
        403: "WorkflowMax: Access denied. Check the permissions of your API key!",
        404: "WorkflowMax: Resource not found. Check WFM_BASE_URL!",
        429: "WorkflowMax: Too many requests. Wait a moment and try again.",
        500: "WorkflowMax: Server error. The service may be temporarily unavailable.",
        502: "WorkflowMax: Bad gateway. The service may be temporarily unavailable.",
        503: "WorkflowMax: Service unavailable. Try again later.",
    }

    return messages.get(status, f"WorkflowMax: HTTP {status} - {response.reason}")


class WorkflowMaxClient:
    """
    Client for the WorkflowMax XML API.

    Features:
    - API key / account key authentication on every call
    - XML request bodies and XML response parsing
    - Automatic retry with exponential backoff for read calls
    - Add-entry calls are never retried (they are not idempotent)
    """

    def __init__(
        self,
        api_key: str,
        account_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        retry_handler: Optional[RetryHandler] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the WorkflowMax client.

        Args:
            api_key: WorkflowMax API key
            account_key: WorkflowMax account key
            base_url: API base URL
            timeout: Per-request timeout in seconds
            retry_handler: Custom retry handler instance for read calls
            session: Custom requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_handler = retry_handler or RetryHandler()
        self.session = session or requests.Session()
        self._auth_params = {"apiKey": api_key, "accountKey": account_key}

    @classmethod
    def from_config(cls, config, mapping=None) -> "WorkflowMaxClient":
        """
        Create a client from WfmSyncConfig settings.

        Keys set in the environment take precedence over ``wfm.apiKey`` and
        ``wfm.accountKey`` from the Timetrap config file.

        Args:
            config: WfmSyncConfig instance
            mapping: BillingMapping whose keys are used when the settings
                have none

        Returns:
            Configured WorkflowMaxClient

        Raises:
            MissingCredentialsError: If either key is configured nowhere
        """
        api_key = config.wfm_api_key or getattr(mapping, "api_key", None)
        account_key = config.wfm_account_key or getattr(mapping, "account_key", None)

        missing = [
            name
            for name, value in (
                ("WFM_API_KEY / wfm.apiKey", api_key),
                ("WFM_ACCOUNT_KEY / wfm.accountKey", account_key),
            )
            if not value
        ]
        if missing:
            raise MissingCredentialsError(
                f"WorkflowMax credentials not configured: {', '.join(missing)}"
            )

        return cls(
            api_key=api_key,
            account_key=account_key,
            base_url=config.wfm_base_url,
            timeout=config.request_timeout,
            retry_handler=RetryHandler(
                max_retries=config.max_retries, base_delay=config.retry_delay
            ),
        )

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send one API request and return the parsed <Response> element.

        Raises:
            WorkflowMaxAPIError: On HTTP errors, unparseable XML, or a
                response status other than OK
            requests.exceptions.RequestException: On network failures
        """
        query = dict(self._auth_params)
        if params:
            query.update(params)

        logger.debug(
            f"WorkflowMax {method} {path} params={redact_auth_params(query)}"
        )

        headers = {"Accept": "application/xml"}
        if body is not None:
            headers["Content-Type"] = "application/xml"

        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            params=query,
            data=body.encode("utf-8") if body is not None else None,
            headers=headers,
            timeout=self.timeout,
        )

        if not response.ok:
            raise WorkflowMaxAPIError(
                _describe_http_error(response), response.status_code
            )

        try:
            root = ET.fromstring(response.content)
        except ET.ParseError as e:
            raise WorkflowMaxAPIError(
                f"WorkflowMax: Malformed XML response from {path}: {e}",
                response.status_code,
            ) from e

        data = element_to_value(root)
        if not isinstance(data, dict):
            raise WorkflowMaxAPIError(
                f"WorkflowMax: Empty response from {path}", response.status_code
            )

        status = data.get("Status")
        if status != "OK":
            description = data.get("ErrorDescription") or "no error description"
            raise WorkflowMaxAPIError(
                f"WorkflowMax: {path} returned status {status}: {description}",
                response.status_code,
            )

        return data

    def _get(self, path: str, params: Optional[Dict[str, str]] = None):
        """GET with retry on transient failures."""
        return self.retry_handler.execute_with_retry(
            self._request, "GET", path, params=params
        )

    def list_staff(self) -> List[StaffMember]:
        """
        List all WorkflowMax staff members.

        Returns:
            Staff members in API order
        """
        data = self._get("/staff.api/list")
        staff_list = data.get("StaffList") or {}
        records = _as_list(staff_list.get("Staff"))

        staff = []
        for record in records:
            if not isinstance(record, dict) or not record.get("ID"):
                logger.warning(f"Ignoring malformed staff record: {record!r}")
                continue
            staff.append(
                StaffMember(
                    staff_id=str(record["ID"]),
                    name=record.get("Name") or "",
                    email=record.get("Email") or "",
                )
            )

        logger.debug(f"Fetched {len(staff)} WorkflowMax staff members")
        return staff

    def get_time_records(self, staff_id: str, day_key: str) -> XmlValue:
        """
        Fetch the time records of one staff member for one calendar day.

        The payload is returned as parsed, without normalization: None when
        nothing is recorded, a mapping when exactly one record exists, and
        a list of mappings when there are several.

        Args:
            staff_id: WorkflowMax staff id
            day_key: Day as YYYYMMDD

        Returns:
            The parsed Times/Time payload
        """
        data = self._get(
            f"/time.api/staff/{staff_id}",
            params={"from": day_key, "to": next_day_key(day_key)},
        )
        times = data.get("Times")
        if times is None:
            return None
        if not isinstance(times, dict):
            raise WorkflowMaxAPIError(
                f"WorkflowMax: Unexpected Times payload for {day_key}: {times!r}"
            )
        return times.get("Time")

    def add_time_entry(self, request: UploadRequest) -> None:
        """
        Record one time entry.

        Args:
            request: The entry to add

        Raises:
            WorkflowMaxAPIError: If WorkflowMax rejects the entry
            requests.exceptions.RequestException: On network failures
        """
        timesheet = ET.Element("Timesheet")
        for tag, value in (
            ("Job", request.job_id),
            ("Task", request.task_id),
            ("Staff", request.staff_id),
            ("Date", request.day_key),
            ("Minutes", str(request.minutes)),
            ("Note", request.note),
        ):
            ET.SubElement(timesheet, tag).text = _xml_text(value)

        self._request(
            "POST", "/time.api/add", body=ET.tostring(timesheet, encoding="unicode")
        )
        logger.debug(
            f"Added {request.minutes} minutes on {request.day_key} "
            f"to job {request.job_id} task {request.task_id}"
        )
