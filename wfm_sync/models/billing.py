"""Billing mapping models.

This module defines how local Timetrap sheets map onto WorkflowMax jobs and
tasks. The mapping is static configuration and is treated as read-only for
the duration of a sync run.
"""

from typing import Dict, Iterator, Optional

from pydantic import ConfigDict, Field, field_validator

from wfm_sync.models.base import BaseDataModel


class BillingTarget(BaseDataModel):
    """WorkflowMax job and task a sheet is billed against.

    Attributes:
        job_id: WorkflowMax job number (e.g., "J000150")
        task_id: WorkflowMax task identifier (e.g., "39034523")

    Example:
        >>> target = BillingTarget(job_id="J000150", task_id=39034523)
        >>> target.task_id
        '39034523'
    """

    model_config = ConfigDict(frozen=True)

    job_id: str = Field(..., min_length=1, description="WorkflowMax job number")
    task_id: str = Field(..., min_length=1, description="WorkflowMax task id")

    @field_validator("job_id", "task_id", mode="before")
    @classmethod
    def coerce_to_string(cls, v):
        """Accept numeric ids from YAML and normalize them to strings."""
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError(f"id must be a whole number, got {v}")
            return str(int(v))
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v


class BillingMapping(BaseDataModel):
    """Lookup from Timetrap sheet name to its WorkflowMax billing target.

    Attributes:
        staff_email: Email of the WorkflowMax staff member time is recorded for
        targets: Sheet name -> BillingTarget
        api_key: WorkflowMax API key from wfm.apiKey, if present
        account_key: WorkflowMax account key from wfm.accountKey, if present

    Example:
        >>> mapping = BillingMapping(
        ...     staff_email="me@example.org",
        ...     targets={"client-a": BillingTarget(job_id="J1", task_id="42")},
        ... )
        >>> "client-a" in mapping
        True
        >>> mapping.get("client-b") is None
        True
    """

    model_config = ConfigDict(frozen=True)

    staff_email: str = Field(..., min_length=3, description="WorkflowMax staff email")
    targets: Dict[str, BillingTarget] = Field(default_factory=dict)
    api_key: Optional[str] = Field(default=None, repr=False)
    account_key: Optional[str] = Field(default=None, repr=False)

    @field_validator("staff_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Require something that looks like an email address."""
        v = v.strip()
        if "@" not in v:
            raise ValueError(f"Invalid staff email: {v!r}")
        return v

    def get(self, sheet: str) -> Optional[BillingTarget]:
        """Return the billing target for a sheet, or None if unmapped."""
        return self.targets.get(sheet)

    def __contains__(self, sheet: object) -> bool:
        return sheet in self.targets

    def __len__(self) -> int:
        return len(self.targets)

    def sheets(self) -> Iterator[str]:
        """Iterate over the configured sheet names."""
        return iter(self.targets)
