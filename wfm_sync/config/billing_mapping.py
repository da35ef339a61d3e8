"""
Loader for the WorkflowMax section of the Timetrap configuration file.

Expected layout of ``~/.timetrap.yml``::

    wfm:
      email: myuser@mycompany.org
      apiKey: 0123456789ABCDEF      # optional, WFM_API_KEY wins
      accountKey: FEDCBA9876543210  # optional, WFM_ACCOUNT_KEY wins
      aliases:
        myfirsttimesheet:
          job: J000150
          task: 39034523
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from wfm_sync.models.billing import BillingMapping, BillingTarget
from wfm_sync.services.exceptions import BillingMappingError

logger = logging.getLogger(__name__)


def _optional_key(wfm: Dict[str, Any], name: str) -> Optional[str]:
    value = wfm.get(name)
    if value is None:
        return None
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise BillingMappingError(f"wfm.{name} must be a string")
    return str(value).strip() or None


def parse_billing_mapping(
    data: Dict[str, Any], staff_email_override: Optional[str] = None
) -> BillingMapping:
    """Build a BillingMapping from an already-parsed Timetrap config.

    Args:
        data: Parsed YAML document
        staff_email_override: Email to use instead of ``wfm.email``

    Returns:
        BillingMapping with one target per alias

    Raises:
        BillingMappingError: If the wfm section is missing or invalid
    """
    wfm = data.get("wfm") if isinstance(data, dict) else None
    if not isinstance(wfm, dict):
        raise BillingMappingError("Timetrap config has no 'wfm' section")

    email = staff_email_override or wfm.get("email")
    if not email:
        raise BillingMappingError("Missing wfm.email in Timetrap config")

    aliases = wfm.get("aliases") or {}
    if not isinstance(aliases, dict):
        raise BillingMappingError("wfm.aliases must map sheet names to job/task")

    targets: Dict[str, BillingTarget] = {}
    for sheet, alias in aliases.items():
        if not isinstance(alias, dict):
            raise BillingMappingError(f"wfm.aliases.{sheet} must have job and task")
        try:
            targets[str(sheet)] = BillingTarget(
                job_id=alias.get("job"), task_id=alias.get("task")
            )
        except ValidationError as e:
            raise BillingMappingError(
                f"Invalid job/task for wfm.aliases.{sheet}: {e.errors()[0]['msg']}"
            ) from e

    try:
        return BillingMapping(
            staff_email=str(email),
            targets=targets,
            api_key=_optional_key(wfm, "apiKey"),
            account_key=_optional_key(wfm, "accountKey"),
        )
    except ValidationError as e:
        raise BillingMappingError(
            f"Invalid wfm configuration: {e.errors()[0]['msg']}"
        ) from e


def load_billing_mapping(
    path: Union[str, Path], staff_email_override: Optional[str] = None
) -> BillingMapping:
    """Load the sheet to WorkflowMax mapping from a Timetrap YAML file.

    Args:
        path: Path to the Timetrap config file (``~`` is expanded)
        staff_email_override: Email to use instead of ``wfm.email``

    Returns:
        BillingMapping

    Raises:
        BillingMappingError: If the file is missing, not valid YAML, or has
            no usable wfm section
    """
    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise BillingMappingError(f"Timetrap config file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise BillingMappingError(f"Invalid YAML in {config_path}: {e}") from e

    mapping = parse_billing_mapping(data, staff_email_override)
    logger.info(f"Loaded {len(mapping)} WorkflowMax sheet aliases from {config_path}")
    return mapping
