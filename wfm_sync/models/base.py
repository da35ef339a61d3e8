"""Base model for all data models in the WorkflowMax sync.

This module provides a base Pydantic model with common configuration
and helper methods for serialization/deserialization.
"""

from pydantic import BaseModel, ConfigDict


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration for:
    - Validation with type checking
    - Serialization to/from dictionaries
    - Arbitrary types support for dates and datetimes

    Models that must not change during a run (raw entries, mappings,
    remote records) set ``frozen=True`` in their own ``model_config``.

    Example:
        >>> class Sheet(BaseDataModel):
        ...     name: str
        ...     entries: int
        >>> sheet = Sheet(name="client-a", entries=3)
        >>> sheet.name
        'client-a'
        >>> sheet.model_dump()
        {'name': 'client-a', 'entries': 3}
    """

    model_config = ConfigDict(
        # Allow arbitrary types like date, datetime
        arbitrary_types_allowed=True,
        # Validate on assignment to catch errors early
        validate_assignment=True,
        # Use strict type checking
        strict=False,
        # Reject unknown fields during validation
        extra="forbid",
        frozen=False,
    )
