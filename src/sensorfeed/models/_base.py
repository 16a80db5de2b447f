"""Base model for sensorfeed value objects.

Every model inherits from :class:`SensorFeedBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase wire keys map to snake_case
  fields (explicit aliases, such as ``groupName``, take precedence).
* ``extra="ignore"`` so unknown wire fields are dropped silently.
* Immutability, so snapshots handed to a presenter cannot be mutated.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SensorFeedBaseModel(BaseModel):
    """Frozen, alias-aware base for feed value objects."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
