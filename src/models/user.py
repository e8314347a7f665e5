"""
User submission Pydantic models
"""

import json
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict

DYNAMIC_FIELD_PREFIX = "category-field-"


@dataclass
class DynamicFieldValue:
    """A submitted (dynamic field id, raw value) pair"""
    field_id: int
    raw_value: Any

    def as_text(self) -> Optional[str]:
        return value_to_text(self.raw_value)


def value_to_text(value: Any) -> Optional[str]:
    """Render a JSON value for the text column userdynamicfields.value"""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


class UserSubmission(BaseModel):
    """
    Form payload: the five basic fields plus any number of
    "category-field-<id>" keys carrying dynamic values.
    """
    model_config = ConfigDict(extra="allow")

    # Not validated here; PostgreSQL decides what fits the columns
    name: Any = None
    age: Any = None
    gender: Any = None
    email: Any = None
    address: Any = None

    def basic_values(self) -> Tuple[Optional[str], ...]:
        """Basic fields in column order, rendered as text for binding"""
        return tuple(
            value_to_text(value)
            for value in (self.name, self.age, self.gender, self.email, self.address)
        )

    def dynamic_values(self) -> List[DynamicFieldValue]:
        """
        Extract dynamic values from the extra keys

        Keys without the prefix are dropped.

        Raises:
            ValueError: if a prefixed key does not end in an integer id
        """
        values = []
        for key, value in (self.model_extra or {}).items():
            if not key.startswith(DYNAMIC_FIELD_PREFIX):
                continue
            suffix = key[len(DYNAMIC_FIELD_PREFIX):]
            if not (suffix.isascii() and suffix.isdigit()):
                raise ValueError(f"Invalid dynamic field key: {key}")
            values.append(DynamicFieldValue(field_id=int(suffix), raw_value=value))
        return values


class SubmissionResponse(BaseModel):
    message: str
