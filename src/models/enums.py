"""
Enum definitions for the Dynamic Fields Backend
"""

from enum import Enum

class FieldType(str, Enum):
    """
    Declared type of a dynamic field, matching the CHECK constraint on
    dynamicfields.field_type. Values are always stored as text; the type
    tells clients how to render and parse them.
    """
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"

    @classmethod
    def values(cls):
        return [member.value for member in cls]
