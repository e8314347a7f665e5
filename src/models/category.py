"""
Category and dynamic field Pydantic models
"""

from typing import Any, List
from pydantic import BaseModel
from models.enums import FieldType


class DynamicFieldDefinition(BaseModel):
    """One field definition submitted with a new category"""
    name: str
    field_type: FieldType
    is_required: bool


class CategoryCreateRequest(BaseModel):
    name: str
    fields: List[DynamicFieldDefinition]

    @classmethod
    def from_payload(cls, payload: Any) -> "CategoryCreateRequest":
        """
        Validate a raw JSON body, stopping at the first violated rule

        Raises:
            ValueError: with the client-facing message for that rule
        """
        if not isinstance(payload, dict):
            payload = {}

        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Missing or invalid category name")

        fields = payload.get("fields")
        if not isinstance(fields, list) or len(fields) == 0:
            raise ValueError("Missing or invalid fields array")

        definitions = []
        for field in fields:
            if not isinstance(field, dict):
                field = {}

            field_name = field.get("name")
            if not isinstance(field_name, str) or not field_name.strip():
                raise ValueError("Invalid field name")

            field_type = field.get("field_type")
            if field_type not in FieldType.values():
                raise ValueError("Invalid field type")

            # JSON booleans only, not "true" or 1
            is_required = field.get("is_required")
            if not isinstance(is_required, bool):
                raise ValueError("Invalid is_required flag")

            definitions.append(DynamicFieldDefinition(
                name=field_name,
                field_type=FieldType(field_type),
                is_required=is_required
            ))

        return cls(name=name, fields=definitions)


class CategoryCreateResponse(BaseModel):
    message: str
    category_id: int


class Category(BaseModel):
    id: int
    name: str


class CategoryListResponse(BaseModel):
    categories: List[Category]


class DynamicField(BaseModel):
    id: int
    name: str
    category_id: int
    field_type: FieldType
    is_required: bool


class DynamicFieldListResponse(BaseModel):
    fields: List[DynamicField]


class BasicField(BaseModel):
    """A column of the users table as reported by information_schema"""
    column_name: str
    data_type: str


class BasicFieldListResponse(BaseModel):
    fields: List[BasicField]
