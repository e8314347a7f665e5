"""
Search Pydantic models
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class SearchFilters(BaseModel):
    """Optional search filters; empty strings are treated as absent"""
    name: Optional[str] = Field(None, description="Partial, case-insensitive match on name")
    age: Optional[str] = Field(None, description="Exact match on age; non-integers match nobody")
    gender: Optional[str] = Field(None, description="Exact match on gender")
    email: Optional[str] = Field(None, description="Partial, case-insensitive match on email")
    address: Optional[str] = Field(None, description="Partial, case-insensitive match on address")
    category: Optional[str] = Field(None, description="Partial, case-insensitive match on category name")

    def present(self) -> dict:
        """Filters that were actually supplied"""
        return {key: value for key, value in self.model_dump().items() if value}


class DynamicFieldEntry(BaseModel):
    fieldName: Optional[str] = None
    fieldValue: Optional[str] = None
    fieldType: Optional[str] = None


class UserSearchResult(BaseModel):
    id: int
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    category: str = ""
    dynamic_fields: List[DynamicFieldEntry] = []


class SearchResponse(BaseModel):
    users: List[UserSearchResult]
