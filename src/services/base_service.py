"""
Base service layer for database operations
"""

import logging
from typing import Dict, Any, List, Optional, Sequence
from dataclasses import dataclass

from database.connection import Database
from database.errors import DatabaseQueryError

logger = logging.getLogger(__name__)

# Error types carried by ServiceResult and mapped to HTTP status codes by routes
INVALID_REQUEST = "INVALID_REQUEST"
DATABASE_ERROR = "DATABASE_ERROR"

# PostgreSQL INTEGER range
PG_INT_MIN = -2 ** 31
PG_INT_MAX = 2 ** 31 - 1


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def ok(cls, data: List[Dict[str, Any]]) -> "ServiceResult":
        return cls(success=True, data=data, count=len(data))

    @classmethod
    def invalid(cls, message: str) -> "ServiceResult":
        return cls(success=False, error=message, error_type=INVALID_REQUEST)

    @classmethod
    def database_error(cls, error: DatabaseQueryError) -> "ServiceResult":
        return cls(success=False, error=error.message, error_type=DATABASE_ERROR)


class BaseService:
    """Base service holding the database handle for one resource"""

    def __init__(self, database: Database, resource_name: str):
        self.database = database
        self.resource_name = resource_name

    async def read(self, query: str, params: Sequence[Any] = ()) -> ServiceResult:
        """
        Run a read-only statement

        Args:
            query: SQL with positional $n placeholders
            params: Values bound to the placeholders

        Returns:
            ServiceResult with the rows, or a DATABASE_ERROR result
        """
        try:
            rows = await self.database.execute_query(query, params)
        except DatabaseQueryError as e:
            logger.error(f"Read failed for {self.resource_name}: {e}")
            return ServiceResult.database_error(e)

        return ServiceResult.ok(rows)
