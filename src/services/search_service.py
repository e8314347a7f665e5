"""
Search service - filter users on basic fields and category
"""

import logging
from typing import Any, List, Tuple

from database.connection import Database
from models.search import SearchFilters
from services.base_service import BaseService, ServiceResult, PG_INT_MIN, PG_INT_MAX

logger = logging.getLogger(__name__)

# Every returned row carries ALL of the user's dynamic values; the filters
# only decide which users are returned.
BASE_SEARCH_QUERY = """
    SELECT
        u.id,
        u.name,
        u.age,
        u.gender,
        u.email,
        u.address,
        COALESCE(c.name, '') AS category,
        (
            SELECT COALESCE(
                json_agg(
                    json_build_object(
                        'fieldName', all_df.name,
                        'fieldValue', all_udf.value,
                        'fieldType', all_df.field_type
                    )
                    ORDER BY all_df.id
                ),
                '[]'::json
            )
            FROM UserDynamicFields all_udf
            JOIN DynamicFields all_df ON all_udf.dynamic_field_id = all_df.id
            WHERE all_udf.user_id = u.id
        ) AS dynamic_fields
    FROM Users u
    LEFT JOIN UserDynamicFields udf ON u.id = udf.user_id
    LEFT JOIN DynamicFields df ON udf.dynamic_field_id = df.id
    LEFT JOIN Categories c ON df.category_id = c.id
    WHERE true
"""

# Partial, case-insensitive matches
ILIKE_COLUMNS = {
    "name": "u.name",
    "email": "u.email",
    "address": "u.address",
    "category": "c.name",
}


def parse_age(value: str):
    """Integer age, or None when the value cannot match an INTEGER column"""
    try:
        age = int(value.strip())
    except ValueError:
        return None
    if age < PG_INT_MIN or age > PG_INT_MAX:
        return None
    return age


def build_search_query(filters: SearchFilters) -> Tuple[str, List[Any]]:
    """
    Build the search statement and its parameters

    Args:
        filters: Requested filters; absent or empty ones are skipped

    Returns:
        Tuple of (SQL, positional parameters)
    """
    params: List[Any] = []
    conditions: List[str] = []
    present = filters.present()

    for key in ("name", "age", "gender", "email", "address", "category"):
        value = present.get(key)
        if value is None:
            continue

        if key in ILIKE_COLUMNS:
            params.append(f"%{value}%")
            conditions.append(f"{ILIKE_COLUMNS[key]} ILIKE ${len(params)}")
        elif key == "age":
            age = parse_age(value)
            if age is None:
                # A non-numeric age matches nobody
                conditions.append("false")
            else:
                params.append(age)
                conditions.append(f"u.age = ${len(params)}")
        elif key == "gender":
            params.append(value)
            conditions.append(f"u.gender = ${len(params)}")

    query = BASE_SEARCH_QUERY
    if conditions:
        query += " AND " + " AND ".join(conditions)
    query += " GROUP BY u.id, c.name ORDER BY u.id"

    return query, params


class SearchService(BaseService):
    """Service for user search"""

    def __init__(self, database: Database):
        super().__init__(database, "users")

    async def search_users(self, filters: SearchFilters) -> ServiceResult:
        """
        Search users by basic fields and category name

        Args:
            filters: Optional filters combined with AND

        Returns:
            ServiceResult with one row per (user, resolved category)
        """
        query, params = build_search_query(filters)
        logger.info(f"Searching users with filters: {sorted(filters.present())}")

        result = await self.read(query, params)
        if result.success:
            for row in result.data:
                if row.get("dynamic_fields") is None:
                    row["dynamic_fields"] = []
        return result


def get_search_service(database: Database) -> SearchService:
    """Build the search service for a database handle"""
    return SearchService(database)
