"""
Users service - form submission of basic and dynamic user data
"""

import logging
from typing import List, Set

from database.connection import Database
from database.errors import DatabaseQueryError
from models.user import UserSubmission, DynamicFieldValue
from services.base_service import BaseService, ServiceResult, PG_INT_MAX

logger = logging.getLogger(__name__)

INSERT_USER = """
    INSERT INTO Users (name, age, gender, email, address)
    VALUES ($1, $2::text::integer, $3, $4, $5)
    RETURNING id
"""

INSERT_USER_DYNAMIC_FIELD = """
    INSERT INTO UserDynamicFields (user_id, dynamic_field_id, value)
    VALUES ($1, $2, $3)
"""

SELECT_EXISTING_FIELD_IDS = "SELECT id FROM DynamicFields WHERE id = ANY($1::int[])"


class UsersService(BaseService):
    """Service for user submissions"""

    def __init__(self, database: Database):
        super().__init__(database, "users")

    async def _unknown_field_ids(self, values: List[DynamicFieldValue]) -> Set[int]:
        requested = {value.field_id for value in values}
        in_range = [field_id for field_id in requested if field_id <= PG_INT_MAX]
        rows = await self.database.execute_query(SELECT_EXISTING_FIELD_IDS, [in_range])
        return requested - {row["id"] for row in rows}

    async def submit(self, submission: UserSubmission) -> ServiceResult:
        """
        Store a user and its dynamic values

        Dynamic values must reference existing dynamic fields. Their raw
        values are stored as text without checking field_type or
        is_required. Basic fields are bound as text; an age PostgreSQL
        cannot cast to integer fails the insert.

        Args:
            submission: Parsed form payload

        Returns:
            ServiceResult with [{"user_id": <new id>}]
        """
        try:
            values = submission.dynamic_values()
        except ValueError as e:
            return ServiceResult.invalid(str(e))

        try:
            if values:
                unknown = await self._unknown_field_ids(values)
                if unknown:
                    ids = ", ".join(str(field_id) for field_id in sorted(unknown))
                    return ServiceResult.invalid(f"Unknown dynamic field id(s): {ids}")

            async with self.database.transaction() as conn:
                user_id = await conn.fetchval(INSERT_USER, *submission.basic_values())

                if values:
                    await conn.executemany(
                        INSERT_USER_DYNAMIC_FIELD,
                        [(user_id, value.field_id, value.as_text()) for value in values]
                    )
        except DatabaseQueryError as e:
            logger.error(f"Failed to submit user form: {e}")
            return ServiceResult.database_error(e)

        logger.info(f"Stored user {user_id} with {len(values)} dynamic values")
        return ServiceResult.ok([{"user_id": user_id}])


def get_users_service(database: Database) -> UsersService:
    """Build the users service for a database handle"""
    return UsersService(database)
