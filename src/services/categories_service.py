"""
Categories service - business logic for categories and their dynamic fields
"""

import logging
from database.connection import Database
from database.errors import DatabaseQueryError
from models.category import CategoryCreateRequest
from services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)

INSERT_CATEGORY = "INSERT INTO Categories (name) VALUES ($1) RETURNING id"

INSERT_DYNAMIC_FIELD = """
    INSERT INTO DynamicFields (name, category_id, field_type, is_required)
    VALUES ($1, $2, $3, $4)
"""

SELECT_CATEGORIES = "SELECT id, name FROM Categories ORDER BY id"

SELECT_BASIC_FIELDS = """
    SELECT column_name, data_type
    FROM information_schema.columns
    WHERE table_name = 'users'
    ORDER BY ordinal_position
"""

SELECT_CATEGORY_FIELDS = """
    SELECT id, name, category_id, field_type, is_required
    FROM DynamicFields
    WHERE category_id = $1
    ORDER BY id
"""


class CategoriesService(BaseService):
    """Service for category management operations"""

    def __init__(self, database: Database):
        super().__init__(database, "categories")

    async def create_category(self, request: CategoryCreateRequest) -> ServiceResult:
        """
        Create a category together with its dynamic field definitions

        Both inserts share one transaction, so either the category and
        all of its fields exist afterwards or none of them do.

        Args:
            request: Validated category payload

        Returns:
            ServiceResult with [{"category_id": <new id>}]
        """
        logger.info(f"Creating category '{request.name}' with {len(request.fields)} fields")

        try:
            async with self.database.transaction() as conn:
                category_id = await conn.fetchval(INSERT_CATEGORY, request.name)

                # asyncpg runs one statement at a time per connection; executemany
                # sends every field insert in a single batch on this transaction
                await conn.executemany(
                    INSERT_DYNAMIC_FIELD,
                    [
                        (field.name, category_id, field.field_type.value, field.is_required)
                        for field in request.fields
                    ]
                )
        except DatabaseQueryError as e:
            logger.error(f"Failed to create category '{request.name}': {e}")
            return ServiceResult.database_error(e)

        logger.info(f"Created category {category_id}")
        return ServiceResult.ok([{"category_id": category_id}])

    async def list_categories(self) -> ServiceResult:
        """Get every category"""
        return await self.read(SELECT_CATEGORIES)

    async def list_basic_fields(self) -> ServiceResult:
        """Get column name and data type of every column of the users table"""
        return await self.read(SELECT_BASIC_FIELDS)

    async def list_category_fields(self, category_id: int) -> ServiceResult:
        """
        Get the dynamic fields of a category

        Args:
            category_id: ID of the category

        Returns:
            ServiceResult with the field rows (empty for unknown categories)
        """
        return await self.read(SELECT_CATEGORY_FIELDS, [category_id])


def get_categories_service(database: Database) -> CategoriesService:
    """Build the categories service for a database handle"""
    return CategoriesService(database)
