"""
Relational schema for users, categories and dynamic fields
"""

import logging
from typing import List

from database.connection import Database

logger = logging.getLogger(__name__)

# Unquoted identifiers fold to lower case in PostgreSQL, so the tables
# are users, categories, dynamicfields and userdynamicfields.
SCHEMA_STATEMENTS: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS Users (
        id SERIAL PRIMARY KEY,
        name TEXT,
        age INTEGER,
        gender TEXT,
        email TEXT,
        address TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS Categories (
        id SERIAL PRIMARY KEY,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS DynamicFields (
        id SERIAL PRIMARY KEY,
        name TEXT NOT NULL,
        category_id INTEGER NOT NULL REFERENCES Categories(id),
        field_type TEXT NOT NULL CHECK (field_type IN ('text', 'number', 'date')),
        is_required BOOLEAN NOT NULL DEFAULT FALSE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS UserDynamicFields (
        user_id INTEGER NOT NULL REFERENCES Users(id),
        dynamic_field_id INTEGER NOT NULL REFERENCES DynamicFields(id),
        value TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_dynamicfields_category_id ON DynamicFields (category_id)",
    "CREATE INDEX IF NOT EXISTS idx_userdynamicfields_user_id ON UserDynamicFields (user_id)",
]


async def apply_schema(database: Database):
    """Create any missing tables; safe to run on every startup"""
    async with database.transaction() as conn:
        for statement in SCHEMA_STATEMENTS:
            await conn.execute(statement)

    logger.info(f"Schema applied ({len(SCHEMA_STATEMENTS)} statements)")
