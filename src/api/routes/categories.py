"""
Category management API routes
"""

import logging
from typing import Any, Optional
from fastapi import APIRouter, HTTPException, Depends, Body

from database.connection import Database, get_database
from models.category import (
    CategoryCreateRequest,
    CategoryCreateResponse,
    CategoryListResponse,
    BasicFieldListResponse,
    DynamicFieldListResponse
)
from services.base_service import INVALID_REQUEST, PG_INT_MIN, PG_INT_MAX
from services.categories_service import get_categories_service
from utils.error_handling import GENERIC_SERVER_ERROR

router = APIRouter()
logger = logging.getLogger(__name__)

def parse_category_id(raw: str) -> Optional[int]:
    """Signed integer literal within the INTEGER column range, else None"""
    raw = raw.strip()
    digits = raw[1:] if raw.startswith(("+", "-")) else raw
    if not (digits.isascii() and digits.isdigit()):
        return None
    value = int(raw)
    if not PG_INT_MIN <= value <= PG_INT_MAX:
        return None
    return value

@router.post("/categories", status_code=201, response_model=CategoryCreateResponse)
async def create_category(
    payload: Any = Body(None),
    database: Database = Depends(get_database)
):
    """Create a category and its dynamic fields in one transaction"""
    try:
        request = CategoryCreateRequest.from_payload(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    categories_service = get_categories_service(database)

    try:
        result = await categories_service.create_category(request)

        if not result.success:
            if result.error_type == INVALID_REQUEST:
                raise HTTPException(status_code=400, detail=result.error)
            raise HTTPException(status_code=500, detail=GENERIC_SERVER_ERROR)

        return CategoryCreateResponse(
            message="Category created successfully",
            category_id=result.data[0]["category_id"]
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create category: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_SERVER_ERROR)

@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(database: Database = Depends(get_database)):
    """List every category"""
    categories_service = get_categories_service(database)

    try:
        result = await categories_service.list_categories()

        if not result.success:
            raise HTTPException(status_code=500, detail=GENERIC_SERVER_ERROR)

        return {"categories": result.data}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch categories: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_SERVER_ERROR)

@router.get("/basicfields", response_model=BasicFieldListResponse)
async def list_basic_fields(database: Database = Depends(get_database)):
    """List the fixed user columns as reported by the database schema"""
    categories_service = get_categories_service(database)

    try:
        result = await categories_service.list_basic_fields()

        if not result.success:
            raise HTTPException(status_code=500, detail=GENERIC_SERVER_ERROR)

        return {"fields": result.data}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch basic fields: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_SERVER_ERROR)

@router.get("/categories/{category_id}/fields", response_model=DynamicFieldListResponse)
async def list_category_fields(
    category_id: str,
    database: Database = Depends(get_database)
):
    """List the dynamic fields of a category"""
    parsed_id = parse_category_id(category_id)
    if parsed_id is None:
        raise HTTPException(status_code=400, detail="Invalid category ID")

    categories_service = get_categories_service(database)

    try:
        result = await categories_service.list_category_fields(parsed_id)

        if not result.success:
            raise HTTPException(status_code=500, detail=GENERIC_SERVER_ERROR)

        return {"fields": result.data}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch fields for category {category_id}: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_SERVER_ERROR)
