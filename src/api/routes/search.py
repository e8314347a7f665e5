"""
User search API route
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from database.connection import Database, get_database
from models.search import SearchFilters, SearchResponse
from services.search_service import get_search_service
from utils.error_handling import GENERIC_SERVER_ERROR

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/search", response_model=SearchResponse)
async def search_users(
    name: Optional[str] = Query(None),
    age: Optional[str] = Query(None),
    gender: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    address: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    database: Database = Depends(get_database)
):
    """
    Search users by basic fields and category

    Every filter is optional. Each returned user carries all of its
    dynamic field values, not only the ones that matched.
    """
    filters = SearchFilters(
        name=name,
        age=age,
        gender=gender,
        email=email,
        address=address,
        category=category
    )
    search_service = get_search_service(database)

    try:
        result = await search_service.search_users(filters)

        if not result.success:
            raise HTTPException(status_code=500, detail=GENERIC_SERVER_ERROR)

        return {"users": result.data}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to search users: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_SERVER_ERROR)
