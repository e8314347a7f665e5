"""
Health check API route
"""

from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends

from database.connection import Database, get_database
from database.errors import DatabaseQueryError

router = APIRouter()

@router.get("/health")
async def health_check(database: Database = Depends(get_database)):
    """Health check - verifies a database round-trip"""
    try:
        await database.fetch_value("SELECT 1")
    except DatabaseQueryError:
        raise HTTPException(status_code=503, detail="Health check failed: database unavailable")

    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "database": "connected"
    }
