"""
User form submission API route
"""

import logging
from fastapi import APIRouter, HTTPException, Depends

from database.connection import Database, get_database
from models.user import UserSubmission, SubmissionResponse
from services.base_service import INVALID_REQUEST
from services.users_service import get_users_service

router = APIRouter()
logger = logging.getLogger(__name__)

SUBMIT_FAILED = "An error occurred while submitting the form."

@router.post("/submit", status_code=201, response_model=SubmissionResponse)
async def submit_form(
    submission: UserSubmission,
    database: Database = Depends(get_database)
):
    """Store a user with its basic fields and category-field-<id> values"""
    users_service = get_users_service(database)

    try:
        result = await users_service.submit(submission)

        if not result.success:
            if result.error_type == INVALID_REQUEST:
                raise HTTPException(status_code=400, detail=result.error)
            raise HTTPException(status_code=500, detail=SUBMIT_FAILED)

        return SubmissionResponse(message="Form submitted successfully!")

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to submit form: {e}")
        raise HTTPException(status_code=500, detail=SUBMIT_FAILED)
