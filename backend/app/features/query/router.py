"""
Query feature: Student question route.
"""

import logging
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from app.core.dependencies import get_query_service
from app.core.exceptions import AppBaseError, app_error_to_http
from app.features.query.schemas import QueryRequest, QueryResult
from app.features.query.service import QueryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=QueryResult)
async def ask_question(
    data: QueryRequest,
    background_tasks: BackgroundTasks,
    service: QueryService = Depends(get_query_service),
):
    """
    Answer a question from the selected course's syllabus.
    - Returns a cached answer when the same question was asked before.
    - Otherwise retrieves the closest chunks and asks the LLM.
    - Analytics are recorded after the response is sent.
    """
    try:
        result = await service.answer(data.question, data.course, data.mode)
    except AppBaseError as e:
        raise app_error_to_http(e)
    except Exception as e:
        logger.error(f"Query failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error. Please try again.")

    background_tasks.add_task(
        service.record_analytics,
        course=data.course.strip(),
        question=data.question,
        mode=data.mode,
        cached=result.cached,
        response_time_ms=result.response_time,
    )
    return result
