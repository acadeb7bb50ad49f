"""
Opportunity Routes

The dashboard's single data endpoint. An `action` query parameter selects one
of the aggregates; without it the filtered opportunity list is returned.
"""

import math
from typing import Optional, Callable, Dict, Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from core.database import get_db
from core.logger import get_logger
from api.middleware.rate_limit import limiter, default_rate_limit
from services.opportunity_service import OpportunityFilters, OpportunityService

logger = get_logger(__name__)

router = APIRouter()

ACTIONS: Dict[str, Callable[[Session], Any]] = {
    "subreddits": OpportunityService.get_subreddits,
    "stats": OpportunityService.get_stats,
    "keywords": OpportunityService.get_keywords,
}

INTERNAL_ERROR_BODY = {"error": "Internal server error"}


def parse_float(value: Optional[str], default: float) -> float:
    """Parse a query-string number, falling back to default on bad input."""
    if not value:
        return default
    try:
        number = float(value)
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def parse_int(value: Optional[str], default: int) -> int:
    """Parse a non-negative query-string integer, falling back to default."""
    if not value:
        return default
    try:
        number = int(float(value))
    except (ValueError, OverflowError):
        return default
    return number if number >= 0 else default


def filters_from_query(params) -> OpportunityFilters:
    """
    Build an OpportunityFilters from the camelCase query parameters.

    Malformed numbers silently become their defaults.
    """
    return OpportunityFilters(
        min_score=parse_float(params.get("minScore"), 0),
        max_complexity=parse_float(params.get("maxComplexity"), 10),
        min_revenue=parse_float(params.get("minRevenue"), 0),
        min_novelty=parse_float(params.get("minNovelty"), 0),
        min_demand=parse_float(params.get("minDemand"), 0),
        search=params.get("search") or "",
        subreddit=params.get("subreddit") or "",
        sort_by=params.get("sortBy") or "overall_score",
        sort_order=params.get("sortOrder") or "desc",
        limit=parse_int(params.get("limit"), 50),
        offset=parse_int(params.get("offset"), 0),
    )


@router.get("")
@limiter.limit(default_rate_limit)
def get_opportunities(request: Request, db: Session = Depends(get_db)):
    """
    Dashboard data endpoint.

    **Query Parameters**:
    - action: subreddits | stats | keywords (optional)
    - minScore, maxComplexity, minRevenue, minNovelty, minDemand: 0-10
    - search: substring matched against title, description and AI analysis
    - subreddit: exact subreddit name
    - sortBy, sortOrder: sort column and asc/desc
    - limit, offset: pagination

    **Response 200**:
    - action=subreddits: [{subreddit, count}]
    - action=stats: {total, analyzed, avgScore, topScore}
    - action=keywords: [{word, count}]
    - otherwise: {opportunities, total}

    **Response 500**: {"error": "Internal server error"}
    """
    params = request.query_params
    action = params.get("action")

    try:
        if action in ACTIONS:
            return JSONResponse(content=ACTIONS[action](db))

        result = OpportunityService.list_opportunities(filters_from_query(params), db)
        return JSONResponse(content=result)
    except Exception as e:
        logger.error(f"API Error (action={action}): {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=INTERNAL_ERROR_BODY
        )
