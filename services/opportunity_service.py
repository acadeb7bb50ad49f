"""
Opportunity Service

Read-only queries behind the dashboard: the filtered, sorted and paginated
opportunity list plus the subreddit, stats and keyword aggregates.

Query construction is split from execution. build_conditions, resolve_sort
and build_order_by are pure functions of an OpportunityFilters value, so the
generated SQL can be checked without a database.
"""

import re
from collections import Counter
from typing import List, Dict, Any, Tuple

from pydantic import BaseModel, ConfigDict
from sqlalchemy import func, case, cast, desc, or_, Numeric
from sqlalchemy.orm import Session

from models.opportunity import Opportunity
from core.logger import get_logger

logger = get_logger(__name__)


# Columns the list may be ordered by. The sort column is interpolated into
# ORDER BY, so nothing outside this tuple may ever reach the query.
SORTABLE_COLUMNS = (
    "overall_score",
    "technical_complexity",
    "revenue_potential",
    "novelty_score",
    "market_demand",
    "points",
    "comments",
    "created_at",
)
DEFAULT_SORT_COLUMN = "overall_score"

SUBREDDIT_LIMIT = 50
KEYWORD_LIMIT = 100
KEYWORD_MIN_LENGTH = 4

STOP_WORDS = frozenset({
    "what", "this", "that", "with", "from", "have", "will", "your", "there",
    "their", "about", "would", "which", "when", "make", "like", "just", "into",
    "over", "such", "than", "them", "been", "some", "could", "more", "very",
    "after", "most", "also", "made", "then", "well", "back", "only", "come",
    "being", "were", "much", "where", "does", "here", "need", "help",
    "looking", "best", "good", "want", "anyone", "know", "find", "tool",
})

_KEYWORD_PATTERN = re.compile(r"[a-z]+")


class OpportunityFilters(BaseModel):
    """
    Filter, sort and pagination request for the opportunity list.

    Thresholds at their neutral value (0 for minimums, 10 for max_complexity)
    and empty strings add no condition.
    """
    model_config = ConfigDict(frozen=True)

    min_score: float = 0
    max_complexity: float = 10
    min_revenue: float = 0
    min_novelty: float = 0
    min_demand: float = 0
    search: str = ""
    subreddit: str = ""
    sort_by: str = DEFAULT_SORT_COLUMN
    sort_order: str = "desc"
    limit: int = 50
    offset: int = 0


def analyzed_condition():
    """Base predicate: only rows the analyzer has finished with."""
    return Opportunity.analyzed_at.isnot(None)


def build_conditions(filters: OpportunityFilters) -> List:
    """
    Build the WHERE predicates for a filter request.

    Args:
        filters: Filter request

    Returns:
        list: SQLAlchemy predicates, to be joined with AND. The first one is
        always the analyzed_at check; every value is a bound parameter.
    """
    conditions = [analyzed_condition()]

    if filters.min_score > 0:
        conditions.append(Opportunity.overall_score >= filters.min_score)

    if filters.max_complexity < 10:
        conditions.append(Opportunity.technical_complexity <= filters.max_complexity)

    if filters.min_revenue > 0:
        conditions.append(Opportunity.revenue_potential >= filters.min_revenue)

    if filters.min_novelty > 0:
        conditions.append(Opportunity.novelty_score >= filters.min_novelty)

    if filters.min_demand > 0:
        conditions.append(Opportunity.market_demand >= filters.min_demand)

    if filters.search:
        like = f"%{filters.search}%"
        conditions.append(or_(
            Opportunity.title.ilike(like),
            Opportunity.description.ilike(like),
            Opportunity.ai_analysis.ilike(like),
        ))

    if filters.subreddit:
        conditions.append(Opportunity.subreddit == filters.subreddit)

    return conditions


def resolve_sort(filters: OpportunityFilters) -> Tuple[str, str]:
    """
    Map the requested sort onto the allow-lists.

    Returns:
        tuple: (column name, "asc" or "desc")
    """
    column = filters.sort_by if filters.sort_by in SORTABLE_COLUMNS else DEFAULT_SORT_COLUMN
    direction = "asc" if filters.sort_order == "asc" else "desc"
    return column, direction


def build_order_by(filters: OpportunityFilters) -> List:
    """
    Build the ORDER BY clauses; NULL sort values always come last.

    Ties are broken by id so pages do not overlap.
    """
    column_name, direction = resolve_sort(filters)
    column = getattr(Opportunity, column_name)
    ordered = column.asc() if direction == "asc" else column.desc()
    return [ordered.nulls_last(), Opportunity.id.asc()]


class OpportunityService:
    """Service for reading analyzed opportunities."""

    @staticmethod
    def list_opportunities(filters: OpportunityFilters, db: Session) -> Dict[str, Any]:
        """
        Get one page of opportunities matching the filters.

        Runs a COUNT over the filtered rows, then the page query. Database
        errors propagate to the caller.

        Args:
            filters: Filter request
            db: Database session

        Returns:
            dict: {"opportunities": [...], "total": int}
        """
        conditions = build_conditions(filters)

        total = db.query(func.count()).select_from(Opportunity).filter(*conditions).scalar() or 0

        rows = (
            db.query(Opportunity)
            .filter(*conditions)
            .order_by(*build_order_by(filters))
            .limit(filters.limit)
            .offset(filters.offset)
            .all()
        )

        logger.debug(
            f"Listed {len(rows)} of {total} opportunities "
            f"(sort={resolve_sort(filters)}, offset={filters.offset})"
        )

        return {
            "opportunities": [row.to_dict() for row in rows],
            "total": int(total),
        }

    @staticmethod
    def get_subreddits(db: Session) -> List[Dict[str, Any]]:
        """
        Get subreddits of analyzed opportunities with their row counts.

        Returns:
            list: Up to 50 {"subreddit", "count"} items, most common first
        """
        count = func.count().label("count")
        rows = (
            db.query(Opportunity.subreddit, count)
            .filter(
                analyzed_condition(),
                Opportunity.subreddit.isnot(None),
                Opportunity.subreddit != "",
            )
            .group_by(Opportunity.subreddit)
            .order_by(desc(count), Opportunity.subreddit)
            .limit(SUBREDDIT_LIMIT)
            .all()
        )
        return [{"subreddit": subreddit, "count": int(n)} for subreddit, n in rows]

    @staticmethod
    def get_stats(db: Session) -> Dict[str, Any]:
        """
        Get dashboard counters.

        total counts every row, analyzed only scored ones. The average and
        maximum overall score cover all rows and are 0 when nothing is scored.

        Returns:
            dict: {"total", "analyzed", "avgScore", "topScore"}
        """
        row = db.query(
            func.count().label("total"),
            func.count(case((Opportunity.analyzed_at.isnot(None), 1))).label("analyzed"),
            func.round(cast(func.avg(Opportunity.overall_score), Numeric), 2).label("avg_score"),
            func.max(Opportunity.overall_score).label("top_score"),
        ).select_from(Opportunity).one()

        return {
            "total": int(row.total or 0),
            "analyzed": int(row.analyzed or 0),
            "avgScore": float(row.avg_score) if row.avg_score is not None else 0,
            "topScore": float(row.top_score) if row.top_score is not None else 0,
        }

    @staticmethod
    def extract_keywords(title: str) -> List[str]:
        """
        Split a title into keyword tokens.

        Tokens are whitespace separated and lower-cased; only purely
        alphabetic a-z tokens longer than 3 characters that are not stop
        words are kept.
        """
        keywords = []
        for token in title.split():
            word = token.lower()
            if len(word) < KEYWORD_MIN_LENGTH or word in STOP_WORDS:
                continue
            if _KEYWORD_PATTERN.fullmatch(word):
                keywords.append(word)
        return keywords

    @staticmethod
    def get_keywords(db: Session) -> List[Dict[str, Any]]:
        """
        Get the most frequent title keywords among analyzed opportunities.

        Returns:
            list: Up to 100 {"word", "count"} items, most frequent first
        """
        titles = (
            db.query(Opportunity.title)
            .filter(analyzed_condition(), Opportunity.title.isnot(None))
            .yield_per(1000)
        )

        counter = Counter()
        for (title,) in titles:
            counter.update(OpportunityService.extract_keywords(title))

        return [{"word": word, "count": n} for word, n in counter.most_common(KEYWORD_LIMIT)]
