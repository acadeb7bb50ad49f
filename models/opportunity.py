"""
Opportunity Model

A Reddit post mined for a project idea and scored by an external analyzer.
"""

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, Index
from datetime import datetime

from core.database import Base
from models.base import format_utc_datetime


class Opportunity(Base):
    """
    Opportunity model (read-only for this application).

    Rows are inserted by the scraper and later updated by the analyzer;
    a non-null analyzed_at is the only signal that scoring has finished.

    Attributes:
        id: Unique opportunity identifier
        title: Post title
        description: Post body
        opportunity: Extracted idea, free text
        subreddit: Source subreddit name
        member_count: Subreddit size as scraped (e.g. "1.2m")
        timestamp: Post time as scraped
        points: Post upvotes
        comments: Post comment count
        source_url: Link to the Reddit post
        category: AI-assigned category
        technical_complexity: AI score, 0-10
        revenue_potential: AI score, 0-10
        novelty_score: AI score, 0-10
        market_demand: AI score, 0-10
        overall_score: AI score, 0-10 (primary ranking metric)
        ai_analysis: AI commentary
        analyzed_at: When analysis completed (NULL until then)
        created_at: When the row was scraped
    """

    __tablename__ = "opportunities"

    __table_args__ = (
        Index('ix_opportunities_analyzed_score', 'analyzed_at', 'overall_score'),
    )

    # Primary Key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Source fields (scraper)
    title = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    opportunity = Column(Text, nullable=True)
    subreddit = Column(String(255), nullable=True, index=True)
    member_count = Column(String(50), nullable=True)
    timestamp = Column(String(100), nullable=True)
    points = Column(Integer, nullable=True)
    comments = Column(Integer, nullable=True)
    source_url = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=True)

    # Derived fields (analyzer)
    category = Column(String(100), nullable=True)
    technical_complexity = Column(Float, nullable=True)
    revenue_potential = Column(Float, nullable=True)
    novelty_score = Column(Float, nullable=True)
    market_demand = Column(Float, nullable=True)
    overall_score = Column(Float, nullable=True)
    ai_analysis = Column(Text, nullable=True)
    analyzed_at = Column(DateTime, nullable=True)

    def is_analyzed(self) -> bool:
        """Check if the analyzer has scored this row."""
        return self.analyzed_at is not None

    def __repr__(self):
        return f"<Opportunity(id={self.id}, subreddit={self.subreddit}, overall_score={self.overall_score})>"

    def to_dict(self):
        """
        Convert opportunity to dictionary.

        Returns:
            dict: Opportunity data
        """
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "description": self.description,
            "opportunity": self.opportunity,
            "subreddit": self.subreddit,
            "member_count": self.member_count,
            "timestamp": self.timestamp,
            "points": self.points,
            "comments": self.comments,
            "source_url": self.source_url,
            "technical_complexity": self.technical_complexity,
            "revenue_potential": self.revenue_potential,
            "novelty_score": self.novelty_score,
            "market_demand": self.market_demand,
            "overall_score": self.overall_score,
            "ai_analysis": self.ai_analysis,
            "analyzed_at": format_utc_datetime(self.analyzed_at),
            "created_at": format_utc_datetime(self.created_at),
        }
