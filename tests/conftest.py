"""
Pytest Configuration and Fixtures

Provides shared test fixtures for all tests.
"""

import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from api.main import app
from core.database import Base, get_db
from models.opportunity import Opportunity

# Use in-memory SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session):
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def opportunities(db: Session) -> dict:
    """
    Seed a small mixed table.

    Five analyzed rows (one with a NULL overall score) and one row still
    waiting for analysis. Returned keyed by a short name.
    """
    analyzed_at = datetime(2025, 11, 15, 9, 33)
    created_at = datetime(2025, 11, 14, 8, 0)

    rows = {
        "invoice_api": Opportunity(
            title="Build an API for invoices",
            description="Freelancers keep asking for automated invoicing",
            subreddit="SaaS",
            points=120,
            comments=30,
            source_url="https://reddit.com/r/SaaS/1",
            category="Fintech",
            technical_complexity=4,
            revenue_potential=7,
            novelty_score=6,
            market_demand=8,
            overall_score=8.5,
            ai_analysis="Clear willingness to pay",
            analyzed_at=analyzed_at,
            created_at=created_at,
        ),
        "habit_tracker": Opportunity(
            title="Need a habit tracker, or habit coach app",
            description="Something simple for daily routines",
            subreddit="productivity",
            points=50,
            comments=10,
            technical_complexity=3,
            revenue_potential=5,
            novelty_score=4,
            market_demand=6,
            overall_score=6.0,
            ai_analysis="Crowded space, but could expose an Api for integrations",
            analyzed_at=analyzed_at,
            created_at=created_at + timedelta(hours=1),
        ),
        "gear_marketplace": Opportunity(
            title="Marketplace for used gear",
            description="Sellers want a simple listing flow",
            subreddit="SaaS",
            points=80,
            comments=12,
            technical_complexity=6,
            revenue_potential=None,
            novelty_score=7,
            market_demand=5,
            overall_score=7.2,
            ai_analysis="Two-sided market",
            analyzed_at=analyzed_at,
            created_at=created_at + timedelta(hours=2),
        ),
        "pending": Opportunity(
            title="Unanalyzed post about api",
            description="Not scored yet",
            subreddit="startups",
            points=500,
            comments=90,
            analyzed_at=None,
            created_at=created_at + timedelta(hours=3),
        ),
        "low_score": Opportunity(
            title="Low score idea tool 2.0",
            description="Weak signal",
            subreddit="",
            points=None,
            comments=1,
            technical_complexity=9,
            revenue_potential=2,
            novelty_score=2,
            market_demand=2,
            overall_score=2.5,
            ai_analysis="Little demand",
            analyzed_at=analyzed_at,
            created_at=created_at + timedelta(hours=4),
        ),
        "farm_scripts": Opportunity(
            title="Automation scripts for farmers",
            description="Irrigation scheduling",
            subreddit="productivity",
            points=15,
            comments=4,
            technical_complexity=8,
            revenue_potential=9,
            novelty_score=5,
            market_demand=3,
            overall_score=None,
            ai_analysis="Scoring incomplete",
            analyzed_at=analyzed_at,
            created_at=created_at + timedelta(hours=5),
        ),
    }

    db.add_all(rows.values())
    db.commit()
    for row in rows.values():
        db.refresh(row)
    return rows
