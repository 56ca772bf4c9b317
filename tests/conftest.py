"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown with seeded companies and jobs
- FastAPI test client
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db, run_query
from app.models import Company, Job  # noqa: F401  registers the tables
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores REFERENCES unless asked, unlike PostgreSQL"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _seed(db):
    for n in (1, 2, 3):
        run_query(
            db,
            """INSERT INTO companies (handle, name, num_employees, description, logo_url)
               VALUES ($1, $2, $3, $4, $5)""",
            [f"c{n}", f"C{n}", n, f"Desc{n}", f"http://c{n}.img"],
        )

    # Inserted out of title order so ordering is exercised
    run_query(
        db,
        """INSERT INTO jobs (title, salary, equity, company_handle)
           VALUES ($1, $2, $3, $4)""",
        ["job2", 300, "0", "c2"],
    )
    run_query(
        db,
        """INSERT INTO jobs (title, salary, equity, company_handle)
           VALUES ($1, $2, $3, $4)""",
        ["job1", 100, "0.1", "c1"],
    )
    db.commit()


@pytest.fixture
def db_session():
    """
    Create a fresh, seeded database session for each test.

    Seed data:
        companies c1, c2, c3 (name C<n>, numEmployees <n>)
        jobs job1 (c1, salary 100, equity "0.1") and job2 (c2, 300, "0")
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    _seed(db)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def job_ids(db_session):
    """Map of seeded job title -> generated id."""
    rows = run_query(db_session, "SELECT id, title FROM jobs")
    return {row["title"]: row["id"] for row in rows}


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_job_data():
    """Sample job data for testing"""
    return {
        "title": "Senior Python Developer",
        "salary": 150000,
        "equity": "0.05",
        "companyHandle": "c3",
    }
