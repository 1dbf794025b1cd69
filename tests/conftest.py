"""Pytest configuration and shared fixtures."""

import pytest
import structlog
from pathlib import Path

from techspec.config import TechSpecConfig


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging() calls so streams captured by one test are not reused."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture(scope="session")
def fixtures_path():
    """Path to test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def sample_content_path(fixtures_path):
    """Path to a complete answers file."""
    return fixtures_path / "payment_retries.yaml"


@pytest.fixture
def temp_output_dir(tmp_path):
    """Temporary output directory for generated documents."""
    output_dir = tmp_path / "generated_docs"
    output_dir.mkdir()
    return output_dir


@pytest.fixture
def config():
    """Config with fixed metadata defaults."""
    return TechSpecConfig(default_owner="Platform Team", default_version="0.9")


@pytest.fixture
def mandatory_content():
    """Content for exactly the sections an author must supply."""
    return {
        "problem_statement": "Users **cannot** track X.",
        "goal": ["Track X for every order"],
        "changes": ["Add an X column to orders"],
        "risk": [["Backfill is slow", "Medium", "Low", "Run it in batches"]],
        "alternatives": [{"option": "Do nothing", "rejection_reason": "Support load keeps growing"}],
        "implementation_plan": [{"name": "Backfill", "tasks": ["Write migration"]}],
        "metrics": [{"definition": "Orders with X set", "kpi": "100%"}],
        "quality_attributes": {"reliability": {"definition": "No orders lost during backfill"}},
        "follow_up": [{"task": "Expose X in reports", "estimate": "3d"}],
    }


@pytest.fixture
def full_content(mandatory_content):
    """Content for every section in the schema."""
    return {
        "title": "Order X Tracking",
        "metadata": {
            "date": "2026-01-15",
            "owner": "Dana Ortiz",
            "version": "1.0",
            "status": "Approved",
            "reviewers": ["Sam Lee"],
            "changelog": [["1.0", "2026-01-15", "Initial draft"]],
        },
        **mandatory_content,
        "proposed_solution": "Store X on the order row.",
        "architecture_diagrams": ["Orders --> X service"],
        "schema_specification": "ALTER TABLE orders ADD COLUMN x TEXT;",
        "api_specification": [{"method": "get", "path": "/orders/{id}/x", "response": {"x": "abc"}}],
        "ui_flow": ["Open order", "See X"],
        "security_privacy": "X contains no personal data.",
    }
