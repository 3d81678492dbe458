"""Pytest configuration and fixtures."""

import os
import tempfile

import pytest
import pytest_asyncio

# Settings() is evaluated at import time, so the environment must be ready
# before any test module imports the application.
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("QDRANT_URL", "http://localhost:6333")
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'itda-global-test.db')}",
)
os.environ["DEBUG"] = "false"
os.environ["LANGSMITH_TRACING"] = "false"
os.environ["LANGCHAIN_TRACING_V2"] = "false"

from itda.services.database_service import DatabaseService  # noqa: E402
from tests.fakes.fake_gateways import sample_analysis  # noqa: E402
from itda.schemas.analysis_schemas import AnalysisResult  # noqa: E402


@pytest_asyncio.fixture
async def store(tmp_path):
    """Fresh SQLite-backed history store per test."""
    service = DatabaseService(f"sqlite+aiosqlite:///{tmp_path / 'itda.db'}")
    await service.create_tables()
    yield service
    await service.close()


@pytest.fixture
def analysis():
    return AnalysisResult.model_validate(sample_analysis())
