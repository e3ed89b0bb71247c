"""
Recordbook — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own data file under pytest's tmp_path; the HTTP
       client wires that file into the app through dependency_overrides,
       so no test ever touches the working directory's records.json.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── data_file: Path of a not-yet-existing records.json
    ├── record_store: JsonFileStore over data_file
    ├── sample_payload: A complete, valid create body
    ├── write_records: Helper writing raw documents to data_file
    └── test_client: HTTPX AsyncClient bound to a fresh app
"""

import json
import os
import tempfile
from pathlib import Path

# Point the default store somewhere harmless BEFORE any recordbook import
os.environ["DATA_FILE"] = str(Path(tempfile.mkdtemp(prefix="recordbook_test_")) / "records.json")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from recordbook.storage import JsonFileStore, get_record_store


@pytest.fixture
def data_file(tmp_path):
    """Path to a records file that does not exist yet."""
    return tmp_path / "records.json"


@pytest.fixture
def record_store(data_file):
    return JsonFileStore(data_file)


@pytest.fixture
def sample_payload():
    """
    A complete create body, in the wire (camelCase) spelling.
    """
    return {
        "title": "A",
        "description": "d",
        "startDate": "2024-01-01",
        "endDate": "2024-01-02",
        "status": "open",
    }


@pytest.fixture
def write_records(data_file):
    """
    Write raw documents straight to the data file.

    Usage:
        write_records([{"id": 2, "title": "x"}])
    """

    def _write(documents):
        data_file.write_text(json.dumps(documents, indent=2), encoding="utf-8")

    return _write


@pytest_asyncio.fixture
async def test_client(record_store):
    """
    Async HTTP test client talking to a fresh app over ASGITransport.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/records")
            assert response.status_code == 200
    """
    from recordbook.main import create_app

    app = create_app()
    app.dependency_overrides[get_record_store] = lambda: record_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
